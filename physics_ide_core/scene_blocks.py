"""
Scene properties, lighting and utility blocks (comments, raw code, telemetry).
"""

from typing import List

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind
from .formatting import DEFAULT_COLOR, escape_literal, hex_color_to_literal, quote_literal
from .value_blocks import ZERO_VECTOR


TELEMETRY_ROWS = 5
TELEMETRY_ROW_SEPARATOR = ' + "\\n" + '


@block_kind('scene_setup_block', category='scene',
            fields=(FieldSpec('TITLE', FieldKind.TEXT, 'My Simulation'),
                    FieldSpec('BG', FieldKind.COLOUR, '#000000')))
def scene_setup_block(block, ctx):
    """Window title and background colour."""
    title = quote_literal(block.get_field('TITLE') or '')
    bg = hex_color_to_literal(block.get_field('BG'))
    return f'scene.title = {title}\nscene.background = {bg}\n'


@block_kind('scene_range_block', category='scene',
            fields=(FieldSpec('R', FieldKind.NUMBER, 10),))
def scene_range_block(block, ctx):
    """Visible distance from the centre of the view."""
    return f"scene.range = {ctx.number_field(block, 'R', 10)}\n"


@block_kind('scene_forward_block', category='scene',
            value_slots=(ValueSlot('VEC', 'vector(0, 0, -1)', 'Vector'),))
def scene_forward_block(block, ctx):
    """Camera viewing direction."""
    return f"scene.forward = {ctx.render_value(block, 'VEC')}\n"


@block_kind('scene_center_block', category='scene',
            value_slots=(ValueSlot('VEC', ZERO_VECTOR, 'Vector'),))
def scene_center_block(block, ctx):
    """Point the camera looks at."""
    return f"scene.center = {ctx.render_value(block, 'VEC')}\n"


@block_kind('scene_caption_block', category='scene',
            fields=(FieldSpec('TEXT', FieldKind.TEXT, ''),))
def scene_caption_block(block, ctx):
    """Text shown below the 3D canvas."""
    return f"scene.caption = {quote_literal(block.get_field('TEXT') or '')}\n"


@block_kind('scene_ambient_block', category='scene',
            fields=(FieldSpec('GRAY', FieldKind.NUMBER, 0.3),))
def scene_ambient_block(block, ctx):
    """Ambient light level from 0 (dark) to 1 (bright)."""
    return f"scene.ambient = color.gray({ctx.number_field(block, 'GRAY', 0.3)})\n"


@block_kind('local_light_block', category='scene',
            value_slots=(ValueSlot('POS', ZERO_VECTOR, 'Vector'),
                         ValueSlot('COL', DEFAULT_COLOR, 'Colour')))
def local_light_block(block, ctx):
    """Point light at a position."""
    pos = ctx.render_value(block, 'POS')
    col = ctx.render_value(block, 'COL')
    return f'local_light(pos={pos}, color={col})\n'


@block_kind('comment_block', category='utility',
            fields=(FieldSpec('TEXT', FieldKind.TEXT, ''),))
def comment_block(block, ctx):
    """Single-line comment; line breaks in the text are escaped."""
    return f"# {escape_literal(block.get_field('TEXT') or '')}\n"


@block_kind('python_raw_block', category='utility',
            fields=(FieldSpec('CODE', FieldKind.TEXT, ''),))
def python_raw_block(block, ctx):
    """Insert any line of code as written."""
    code = block.get_field('CODE')
    return f"{'' if code is None else code}\n"


@block_kind('exec_block', category='utility',
            fields=(FieldSpec('EXPR', FieldKind.TEXT, ''),))
def exec_block(block, ctx):
    """Run an expression as a statement, e.g. a function call."""
    return f"{ctx.text_field(block, 'EXPR', '')}\n"


def _telemetry_fields():
    fields = [FieldSpec('LABEL', FieldKind.VARIABLE, 'telemetry')]
    for i in range(1, TELEMETRY_ROWS + 1):
        fields.extend([
            FieldSpec(f'M{i}', FieldKind.TEXT, ''),
            FieldSpec(f'V{i}', FieldKind.TEXT, ''),
            FieldSpec(f'D{i}', FieldKind.NUMBER, 2),
            FieldSpec(f'U{i}', FieldKind.TEXT, ''),
        ])
    return tuple(fields)


@block_kind('telemetry_update_block', category='utility',
            fields=_telemetry_fields(),
            value_slots=tuple(ValueSlot(f'V{i}', None) for i in range(1, TELEMETRY_ROWS + 1)))
def telemetry_update_block(block, ctx):
    """Refresh a label's text with up to five rounded, unit-suffixed readings.

    A row is shown only when it has a metric name and a value. The value comes from
    the connected V slot, or from the V text field when the slot is empty.
    """
    label = ctx.var_field(block, 'LABEL', 'telemetry')
    rows: List[str] = []

    for i in range(1, TELEMETRY_ROWS + 1):
        metric = ctx.text_field(block, f'M{i}', '')
        value = ctx.render_value(block, f'V{i}') or ctx.text_field(block, f'V{i}', '')
        if not metric or not value:
            continue

        decimals = ctx.number_field(block, f'D{i}', 2)
        unit = ctx.text_field(block, f'U{i}', '')
        row = f'"{escape_literal(metric)} = " + str(round({value}, {decimals}))'
        if unit:
            row += f' + " {escape_literal(unit)}"'
        rows.append(row)

    if not rows:
        return f'{label}.text = ""\n'
    return f'{label}.text = {TELEMETRY_ROW_SEPARATOR.join(rows)}\n'
