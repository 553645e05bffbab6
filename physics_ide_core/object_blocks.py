"""
Scene object constructors.

Each constructor block calls ``render_value`` once per slot it exposes and splices the
results into a fixed-shape constructor call. The optional NAME variable decides between
``name = sphere(...)`` and a bare ``sphere(...)``.
"""

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind
from .formatting import DEFAULT_COLOR, color_field_to_literal, hex_color_to_literal, quote_literal
from .value_blocks import ZERO_VECTOR


UNIT_AXIS = 'vector(1, 0, 0)'
UNIT_SIZE = 'vector(1, 1, 1)'

NAME = FieldSpec('NAME', FieldKind.VARIABLE, '')
POS = ValueSlot('POS', ZERO_VECTOR, 'Vector')
AXIS = ValueSlot('AXIS', UNIT_AXIS, 'Vector')
SIZE = ValueSlot('SIZE', UNIT_SIZE, 'Vector')
COL = ValueSlot('COL', DEFAULT_COLOR, 'Colour')


def construct(ctx, block, expr: str) -> str:
    """Assign the constructor call to the NAME variable, or emit it bare."""
    name = ctx.var_field(block, 'NAME', '')
    return f'{name} = {expr}\n' if name else f'{expr}\n'


@block_kind('sphere_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, ValueSlot('RADIUS', '1', 'Number'), COL))
def sphere_block(block, ctx):
    """Basic sphere."""
    pos = ctx.render_value(block, 'POS')
    radius = ctx.render_value(block, 'RADIUS')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, f'sphere(pos={pos}, radius={radius}, color={col})')


@block_kind('sphere_trail_block', category='objects',
            fields=(NAME,),
            value_slots=(POS,
                         ValueSlot('RADIUS', '0.5', 'Number'),
                         COL,
                         ValueSlot('TRAIL_R', '0.03', 'Number'),
                         ValueSlot('TRAIL_COL', 'color.yellow', 'Colour'),
                         ValueSlot('RETAIN', '200', 'Number')))
def sphere_trail_block(block, ctx):
    """Sphere leaving a trail; trail settings only take effect in the constructor."""
    pos = ctx.render_value(block, 'POS')
    radius = ctx.render_value(block, 'RADIUS')
    col = ctx.render_value(block, 'COL')
    trail_r = ctx.render_value(block, 'TRAIL_R')
    trail_col = ctx.render_value(block, 'TRAIL_COL')
    retain = ctx.render_value(block, 'RETAIN')
    return construct(ctx, block, (
        f'sphere(pos={pos}, radius={radius}, color={col}, make_trail=True, '
        f'trail_radius={trail_r}, trail_color={trail_col}, retain={retain}, shininess=0.6)'
    ))


@block_kind('sphere_emissive_block', category='objects',
            fields=(NAME,),
            value_slots=(POS,
                         ValueSlot('RADIUS', '0.5', 'Number'),
                         COL,
                         ValueSlot('OPACITY', '1', 'Number')))
def sphere_emissive_block(block, ctx):
    """Self-glowing sphere for stars, lights and particles."""
    pos = ctx.render_value(block, 'POS')
    radius = ctx.render_value(block, 'RADIUS')
    col = ctx.render_value(block, 'COL')
    opacity = ctx.render_value(block, 'OPACITY')
    return construct(ctx, block, (
        f'sphere(pos={pos}, radius={radius}, color={col}, emissive=True, '
        f'opacity={opacity}, shininess=0.8)'
    ))


@block_kind('box_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, SIZE, COL))
def box_block(block, ctx):
    """Box."""
    pos = ctx.render_value(block, 'POS')
    size = ctx.render_value(block, 'SIZE')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, f'box(pos={pos}, size={size}, color={col})')


@block_kind('box_opacity_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, SIZE, COL, ValueSlot('OPACITY', '0.5', 'Number')))
def box_opacity_block(block, ctx):
    """Semi-transparent box. Opacity 0 is invisible, 1 is solid."""
    pos = ctx.render_value(block, 'POS')
    size = ctx.render_value(block, 'SIZE')
    col = ctx.render_value(block, 'COL')
    opacity = ctx.render_value(block, 'OPACITY')
    return construct(ctx, block, f'box(pos={pos}, size={size}, color={col}, opacity={opacity})')


@block_kind('cylinder_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, AXIS, ValueSlot('RADIUS', '0.5', 'Number'), COL))
def cylinder_block(block, ctx):
    """Cylinder from pos to pos + axis."""
    pos = ctx.render_value(block, 'POS')
    axis = ctx.render_value(block, 'AXIS')
    radius = ctx.render_value(block, 'RADIUS')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, f'cylinder(pos={pos}, axis={axis}, radius={radius}, color={col})')


@block_kind('arrow_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, AXIS, COL))
def arrow_block(block, ctx):
    """Arrow; update its axis each frame to animate direction and length."""
    pos = ctx.render_value(block, 'POS')
    axis = ctx.render_value(block, 'AXIS')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, f'arrow(pos={pos}, axis={axis}, color={col})')


@block_kind('helix_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, AXIS, ValueSlot('RADIUS', '0.3', 'Number'), COL))
def helix_block(block, ctx):
    """Helix or spring."""
    pos = ctx.render_value(block, 'POS')
    axis = ctx.render_value(block, 'AXIS')
    radius = ctx.render_value(block, 'RADIUS')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, f'helix(pos={pos}, axis={axis}, radius={radius}, color={col})')


@block_kind('helix_full_block', category='objects',
            fields=(NAME,),
            value_slots=(POS, AXIS,
                         ValueSlot('RADIUS', '0.3', 'Number'),
                         ValueSlot('COILS', '10', 'Number'),
                         ValueSlot('THICK', '0.05', 'Number'),
                         COL))
def helix_full_block(block, ctx):
    """Spring with explicit coil count and wire thickness."""
    pos = ctx.render_value(block, 'POS')
    axis = ctx.render_value(block, 'AXIS')
    radius = ctx.render_value(block, 'RADIUS')
    coils = ctx.render_value(block, 'COILS')
    thick = ctx.render_value(block, 'THICK')
    col = ctx.render_value(block, 'COL')
    return construct(ctx, block, (
        f'helix(pos={pos}, axis={axis}, radius={radius}, coils={coils}, '
        f'thickness={thick}, color={col})'
    ))


@block_kind('label_block', category='objects',
            fields=(NAME, FieldSpec('TEXT', FieldKind.TEXT, 'telemetry')),
            value_slots=(POS,))
def label_block(block, ctx):
    """On-screen text label: white text, no box, transparent background."""
    text = quote_literal(block.get_field('TEXT') or '')
    pos = ctx.render_value(block, 'POS')
    return construct(ctx, block, (
        f'label(text={text}, pos={pos}, box=False, opacity=0, color=color.white)'
    ))


@block_kind('label_full_block', category='objects',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, 'telemetry'),
                    FieldSpec('TEXT', FieldKind.TEXT, '')),
            value_slots=(POS, ValueSlot('HEIGHT', '12', 'Number')))
def label_full_block(block, ctx):
    """Named HUD label with a font height."""
    pos = ctx.render_value(block, 'POS')
    text = quote_literal(block.get_field('TEXT') or '')
    height = ctx.render_value(block, 'HEIGHT')
    return construct(ctx, block, (
        f'label(pos={pos}, text={text}, height={height}, box=False, opacity=0, color=color.white)'
    ))


@block_kind('preset_sphere_block', category='starter',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, 'ball'),
                    FieldSpec('X', FieldKind.NUMBER, 0),
                    FieldSpec('Y', FieldKind.NUMBER, 0),
                    FieldSpec('Z', FieldKind.NUMBER, 0),
                    FieldSpec('R', FieldKind.NUMBER, 1),
                    FieldSpec('COL', FieldKind.COLOUR, '#ff4545')))
def preset_sphere_block(block, ctx):
    """Sphere with every setting inline, no value slots."""
    x = ctx.number_field(block, 'X', 0)
    y = ctx.number_field(block, 'Y', 0)
    z = ctx.number_field(block, 'Z', 0)
    r = ctx.number_field(block, 'R', 1)
    col = hex_color_to_literal(block.get_field('COL'))
    return construct(ctx, block, f'sphere(pos=vector({x}, {y}, {z}), radius={r}, color={col})')


@block_kind('preset_box_block', category='starter',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, 'wall'),
                    FieldSpec('X', FieldKind.NUMBER, 0),
                    FieldSpec('Y', FieldKind.NUMBER, 0),
                    FieldSpec('Z', FieldKind.NUMBER, 0),
                    FieldSpec('SX', FieldKind.NUMBER, 1),
                    FieldSpec('SY', FieldKind.NUMBER, 1),
                    FieldSpec('SZ', FieldKind.NUMBER, 1),
                    FieldSpec('COL', FieldKind.COLOUR, '#336633')))
def preset_box_block(block, ctx):
    """Box with every setting inline, no value slots."""
    x = ctx.number_field(block, 'X', 0)
    y = ctx.number_field(block, 'Y', 0)
    z = ctx.number_field(block, 'Z', 0)
    sx = ctx.number_field(block, 'SX', 1)
    sy = ctx.number_field(block, 'SY', 1)
    sz = ctx.number_field(block, 'SZ', 1)
    col = hex_color_to_literal(block.get_field('COL'))
    return construct(ctx, block, (
        f'box(pos=vector({x}, {y}, {z}), size=vector({sx}, {sy}, {sz}), color={col})'
    ))


def _text_vector(ctx, block, names, default: str = '0') -> str:
    return 'vector({})'.format(', '.join(ctx.text_field(block, name, default) for name in names))


@block_kind('cylinder_expr_block', category='objects',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, ''),
                    FieldSpec('X', FieldKind.TEXT, '0'),
                    FieldSpec('Y', FieldKind.TEXT, '0'),
                    FieldSpec('Z', FieldKind.TEXT, '0'),
                    FieldSpec('R', FieldKind.TEXT, '0.5'),
                    FieldSpec('COL', FieldKind.TEXT, '#00ff00'),
                    FieldSpec('AX', FieldKind.TEXT, '0'),
                    FieldSpec('AY', FieldKind.TEXT, '0'),
                    FieldSpec('AZ', FieldKind.TEXT, '0')))
def cylinder_expr_block(block, ctx):
    """Cylinder whose components are typed expressions, e.g. ``i * 2``."""
    pos = _text_vector(ctx, block, ('X', 'Y', 'Z'))
    axis = _text_vector(ctx, block, ('AX', 'AY', 'AZ'))
    radius = ctx.text_field(block, 'R', '0.5')
    col = color_field_to_literal(block.get_field('COL'))
    return construct(ctx, block, f'cylinder(pos={pos}, axis={axis}, radius={radius}, color={col})')


@block_kind('sphere_expr_block', category='objects',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, ''),
                    FieldSpec('X', FieldKind.TEXT, '0'),
                    FieldSpec('Y', FieldKind.TEXT, '0'),
                    FieldSpec('Z', FieldKind.TEXT, '0'),
                    FieldSpec('R', FieldKind.TEXT, '0.5'),
                    FieldSpec('COL', FieldKind.TEXT, '#ffffff'),
                    FieldSpec('EXTRA', FieldKind.TEXT, '')))
def sphere_expr_block(block, ctx):
    """Sphere from typed expressions; EXTRA is appended as further keyword arguments."""
    pos = _text_vector(ctx, block, ('X', 'Y', 'Z'))
    radius = ctx.text_field(block, 'R', '0.5')
    col = color_field_to_literal(block.get_field('COL'))
    extra = ctx.text_field(block, 'EXTRA', '')
    extra_part = f', {extra}' if extra else ''
    return construct(ctx, block, f'sphere(pos={pos}, radius={radius}, color={col}{extra_part})')
