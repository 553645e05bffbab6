"""
Value blocks: small expression blocks that snap into value slots.
"""

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind, default_registry
from .code_generator import Order
from .formatting import DEFAULT_COLOR, NAMED_COLORS, hex_color_to_literal, named_color_to_literal
from .symbols import PHYSICS_CONSTANTS


ZERO_VECTOR = 'vector(0, 0, 0)'

_XYZ = (
    FieldSpec('X', FieldKind.NUMBER, 0),
    FieldSpec('Y', FieldKind.NUMBER, 0),
    FieldSpec('Z', FieldKind.NUMBER, 0),
)


@block_kind('vector_block', category='values', fields=_XYZ, produces_value=True)
def vector_block(block, ctx):
    """vector(x, y, z) literal."""
    x = ctx.number_field(block, 'X', 0)
    y = ctx.number_field(block, 'Y', 0)
    z = ctx.number_field(block, 'Z', 0)
    return f'vector({x}, {y}, {z})', Order.ATOMIC


@block_kind('colour_block', category='values',
            fields=(FieldSpec('COL', FieldKind.COLOUR, '#ffffff'),
                    FieldSpec('PALETTE', FieldKind.DROPDOWN, 'custom',
                              tuple(NAMED_COLORS) + ('custom',))),
            produces_value=True)
def colour_block(block, ctx):
    """Palette colour, or the picked hex colour when the palette is set to custom."""
    named = named_color_to_literal(block.get_field('PALETTE'))
    if named is not None:
        return named, Order.ATOMIC
    literal = hex_color_to_literal(block.get_field('COL'))
    return literal or DEFAULT_COLOR, Order.ATOMIC


@block_kind('expr_block', category='values',
            fields=(FieldSpec('EXPR', FieldKind.TEXT, '0'),),
            produces_value=True)
def expr_block(block, ctx):
    """Free-text expression inserted as written."""
    return ctx.text_field(block, 'EXPR', '0'), Order.ATOMIC


@block_kind('physics_const_block', category='values',
            fields=(FieldSpec('CONST', FieldKind.DROPDOWN, 'g', tuple(PHYSICS_CONSTANTS)),),
            produces_value=True)
def physics_const_block(block, ctx):
    """Built-in physics constant or a user-defined constant's name."""
    return ctx.resolve_const(block.get_field('CONST')), Order.ATOMIC


@block_kind('get_prop_block', category='physics_expressions',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'ball'),
                    FieldSpec('ATTR', FieldKind.TEXT, 'pos')),
            produces_value=True)
def get_prop_block(block, ctx):
    """Read a property of an object: ``ball.velocity``."""
    obj = ctx.var_field(block, 'OBJ', 'obj')
    attr = ctx.text_field(block, 'ATTR', 'pos')
    return f'{obj}.{attr}', Order.MEMBER


@block_kind('get_component_block', category='physics_expressions',
            fields=(FieldSpec('COMP', FieldKind.DROPDOWN, 'x', ('x', 'y', 'z')),),
            value_slots=(ValueSlot('VEC', ZERO_VECTOR, 'Vector'),),
            produces_value=True)
def get_component_block(block, ctx):
    """x, y or z component of a vector."""
    comp = ctx.text_field(block, 'COMP', 'x')
    if comp not in ('x', 'y', 'z'):
        comp = 'x'
    vec = ctx.render_value(block, 'VEC', order=Order.MEMBER)
    return f'{vec}.{comp}', Order.MEMBER


@block_kind('mag_block', category='physics_expressions',
            value_slots=(ValueSlot('VEC', ZERO_VECTOR, 'Vector'),),
            produces_value=True)
def mag_block(block, ctx):
    """Magnitude of a vector."""
    return f"mag({ctx.render_value(block, 'VEC')})", Order.FUNCTION_CALL


@block_kind('norm_block', category='physics_expressions',
            value_slots=(ValueSlot('VEC', ZERO_VECTOR, 'Vector'),),
            produces_value=True)
def norm_block(block, ctx):
    """Unit vector in the direction of the input."""
    return f"norm({ctx.render_value(block, 'VEC')})", Order.FUNCTION_CALL


default_registry.alias('python_raw_expr_block', 'expr_block',
                       'Insert a Python expression that outputs a value.')
