"""
Motion and assignment blocks.
"""

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind
from .code_generator import Order
from .value_blocks import ZERO_VECTOR


DT = ValueSlot('DT', 'dt', 'Number')
VALUE = ValueSlot('VALUE', '0')


@block_kind('set_velocity_block', category='motion',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'ball'),),
            value_slots=(ValueSlot('VEL', ZERO_VECTOR, 'Vector'),))
def set_velocity_block(block, ctx):
    """Give an object a velocity. Objects do not have one until it is set."""
    obj = ctx.var_field(block, 'OBJ', 'obj')
    vel = ctx.render_value(block, 'VEL')
    return f'{obj}.velocity = {vel}\n'


@block_kind('update_position_block', category='motion',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'ball'),),
            value_slots=(DT,))
def update_position_block(block, ctx):
    """Euler step: pos = pos + velocity * dt."""
    obj = ctx.var_field(block, 'OBJ', 'obj')
    dt = ctx.render_value(block, 'DT', order=Order.MULTIPLICATIVE)
    return f'{obj}.pos = {obj}.pos + {obj}.velocity * {dt}\n'


@block_kind('apply_force_block', category='motion',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'ball'),),
            value_slots=(ValueSlot('ACCEL', ZERO_VECTOR, 'Vector'), DT))
def apply_force_block(block, ctx):
    """Update velocity from an acceleration: velocity = velocity + accel * dt."""
    obj = ctx.var_field(block, 'OBJ', 'obj')
    accel = ctx.render_value(block, 'ACCEL', order=Order.MULTIPLICATIVE)
    dt = ctx.render_value(block, 'DT', order=Order.MULTIPLICATIVE)
    return f'{obj}.velocity = {obj}.velocity + {accel} * {dt}\n'


@block_kind('set_gravity_block', category='motion',
            fields=(FieldSpec('G', FieldKind.NUMBER, 9.81),))
def set_gravity_block(block, ctx):
    """Downward gravity vector named ``g``."""
    g = ctx.number_field(block, 'G', 9.81)
    return f'g = vector(0, -{g}, 0)\n'


@block_kind('set_scalar_block', category='motion',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, 'var'),),
            value_slots=(VALUE,))
def set_scalar_block(block, ctx):
    """name = value"""
    name = ctx.var_field(block, 'NAME', 'var')
    value = ctx.render_value(block, 'VALUE')
    return f'{name} = {value}\n'


@block_kind('set_vector_expr_block', category='motion',
            fields=(FieldSpec('NAME', FieldKind.VARIABLE, 'v'),
                    FieldSpec('VALUE', FieldKind.TEXT, '0,0,0')))
def set_vector_expr_block(block, ctx):
    """name = vector(components) from comma-separated component text."""
    name = ctx.var_field(block, 'NAME', 'v')
    value = ctx.text_field(block, 'VALUE', '0,0,0')
    return f'{name} = vector({value})\n'


@block_kind('set_attr_expr_block', category='motion',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'obj'),
                    FieldSpec('ATTR', FieldKind.TEXT, 'value')),
            value_slots=(VALUE,))
def set_attr_expr_block(block, ctx):
    """obj.attr = value; ATTR may be dotted, e.g. ``pos.x``."""
    obj = ctx.var_field(block, 'OBJ', 'obj')
    attr = ctx.text_field(block, 'ATTR', 'value')
    value = ctx.render_value(block, 'VALUE')
    return f'{obj}.{attr} = {value}\n'


@block_kind('add_attr_expr_block', category='motion',
            fields=(FieldSpec('OBJ', FieldKind.VARIABLE, 'ball'),
                    FieldSpec('ATTR', FieldKind.TEXT, 'velocity')),
            value_slots=(VALUE,))
def add_attr_expr_block(block, ctx):
    """obj.attr += value"""
    obj = ctx.var_field(block, 'OBJ', 'ball')
    attr = ctx.text_field(block, 'ATTR', 'velocity')
    value = ctx.render_value(block, 'VALUE')
    return f'{obj}.{attr} += {value}\n'


@block_kind('define_constant_block', category='motion',
            fields=(FieldSpec('NAME', FieldKind.TEXT, 'my_const'),),
            value_slots=(VALUE,))
def define_constant_block(block, ctx):
    """Emit a custom constant's definition; later references use its name."""
    name = ctx.text_field(block, 'NAME', 'my_const')
    registered = ctx.constants.literal_for(name)
    value = ctx.render_value(block, 'VALUE', fallback=registered or '0')
    return f'{name} = {value}\n'
