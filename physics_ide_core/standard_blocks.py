"""
The subset of Blockly's standard library the physics toolbox exposes.

These follow Blockly's stock Python generators, including the precedence each
operator reports, so nested arithmetic is parenthesised the same way.
"""

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind
from .code_generator import Order
from .formatting import number_or_default, quote_literal


ARITHMETIC_OPERATORS = {
    'ADD': (' + ', Order.ADDITIVE),
    'MINUS': (' - ', Order.ADDITIVE),
    'MULTIPLY': (' * ', Order.MULTIPLICATIVE),
    'DIVIDE': (' / ', Order.MULTIPLICATIVE),
    'POWER': (' ** ', Order.EXPONENTIATION),
}

COMPARISON_OPERATORS = {
    'EQ': '==',
    'NEQ': '!=',
    'LT': '<',
    'LTE': '<=',
    'GT': '>',
    'GTE': '>=',
}


@block_kind('math_number', category='math',
            fields=(FieldSpec('NUM', FieldKind.NUMBER, 0),),
            produces_value=True)
def math_number(block, ctx):
    code = number_or_default(block.get_field('NUM'), 0)
    order = Order.UNARY_SIGN if code.startswith('-') else Order.ATOMIC
    return code, order


@block_kind('math_arithmetic', category='math',
            fields=(FieldSpec('OP', FieldKind.DROPDOWN, 'ADD', tuple(ARITHMETIC_OPERATORS)),),
            value_slots=(ValueSlot('A', '0', 'Number'), ValueSlot('B', '0', 'Number')),
            produces_value=True)
def math_arithmetic(block, ctx):
    """Binary arithmetic; an unknown operator renders as addition."""
    operator, order = ARITHMETIC_OPERATORS.get(block.get_field('OP'), ARITHMETIC_OPERATORS['ADD'])
    a = ctx.render_value(block, 'A', order=order)
    b = ctx.render_value(block, 'B', order=order)
    return f'{a}{operator}{b}', order


@block_kind('logic_compare', category='logic',
            fields=(FieldSpec('OP', FieldKind.DROPDOWN, 'EQ', tuple(COMPARISON_OPERATORS)),),
            value_slots=(ValueSlot('A', '0'), ValueSlot('B', '0')),
            produces_value=True)
def logic_compare(block, ctx):
    operator = COMPARISON_OPERATORS.get(block.get_field('OP'), '==')
    a = ctx.render_value(block, 'A', order=Order.RELATIONAL)
    b = ctx.render_value(block, 'B', order=Order.RELATIONAL)
    return f'{a} {operator} {b}', Order.RELATIONAL


@block_kind('logic_operation', category='logic',
            fields=(FieldSpec('OP', FieldKind.DROPDOWN, 'AND', ('AND', 'OR')),),
            value_slots=(ValueSlot('A', 'False', 'Boolean'), ValueSlot('B', 'False', 'Boolean')),
            produces_value=True)
def logic_operation(block, ctx):
    if block.get_field('OP') == 'OR':
        operator, order = 'or', Order.LOGICAL_OR
    else:
        operator, order = 'and', Order.LOGICAL_AND
    a = ctx.render_value(block, 'A', order=order)
    b = ctx.render_value(block, 'B', order=order)
    return f'{a} {operator} {b}', order


@block_kind('logic_negate', category='logic',
            value_slots=(ValueSlot('BOOL', 'True', 'Boolean'),),
            produces_value=True)
def logic_negate(block, ctx):
    value = ctx.render_value(block, 'BOOL', order=Order.LOGICAL_NOT)
    return f'not {value}', Order.LOGICAL_NOT


@block_kind('logic_boolean', category='logic',
            fields=(FieldSpec('BOOL', FieldKind.DROPDOWN, 'TRUE', ('TRUE', 'FALSE')),),
            produces_value=True)
def logic_boolean(block, ctx):
    return ('False' if block.get_field('BOOL') == 'FALSE' else 'True'), Order.ATOMIC


@block_kind('text', category='text',
            fields=(FieldSpec('TEXT', FieldKind.TEXT, ''),),
            produces_value=True)
def text(block, ctx):
    """String literal."""
    return quote_literal(block.get_field('TEXT') or ''), Order.ATOMIC


@block_kind('variables_get', category='variables',
            fields=(FieldSpec('VAR', FieldKind.VARIABLE, 'x'),),
            produces_value=True)
def variables_get(block, ctx):
    return ctx.var_field(block, 'VAR', 'x'), Order.ATOMIC


@block_kind('variables_set', category='variables',
            fields=(FieldSpec('VAR', FieldKind.VARIABLE, 'x'),),
            value_slots=(ValueSlot('VALUE', '0'),))
def variables_set(block, ctx):
    name = ctx.var_field(block, 'VAR', 'x')
    value = ctx.render_value(block, 'VALUE')
    return f'{name} = {value}\n'
