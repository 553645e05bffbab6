"""
Control blocks: animation pacing, loops and conditionals.

Every construct with a body goes through ``render_statement_slot``, which emits
``pass`` for an empty body so the output always parses.
"""

from .block_registry import FieldKind, FieldSpec, ValueSlot, block_kind
from .formatting import number_or_default


COND = ValueSlot('COND', 'True', 'Boolean')
COND_TEXT = FieldSpec('COND', FieldKind.TEXT, '')


def _condition(ctx, block) -> str:
    # A typed condition in the COND text field stands in for an empty COND slot
    return ctx.render_value(block, 'COND', fallback=ctx.text_field(block, 'COND', 'True'))


def _range_arg(ctx, block, name: str, default: str) -> str:
    value = block.get_field(name)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return number_or_default(value, default)
    return ctx.text_field(block, name, default)


@block_kind('rate_block', category='control',
            fields=(FieldSpec('N', FieldKind.NUMBER, 100),))
def rate_block(block, ctx):
    """Cap the animation loop at N iterations per second."""
    return f"rate({ctx.number_field(block, 'N', 100)})\n"


@block_kind('time_step_block', category='control',
            fields=(FieldSpec('DT', FieldKind.NUMBER, 0.01),))
def time_step_block(block, ctx):
    """dt = step"""
    return f"dt = {ctx.number_field(block, 'DT', 0.01)}\n"


@block_kind('forever_loop_block', category='control', statement_slots=('BODY',))
def forever_loop_block(block, ctx):
    """while True:"""
    return f"while True:\n{ctx.render_statement_slot(block, 'BODY')}"


@block_kind('for_range_block', category='control',
            fields=(FieldSpec('VAR', FieldKind.VARIABLE, 'i'),
                    FieldSpec('START', FieldKind.TEXT, '0'),
                    FieldSpec('STOP', FieldKind.TEXT, '10'),
                    FieldSpec('STEP', FieldKind.TEXT, '1')),
            statement_slots=('BODY',))
def for_range_block(block, ctx):
    """Counted loop over [start, stop) by step."""
    var = ctx.var_field(block, 'VAR', 'i')
    start = _range_arg(ctx, block, 'START', '0')
    stop = _range_arg(ctx, block, 'STOP', '10')
    step = _range_arg(ctx, block, 'STEP', '1')
    body = ctx.render_statement_slot(block, 'BODY')
    return f'for {var} in range({start}, {stop}, {step}):\n{body}'


@block_kind('if_block', category='control',
            fields=(COND_TEXT,),
            value_slots=(COND,),
            statement_slots=('BODY',))
def if_block(block, ctx):
    cond = _condition(ctx, block)
    return f"if {cond}:\n{ctx.render_statement_slot(block, 'BODY')}"


@block_kind('if_else_block', category='control',
            fields=(COND_TEXT,),
            value_slots=(COND,),
            statement_slots=('BODY_IF', 'BODY_ELSE'))
def if_else_block(block, ctx):
    cond = _condition(ctx, block)
    body_if = ctx.render_statement_slot(block, 'BODY_IF')
    body_else = ctx.render_statement_slot(block, 'BODY_ELSE')
    return f'if {cond}:\n{body_if}else:\n{body_else}'


@block_kind('break_loop_block', category='control')
def break_loop_block(block, ctx):
    """Leave the innermost loop. Only meaningful inside a loop body."""
    return 'break\n'
