"""
Unit tests for the code generator: renderers, precedence and the workspace compiler.
"""

import ast
import logging
import pytest
from hypothesis import given, settings, strategies as st
from physics_ide_core.block_registry import BlockRegistry, get_default_registry
from physics_ide_core.code_generator import (
    Order, needs_parentheses, WorkspaceCompiler, compile_workspace, with_program_header,
    get_code_metrics
)
from physics_ide_core.config import CompilerSettings
from physics_ide_core.models import Block, VariableRef, Workspace
from physics_ide_core.symbols import VariableTable


REGISTRY = get_default_registry()
EMPTY_PLACEHOLDER = "# Drag blocks here to build your VPython model\n"
ERROR_PLACEHOLDER = "# Code generation error -- see console\n"


def compile_blocks(*heads, variables=None):
    workspace = Workspace(variables=variables or VariableTable())
    for head in heads:
        workspace.add_chain(head)
    return WorkspaceCompiler(settings=CompilerSettings()).compile(workspace)


def minimal_loop():
    """[time step, forever( rate, update position )] with the DT slot left empty."""
    time_step = REGISTRY.create_block('time_step_block', DT=0.01)
    loop = REGISTRY.create_block('forever_loop_block')
    rate = REGISTRY.create_block('rate_block', N=100)
    update = REGISTRY.create_block('update_position_block', OBJ='ball')
    rate.next = update
    loop.statement_slots['BODY'] = rate
    time_step.next = loop
    return time_step


class TestNeedsParentheses:
    """Test cases for precedence decisions."""

    def test_tighter_child_is_not_wrapped(self):
        assert needs_parentheses(Order.MULTIPLICATIVE, Order.ATOMIC) is False
        assert needs_parentheses(Order.MULTIPLICATIVE, Order.UNARY_SIGN) is False

    def test_looser_child_is_wrapped(self):
        assert needs_parentheses(Order.MULTIPLICATIVE, Order.ADDITIVE) is True
        assert needs_parentheses(Order.MEMBER, Order.ADDITIVE) is True

    def test_equal_strength_is_wrapped_except_overrides(self):
        assert needs_parentheses(Order.ADDITIVE, Order.ADDITIVE) is True
        assert needs_parentheses(Order.MEMBER, Order.MEMBER) is False
        assert needs_parentheses(Order.LOGICAL_AND, Order.LOGICAL_AND) is False

    def test_no_context_never_wraps(self):
        assert needs_parentheses(Order.NONE, Order.CONDITIONAL) is False
        assert needs_parentheses(Order.NONE, Order.NONE) is False


class TestWorkspaceCompiler:
    """Test cases for WorkspaceCompiler."""

    def test_empty_workspace_yields_placeholder(self):
        compiler = WorkspaceCompiler(settings=CompilerSettings())
        assert compiler.compile(Workspace()) == EMPTY_PLACEHOLDER
        assert compiler.compile(None) == EMPTY_PLACEHOLDER

    def test_minimal_loop_scenario(self):
        """Test the time step + forever loop scenario with an empty DT slot."""
        code = compile_blocks(minimal_loop())

        assert code == (
            "dt = 0.01\n"
            "while True:\n"
            "    rate(100)\n"
            "    ball.pos = ball.pos + ball.velocity * dt\n"
        )

    def test_top_level_chains_keep_document_order(self):
        first = REGISTRY.create_block('rate_block', N=30)
        second = REGISTRY.create_block('break_loop_block')

        assert compile_blocks(first, second) == "rate(30)\nbreak\n"
        assert compile_blocks(second, first) == "break\nrate(30)\n"

    def test_empty_bodies_emit_pass(self):
        code = compile_blocks(REGISTRY.create_block('forever_loop_block'))
        assert code == "while True:\n    pass\n"

    def test_comment_only_body_gets_pass(self):
        loop = REGISTRY.create_block('forever_loop_block')
        loop.statement_slots['BODY'] = REGISTRY.create_block('comment_block', TEXT='todo')

        code = compile_blocks(loop)

        assert code == "while True:\n    # todo\n    pass\n"
        ast.parse(code)

    def test_unknown_kind_alone_in_body_still_parses(self):
        branch = REGISTRY.create_block('if_else_block')
        branch.statement_slots['BODY_IF'] = Block(kind='mystery_block')
        loop = REGISTRY.create_block('forever_loop_block')
        loop.statement_slots['BODY'] = branch

        code = compile_blocks(loop)

        assert "        # unknown block: mystery_block\n        pass\n" in code
        ast.parse(code)

    def test_nested_bodies_are_indented(self):
        loop = REGISTRY.create_block('forever_loop_block')
        loop.statement_slots['BODY'] = REGISTRY.create_block('for_range_block')

        code = compile_blocks(loop)

        assert code == "while True:\n    for i in range(0, 10, 1):\n        pass\n"

    def test_indent_follows_settings(self):
        compiler = WorkspaceCompiler(settings=CompilerSettings(indent='  '))
        workspace = Workspace()
        workspace.add_chain(minimal_loop())

        assert "\n  rate(100)\n" in compiler.compile(workspace)

    def test_unknown_kind_becomes_comment(self, caplog):
        with caplog.at_level(logging.WARNING, logger='physics_ide_core.code_generator'):
            code = compile_blocks(Block(kind='mystery_block'), Block(kind='mystery_block'))

        assert code == "# unknown block: mystery_block\n# unknown block: mystery_block\n"
        warnings = [r for r in caplog.records if 'mystery_block' in r.message]
        assert len(warnings) == 1

    def test_unknown_value_kind_uses_slot_fallback(self):
        sphere = REGISTRY.create_block('sphere_block')
        sphere.value_slots['POS'] = Block(kind='mystery_value', produces_value=True)

        assert 'pos=vector(0, 0, 0)' in compile_blocks(sphere)

    def test_statement_in_value_slot_uses_slot_fallback(self):
        sphere = REGISTRY.create_block('sphere_block')
        sphere.value_slots['POS'] = REGISTRY.create_block('rate_block')

        assert 'pos=vector(0, 0, 0)' in compile_blocks(sphere)

    def test_loose_value_block_becomes_expression_statement(self):
        assert compile_blocks(REGISTRY.create_block('vector_block')) == "vector(0, 0, 0)\n"

    def test_generator_failure_replaces_whole_output(self, caplog):
        registry = BlockRegistry()

        @registry.block_kind('ok_block')
        def ok_block(block, ctx):
            return 'x = 1\n'

        @registry.block_kind('boom_block')
        def boom_block(block, ctx):
            raise RuntimeError('boom')

        workspace = Workspace()
        head = Block(kind='ok_block')
        head.next = Block(kind='boom_block')
        workspace.add_chain(head)

        with caplog.at_level(logging.ERROR, logger='physics_ide_core.code_generator'):
            code = WorkspaceCompiler(registry=registry, settings=CompilerSettings()).compile(workspace)

        assert code == ERROR_PLACEHOLDER
        assert any(record.levelno == logging.ERROR for record in caplog.records)

    def test_compile_does_not_mutate_tables(self):
        variables = VariableTable({'v1': 'ball'})
        update = REGISTRY.create_block('update_position_block', OBJ=VariableRef('v1'))

        compile_blocks(update, variables=variables)

        assert variables.items() == [('v1', 'ball')]


class TestVariableRenamePropagation:
    """Test cases for variable renames between compiles."""

    def test_rename_changes_output(self):
        variables = VariableTable()
        var_id = variables.create('a')
        block = REGISTRY.create_block('set_scalar_block', NAME=VariableRef(var_id))

        assert compile_blocks(block, variables=variables) == "a = 0\n"

        variables.rename(var_id, 'b')
        code = compile_blocks(block, variables=variables)

        assert 'b' in code
        assert 'a' not in code

    def test_reference_missing_from_table_falls_back(self):
        block = REGISTRY.create_block('set_scalar_block', NAME=VariableRef('gone'))
        assert compile_blocks(block) == "var = 0\n"


class TestPrecedence:
    """Test cases for parenthesisation of nested expressions."""

    def arithmetic(self, op, a, b):
        block = REGISTRY.create_block('math_arithmetic', OP=op)
        block.value_slots['A'] = a
        block.value_slots['B'] = b
        return block

    def number(self, value):
        return REGISTRY.create_block('math_number', NUM=value)

    def assign(self, value):
        block = REGISTRY.create_block('set_scalar_block', NAME='x')
        block.value_slots['VALUE'] = value
        return compile_blocks(block)

    def test_looser_operand_is_wrapped(self):
        total = self.arithmetic('ADD', self.number(1), self.number(2))
        assert self.assign(self.arithmetic('MULTIPLY', total, self.number(3))) == "x = (1 + 2) * 3\n"

    def test_tighter_operand_is_not_wrapped(self):
        product = self.arithmetic('MULTIPLY', self.number(2), self.number(3))
        assert self.assign(self.arithmetic('ADD', self.number(1), product)) == "x = 1 + 2 * 3\n"

    def test_negative_base_of_power(self):
        power = self.arithmetic('POWER', self.number(-2), self.number(2))
        assert self.assign(power) == "x = (-2) ** 2\n"

    def test_fallback_literals_are_never_wrapped(self):
        assert self.assign(REGISTRY.create_block('math_arithmetic', OP='MINUS')) == "x = 0 - 0\n"

    def test_acceleration_sum_is_wrapped_in_force_update(self):
        force = REGISTRY.create_block('apply_force_block', OBJ='ball')
        force.value_slots['ACCEL'] = self.arithmetic(
            'ADD',
            REGISTRY.create_block('variables_get', VAR='g'),
            REGISTRY.create_block('variables_get', VAR='drag'),
        )

        assert compile_blocks(force) == "ball.velocity = ball.velocity + (g + drag) * dt\n"


class TestHelpers:
    """Test cases for module-level helpers."""

    def test_program_header_is_prepended(self):
        assert with_program_header("x = 1\n") == "GlowScript 3.2 VPython\nx = 1\n"

    def test_existing_header_is_kept(self):
        code = "Web VPython 3.2\nx = 1\n"
        assert with_program_header(code) == code
        assert with_program_header(with_program_header("x = 1\n")) == "GlowScript 3.2 VPython\nx = 1\n"

    def test_code_metrics(self):
        metrics = get_code_metrics("# c\nx = 1\n")

        assert metrics['comment_lines'] == 1
        assert metrics['non_empty_lines'] == 2

    def test_compile_workspace_uses_default_registry(self):
        workspace = Workspace()
        workspace.add_chain(REGISTRY.create_block('break_loop_block'))
        assert compile_workspace(workspace) == "break\n"

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv('PHYSICS_IDE_INDENT_SIZE', '2')
        assert CompilerSettings.from_env().indent == '  '

        monkeypatch.setenv('PHYSICS_IDE_INDENT_SIZE', 'wide')
        assert CompilerSettings.from_env().indent == '    '


# Property-based tests
@settings(max_examples=50, deadline=None)
@given(st.lists(st.sampled_from(sorted(kind.name for kind in REGISTRY)), max_size=12))
def test_compile_is_total_and_deterministic_property(kind_names):
    """Property test: any workspace of empty-slot blocks compiles to parseable text, twice the same."""
    workspace = Workspace()
    for name in kind_names:
        workspace.add_chain(REGISTRY.create_block(name))

    compiler = WorkspaceCompiler(settings=CompilerSettings())
    first = compiler.compile(workspace)
    second = compiler.compile(workspace)

    assert first == second
    assert first != ERROR_PLACEHOLDER
    ast.parse(first)
