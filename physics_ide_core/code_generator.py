"""
Code Generator for producing VPython source from a block workspace.

The renderers walk the block graph top-down:

    WorkspaceCompiler.compile
        -> GenerationContext.render_chain        (statement chains, indented)
            -> generator(block, ctx)             (one per block kind)
                -> ctx.render_value              (value slots, recursive)
                -> ctx.render_statement_slot     (nested loop / branch bodies)

Expected gaps in the graph (empty slots, bad literals, unresolved names) are absorbed
where they occur. Only ``WorkspaceCompiler.compile`` catches unexpected failures, and
it then replaces the whole output with a diagnostic line: a half-rendered program
could run with the wrong physics.
"""

import logging
import re
from enum import IntEnum
from typing import Any, Dict, NamedTuple, Optional, Set

from .block_registry import BlockRegistry, get_default_registry
from .config import CompilerSettings
from .formatting import number_or_default
from .models import Block, Workspace
from .symbols import ConstantResolver, VariableResolver


class Order(IntEnum):
    """Binding strength of an expression, tightest first."""
    ATOMIC = 0
    MEMBER = 2
    FUNCTION_CALL = 3
    EXPONENTIATION = 4
    UNARY_SIGN = 5
    MULTIPLICATIVE = 6
    ADDITIVE = 7
    RELATIONAL = 11
    LOGICAL_NOT = 12
    LOGICAL_AND = 13
    LOGICAL_OR = 14
    CONDITIONAL = 15
    NONE = 99


# (outer, inner) pairs that never need parentheses even at equal strength
_ORDER_OVERRIDES = {
    (Order.FUNCTION_CALL, Order.MEMBER),
    (Order.FUNCTION_CALL, Order.FUNCTION_CALL),
    (Order.MEMBER, Order.MEMBER),
    (Order.MEMBER, Order.FUNCTION_CALL),
    (Order.LOGICAL_NOT, Order.LOGICAL_NOT),
    (Order.LOGICAL_AND, Order.LOGICAL_AND),
    (Order.LOGICAL_OR, Order.LOGICAL_OR),
}


class ValueCode(NamedTuple):
    """Rendered expression text plus its precedence tag."""
    text: str
    order: Order


def needs_parentheses(outer: Order, inner: Order) -> bool:
    """Whether an expression of strength ``inner`` must be wrapped to sit in ``outer``."""
    if outer > inner:
        return False
    if outer == inner and outer in (Order.ATOMIC, Order.NONE):
        return False
    return (outer, inner) not in _ORDER_OVERRIDES


def _has_code(body: str) -> bool:
    """Whether any line of ``body`` is a statement rather than blank or a comment."""
    for line in body.split('\n'):
        stripped = line.strip()
        if stripped and not stripped.startswith('#'):
            return True
    return False


class GenerationContext:
    """Per-compile state handed to every generator.

    Holds the registry, the resolver services built from the variable and constant
    snapshots, and the text conventions. A context is created for one compile call
    and discarded afterwards.
    """

    def __init__(self, registry: BlockRegistry,
                 variables: Optional[VariableResolver] = None,
                 constants: Optional[ConstantResolver] = None,
                 settings: Optional[CompilerSettings] = None):
        self.registry = registry
        self.variables = variables or VariableResolver({})
        self.constants = constants or ConstantResolver()
        self.settings = settings or CompilerSettings()
        self.logger = logging.getLogger(__name__)
        self.unknown_kinds: Set[str] = set()

    # ------------------------------------------------------------------
    # Symbol resolution
    # ------------------------------------------------------------------

    def resolve_var(self, field_value: Any, fallback: str) -> str:
        return self.variables.resolve(field_value, fallback)

    def resolve_const(self, key: Any) -> str:
        return self.constants.resolve(key)

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------

    def text_field(self, block: Block, name: str, default: str = "") -> str:
        """Stripped text of a free-text field, or ``default`` when empty."""
        value = block.get_field(name)
        text = '' if value is None else str(value).strip()
        return text or default

    def number_field(self, block: Block, name: str, default: Any) -> str:
        return number_or_default(block.get_field(name), default)

    def var_field(self, block: Block, name: str, fallback: str) -> str:
        return self.resolve_var(block.get_field(name), fallback)

    # ------------------------------------------------------------------
    # Expression rendering
    # ------------------------------------------------------------------

    def slot_fallback(self, block: Block, slot: str) -> str:
        """The documented fallback literal of ``slot`` on ``block``'s kind."""
        kind = self.registry.get(block.kind)
        spec = kind.get_value_slot(slot) if kind is not None else None
        if spec is None:
            raise KeyError(f"Block kind '{block.kind}' has no value slot '{slot}'")
        return spec.fallback or ''

    def render_value_code(self, block: Block, slot: str,
                          fallback: Optional[str] = None,
                          order: Order = Order.NONE) -> ValueCode:
        """Render the block connected at ``slot``, or the fallback when nothing is."""
        if fallback is None:
            fallback = self.slot_fallback(block, slot)

        child = block.get_value_block(slot)
        if child is None:
            return ValueCode(fallback, Order.ATOMIC)

        code = self.render_expression(child)
        if code is None or not code.text:
            return ValueCode(fallback, Order.ATOMIC)

        if needs_parentheses(order, code.order):
            return ValueCode(f'({code.text})', Order.ATOMIC)
        return code

    def render_value(self, block: Block, slot: str,
                     fallback: Optional[str] = None,
                     order: Order = Order.NONE) -> str:
        return self.render_value_code(block, slot, fallback, order).text

    def render_expression(self, block: Block) -> Optional[ValueCode]:
        """Dispatch an expression block to its generator.

        Returns ``None`` when the block cannot yield a value here (unknown kind, or a
        statement block wired into a value slot) so the caller substitutes its fallback.
        """
        kind = self.registry.get(block.kind)
        if kind is None:
            self._warn_unknown(block.kind)
            return None
        if not kind.produces_value:
            return None

        text, order = kind.generator(block, self)
        return ValueCode(text, Order(order))

    # ------------------------------------------------------------------
    # Statement rendering
    # ------------------------------------------------------------------

    def render_block(self, block: Block) -> str:
        """Render one statement block (not its successors)."""
        kind = self.registry.get(block.kind)
        if kind is None:
            self._warn_unknown(block.kind)
            return f"# unknown block: {block.kind}\n"

        if kind.produces_value:
            # A loose value block at statement position becomes an expression statement
            code = self.render_expression(block)
            return f"{code.text}\n" if code is not None else ''

        code = kind.generator(block, self)
        if code and not code.endswith('\n'):
            code += '\n'
        return code

    def render_chain(self, head: Optional[Block], indent_level: int = 0) -> str:
        """Render ``head`` and every block after it, indented by ``indent_level``."""
        if head is None:
            return ''
        code = ''.join(self.render_block(block) for block in head.iter_chain())
        return self.indent(code, indent_level)

    def render_statement_slot(self, block: Block, slot: str) -> str:
        """Render a nested body one level deeper, or a no-op when it is empty."""
        body = self.render_chain(block.get_statement_head(slot), 1)
        if not _has_code(body):
            # Comments alone do not form a block
            return f"{body}{self.settings.indent}pass\n"
        return body

    def indent(self, code: str, level: int = 1) -> str:
        if level <= 0 or not code:
            return code
        prefix = self.settings.indent * level
        # Split on newlines only: other line breaks may sit inside string literals
        return '\n'.join(
            prefix + line if line.strip() else line
            for line in code.split('\n')
        )

    def _warn_unknown(self, kind_name: str):
        if kind_name not in self.unknown_kinds:
            self.unknown_kinds.add(kind_name)
            self.logger.warning(f"No generator registered for block kind '{kind_name}'")


class WorkspaceCompiler:
    """Turns a workspace into a complete VPython program.

    ``compile`` always returns text: it is called on every edit in the editor and
    must never take the editing session down with it.
    """

    def __init__(self, registry: Optional[BlockRegistry] = None,
                 settings: Optional[CompilerSettings] = None):
        self.registry = registry or get_default_registry()
        self.settings = settings or CompilerSettings.from_env()
        self.logger = logging.getLogger(__name__)

    def create_context(self, workspace: Workspace) -> GenerationContext:
        return GenerationContext(
            registry=self.registry,
            variables=VariableResolver.from_table(workspace.variables),
            constants=ConstantResolver.from_registry(workspace.constants),
            settings=self.settings,
        )

    def compile(self, workspace: Optional[Workspace]) -> str:
        if workspace is None or workspace.is_empty():
            return self.settings.empty_placeholder

        try:
            context = self.create_context(workspace)
            code = ''.join(
                context.render_chain(head, 0)
                for head in list(workspace.top_level_chains)
            )
        except Exception as e:
            self.logger.error(f"Code generation failed: {e}", exc_info=True)
            return self.settings.error_placeholder

        if not code.strip():
            return self.settings.empty_placeholder

        self.logger.debug(
            f"Compiled {len(workspace.top_level_chains)} top-level chain(s) "
            f"into {code.count(chr(10))} line(s)"
        )
        return code


_HEADER_PATTERN = re.compile(r'^(GlowScript|Web\s+VPython)\s', re.IGNORECASE)


def with_program_header(code: str, header: str = CompilerSettings.program_header) -> str:
    """Prepend the runtime's dialect header unless the program already starts with one."""
    trimmed = code.lstrip()
    first_line = trimmed.split('\n', 1)[0]
    if _HEADER_PATTERN.match(first_line):
        return trimmed
    return f"{header}\n{trimmed}"


def get_code_metrics(code: str) -> Dict[str, Any]:
    """Get metrics about the generated code."""
    lines = code.split('\n')

    return {
        'total_lines': len(lines),
        'non_empty_lines': len([line for line in lines if line.strip()]),
        'comment_lines': len([line for line in lines if line.strip().startswith('#')]),
        'max_line_length': max(len(line) for line in lines) if lines else 0,
    }


def compile_workspace(workspace: Optional[Workspace],
                      registry: Optional[BlockRegistry] = None) -> str:
    """Compile ``workspace`` with the built-in block kinds."""
    return WorkspaceCompiler(registry=registry).compile(workspace)
