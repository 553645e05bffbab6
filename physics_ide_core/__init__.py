"""
Physics IDE Core - the block-to-VPython compiler behind the visual physics editor.

This package renders a workspace of connected blocks into a GlowScript VPython program:
the registry of block kinds, one code generator per kind, and the tree-walk that turns
the block graph into complete, syntactically valid source.
"""

__version__ = "0.1.0"
__author__ = "Physics IDE Development Team"

from .models import Block, BlockShape, VariableRef, Workspace, ValidationError
from .symbols import (
    VariableTable, ConstantRegistry, CustomConstant, PhysicsConstant, PHYSICS_CONSTANTS,
    VariableResolver, ConstantResolver
)
from .formatting import escape_literal, hex_color_to_literal, named_color_to_literal
from .config import CompilerSettings
from .block_registry import (
    BlockKind, BlockRegistry, FieldKind, FieldSpec, ValueSlot,
    block_kind, default_registry, get_default_registry
)
from .code_generator import (
    Order, GenerationContext, WorkspaceCompiler, compile_workspace, with_program_header
)
from .serialization import workspace_from_dict, workspace_to_dict
from .templates import list_templates, load_template

__all__ = [
    'Block', 'BlockShape', 'VariableRef', 'Workspace', 'ValidationError',
    'VariableTable', 'ConstantRegistry', 'CustomConstant', 'PhysicsConstant',
    'PHYSICS_CONSTANTS', 'VariableResolver', 'ConstantResolver',
    'escape_literal', 'hex_color_to_literal', 'named_color_to_literal',
    'CompilerSettings',
    'BlockKind', 'BlockRegistry', 'FieldKind', 'FieldSpec', 'ValueSlot',
    'block_kind', 'default_registry', 'get_default_registry',
    'Order', 'GenerationContext', 'WorkspaceCompiler', 'compile_workspace',
    'with_program_header',
    'workspace_from_dict', 'workspace_to_dict',
    'list_templates', 'load_template',
]
