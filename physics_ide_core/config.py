"""
Compiler settings.

Defaults can be overridden through environment variables:

    PHYSICS_IDE_INDENT_SIZE   spaces per indentation level (default 4)
"""

import os
from dataclasses import dataclass


DEFAULT_INDENT_SIZE = 4


@dataclass(frozen=True)
class CompilerSettings:
    """Text conventions of the generated program."""
    indent: str = ' ' * DEFAULT_INDENT_SIZE
    empty_placeholder: str = "# Drag blocks here to build your VPython model\n"
    error_placeholder: str = "# Code generation error -- see console\n"
    program_header: str = "GlowScript 3.2 VPython"

    @classmethod
    def from_env(cls) -> 'CompilerSettings':
        raw = os.environ.get('PHYSICS_IDE_INDENT_SIZE', '')
        try:
            size = int(raw) if raw else DEFAULT_INDENT_SIZE
        except ValueError:
            size = DEFAULT_INDENT_SIZE
        if size < 1:
            size = DEFAULT_INDENT_SIZE
        return cls(indent=' ' * size)
