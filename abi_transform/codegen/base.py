"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used by the dispatch, ABI-constant and declaration generators.
"""

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext


class BaseGenerator:
    """
    Base class for all code generators.

    Provides shared utilities for:
    - Indentation management
    - String literal quoting
    - Name formatting
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indent(self) -> str:
        """Return the current indentation string."""
        return self._ctx.indent()

    @property
    def indent_level(self) -> int:
        """Get the current indentation level."""
        return self._ctx.indent_level

    @indent_level.setter
    def indent_level(self, value: int):
        """Set the current indentation level."""
        self._ctx.indent_level = value

    def line(self, text: str = '') -> str:
        """Return ``text`` at the current indentation (blank lines stay empty)."""
        if not text:
            return ''
        return f'{self.indent()}{text}'

    # =========================================================================
    # VALUE FORMATTING
    # =========================================================================

    @staticmethod
    def quote(value: str) -> str:
        """Render a single-quoted TypeScript string literal."""
        escaped = value.replace('\\', '\\\\').replace("'", "\\'")
        return f"'{escaped}'"

    @staticmethod
    def pascal_case(name: str) -> str:
        """Upper-case the first character, e.g. ``balanceOf`` -> ``BalanceOf``."""
        if not name:
            return name
        return name[0].upper() + name[1:]

    @staticmethod
    def join_lines(lines: List[str]) -> str:
        return '\n'.join(lines) + '\n'
