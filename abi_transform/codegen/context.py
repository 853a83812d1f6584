"""
Code generation context for the fragment generators.

This module provides a context class that holds the state shared by the
dispatch, ABI-constant and declaration generators while they render one
class, separating state management from the generation logic.
"""

from dataclasses import dataclass, field
from typing import Optional, Set

from .diagnostics import TransformDiagnostics


@dataclass
class CodeGenerationContext:
    """
    Holds all state needed while rendering generated source for one class.
    """

    # Indentation state
    indent_level: int = 0
    indent_str: str = '    '

    # Import tracking
    transaction_imports: Set[str] = field(default_factory=set)
    opnet_imports: Set[str] = field(default_factory=set)

    # Diagnostics collector
    _diagnostics: Optional[TransformDiagnostics] = None

    @property
    def diagnostics(self) -> TransformDiagnostics:
        """Get the diagnostics collector, creating one if needed."""
        if self._diagnostics is None:
            self._diagnostics = TransformDiagnostics()
        return self._diagnostics

    def indent(self) -> str:
        """Return the current indentation string."""
        return self.indent_str * self.indent_level

    def reset_for_class(self) -> None:
        """Reset indentation and import tracking before rendering a new class."""
        self.indent_level = 0
        self.transaction_imports = set()
        self.opnet_imports = set()
