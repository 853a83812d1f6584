"""
Diagnostic/warning system for the ABI transform.

Collects and reports non-fatal findings made while collecting annotations
and synthesizing dispatch code, such as events nobody emits or routing
procedures that were overwritten.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for transform diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    file_path: str = ''
    construct: str = ''  # e.g., 'event', 'execute'

    def __str__(self) -> str:
        if self.file_path:
            return f'[{self.severity.value}] {self.file_path}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class TransformDiagnostics:
    """
    Collects transform warnings/diagnostics during a compilation unit.

    Usage:
        diag = TransformDiagnostics()
        diag.warn_unused_event("Minted", "Token")
        # ... after the transform ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def count(self) -> int:
        return len(self._diagnostics)

    def clear(self) -> None:
        self._diagnostics.clear()

    def codes(self) -> List[str]:
        return [d.code for d in self._diagnostics]

    # =========================================================================
    # SPECIFIC WARNING METHODS
    # =========================================================================

    def warn_unused_event(self, event_name: str, class_name: str, file_path: str = '') -> None:
        """Warn that an event class is declared but no method emits it."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=f'Event "{event_name}" (class {class_name}) is declared but never '
                    f'referenced by an @emit annotation.',
            file_path=file_path,
            construct='event',
        ))

    def warn_undeclared_event(self, event_name: str, class_name: str, method_name: str) -> None:
        """Warn that @emit names an event no event class declares."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W002',
            message=f'{class_name}.{method_name} emits "{event_name}", '
                    f'which is not a declared event.',
            construct='event',
        ))

    def warn_class_not_found(self, class_name: str) -> None:
        """Warn that a class with methods has no declaration to splice into."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W003',
            message=f'Class declaration not found for {class_name}; execute was not injected.',
            construct='execute',
        ))

    def info_execute_overwritten(self, class_name: str, file_path: str = '') -> None:
        """Info that an existing execute method was replaced."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f"Overwriting existing 'execute' in class {class_name}",
            file_path=file_path,
            construct='execute',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nTransform warnings ({len(warnings)}):', file=file)
            by_construct: Dict[str, List[Diagnostic]] = {}
            for w in warnings:
                by_construct.setdefault(w.construct or 'other', []).append(w)

            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

        if infos and self._verbose:
            print(f'\nTransform info ({len(infos)}):', file=file)
            for d in infos:
                print(f'  {d}', file=file)

    def get_summary(self) -> str:
        """Get a summary string of all warnings."""
        warnings = self.warnings
        if not warnings:
            return 'No transform warnings.'

        by_construct: Dict[str, int] = {}
        for w in warnings:
            key = w.construct or 'other'
            by_construct[key] = by_construct.get(key, 0) + 1

        parts = [f'{count} {construct}' for construct, count in sorted(by_construct.items())]
        return f'Transform warnings: {", ".join(parts)}'

    def first(self, code: str) -> Optional[Diagnostic]:
        for d in self._diagnostics:
            if d.code == code:
                return d
        return None
