"""
Errors raised by the ABI transform.

Every fatal condition aborts manifest generation for the whole compilation
unit. Non-fatal findings go to the diagnostics collector instead.
"""

from typing import Optional


class AbiTransformError(Exception):
    """Base class for all fatal transform errors."""


class UnresolvedTypeError(AbiTransformError):
    """A type spelling could not be resolved while building the manifest."""

    def __init__(self, class_name: str, member_name: str, spelling: str, kind: str = 'method'):
        self.class_name = class_name
        self.member_name = member_name
        self.spelling = spelling
        self.kind = kind
        super().__init__(
            f'Invalid ABI type "{spelling}" in {kind} {class_name}.{member_name}'
        )


class DeclarationNotFoundError(AbiTransformError):
    """An annotated declaration is missing from the host's resolved program."""

    def __init__(self, class_name: str, method_name: str):
        self.class_name = class_name
        self.method_name = method_name
        super().__init__(f'Method {class_name}.{method_name} not found in the program.')


class HostInputError(AbiTransformError):
    """The declaration dump handed over by the host is malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f'{path}: {message}'
        super().__init__(message)
