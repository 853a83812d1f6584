"""
Method signatures and 4-byte call selectors.

A signature is ``name(type1,type2,...)`` built only from canonical type
spellings. The selector is the first four bytes of the SHA-256 digest of the
UTF-8 signature, rendered as lowercase hex. Both the algorithm and the width
are fixed by the contract ABI consumed by client libraries.
"""

import hashlib
from typing import List, Optional

from ..parser import ParamDefinition, param_type
from ..type_system import TupleTypeResolver


SELECTOR_HASH_ALGORITHM = 'sha256'
SELECTOR_BYTE_LENGTH = 4


def encode_selector(signature: str) -> str:
    """Return the 8-hex-character selector for a canonical signature."""
    digest = hashlib.new(SELECTOR_HASH_ALGORITHM, signature.encode('utf-8')).digest()
    return digest[:SELECTOR_BYTE_LENGTH].hex()


def selector_literal(selector: str) -> str:
    """Render a selector as a numeric literal for generated source, e.g. ``0x1a2b3c4d``."""
    return f'0x{selector}'


class SelectorEncoder:
    """Builds canonical signatures from parameter definitions."""

    def __init__(self, tuple_resolver: Optional[TupleTypeResolver] = None):
        self._tuples = tuple_resolver or TupleTypeResolver()

    def canonical_type(self, spelling: str) -> Optional[str]:
        """Canonical spelling for any accepted alias, enum-qualified or tuple form."""
        tag = self._tuples.resolve_tuple_or_scalar(spelling)
        if tag is not None:
            return self._tuples.alias_table.canonicalize(tag)
        return None

    def canonical_types(self, params: List[ParamDefinition]) -> List[Optional[str]]:
        return [self.canonical_type(param_type(p)) for p in params]

    def build_signature(self, method_name: str, canonical_types: List[str]) -> str:
        """Join a method name and canonical parameter types; ``name()`` when empty."""
        return f'{method_name}({",".join(canonical_types)})'

    def encode(self, method_name: str, canonical_types: List[str]):
        """Return ``(signature, selector)`` for a method."""
        signature = self.build_signature(method_name, canonical_types)
        return signature, encode_selector(signature)
