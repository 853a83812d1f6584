"""
Tuple type strings.

Compound parameters are spelled ``tuple(<type>,<type>,...)[]``. Only two
field combinations are meaningful to the runtime (the plain and extended
address-with-amount idioms); everything else in this module is grammar
and alias normalization.
"""

import re
from typing import List, Optional, Tuple

from .abi_types import AbiTypeTag
from .registry import TypeAliasTable


TUPLE_RE = re.compile(r'^tuple\(([^()]+)\)\[\]$')

# Canonical inner types of the reserved idioms
RESERVED_TUPLE_IDIOMS = {
    ('address', 'uint256'): AbiTypeTag.ADDRESS_UINT256_TUPLE,
    ('extendedAddress', 'uint256'): AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE,
}


class TupleTypeResolver:
    """Parses, validates and canonicalizes tuple type strings."""

    def __init__(self, alias_table: Optional[TypeAliasTable] = None):
        self._aliases = alias_table or TypeAliasTable()

    @property
    def alias_table(self) -> TypeAliasTable:
        return self._aliases

    def is_tuple_string(self, value: str) -> bool:
        """True if the whole string is ``tuple(...)[]`` with no nested parentheses."""
        return TUPLE_RE.match(value) is not None

    def parse_inner_types(self, value: str) -> List[str]:
        """Split the inner type list of a tuple string; [] if not a tuple string.

        E.g. ``tuple(address, uint256)[]`` -> ``['address', 'uint256']``
        """
        match = TUPLE_RE.match(value)
        if not match:
            return []
        return [part.strip() for part in match.group(1).split(',')]

    def validate_inner_types(self, value: str) -> List[str]:
        """Return the inner spellings the alias table cannot resolve.

        An empty list means the tuple is fully valid. A string that is not a
        tuple string at all comes back as ``[value]``.
        """
        inner = self.parse_inner_types(value)
        if not inner:
            return [value]
        return [t for t in inner if not self._aliases.is_known(t)]

    def canonicalize_tuple_string(self, value: str) -> Optional[str]:
        """Re-render a tuple string with canonical inner spellings.

        E.g. ``tuple(Address,u256)[]`` -> ``tuple(address,uint256)[]``.
        Returns None if the string is not a tuple or any inner type is unknown.
        """
        canonical = self._canonical_inner(value)
        if canonical is None:
            return None
        return f'tuple({",".join(canonical)})[]'

    def resolve_tuple_or_scalar(self, value: str) -> Optional[AbiTypeTag]:
        """Resolve a tuple string to a reserved idiom, or any other string via aliases.

        A tuple whose inner types are all valid but do not form one of the
        reserved idioms still resolves to None.
        """
        if not self.is_tuple_string(value):
            return self._aliases.resolve(value)

        direct = self._aliases.resolve(value)
        if direct in RESERVED_TUPLE_IDIOMS.values():
            return direct

        canonical = self._canonical_inner(value)
        if canonical is None:
            return None
        return RESERVED_TUPLE_IDIOMS.get(canonical)

    def _canonical_inner(self, value: str) -> Optional[Tuple[str, ...]]:
        inner = self.parse_inner_types(value)
        if not inner:
            return None
        canonical = []
        for spelling in inner:
            name = self._aliases.canonical_spelling(spelling)
            if name is None:
                return None
            canonical.append(name)
        return tuple(canonical)
