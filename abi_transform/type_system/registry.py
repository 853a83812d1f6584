"""
Alias table for ABI type spellings.

The TypeAliasTable resolves the many spellings accepted at annotation sites
(runtime built-ins like ``u256``, canonical forms like ``uint256``, and the
enum-qualified ``ABIDataTypes.UINT256`` form) to a single AbiTypeTag, and
renders any tag back to its canonical spelling.
"""

from typing import Dict, List, Optional

from .abi_types import AbiTypeTag, ABI_TYPE_TO_STR, STR_TO_ABI_TYPE, ENUM_PREFIX


class TypeAliasTable:
    """
    Bidirectional mapping between accepted spellings and AbiTypeTag values.

    Lookup is case-sensitive. Unknown spellings resolve to None; nothing in
    this class raises for bad input.
    """

    def __init__(self):
        self._aliases: Dict[str, AbiTypeTag] = dict(STR_TO_ABI_TYPE)
        self._canonical: Dict[AbiTypeTag, str] = dict(ABI_TYPE_TO_STR)

    def resolve(self, spelling: str) -> Optional[AbiTypeTag]:
        """Resolve a spelling to its tag, or None if it is not an accepted alias."""
        return self._aliases.get(spelling)

    def canonicalize(self, tag: AbiTypeTag) -> str:
        """Return the canonical spelling of a tag."""
        return self._canonical[tag]

    def is_known(self, spelling: str) -> bool:
        return spelling in self._aliases

    def canonical_spelling(self, spelling: str) -> Optional[str]:
        """Resolve then canonicalize in one step; None for unknown spellings."""
        tag = self.resolve(spelling)
        if tag is None:
            return None
        return self._canonical[tag]

    @staticmethod
    def is_enum_qualified(spelling: str) -> bool:
        """Check whether a spelling uses the ``ABIDataTypes.`` prefix."""
        return spelling.startswith(ENUM_PREFIX)

    def spellings(self) -> List[str]:
        """All accepted spellings, in table order."""
        return list(self._aliases)

    def tags(self) -> List[AbiTypeTag]:
        return list(self._canonical)
