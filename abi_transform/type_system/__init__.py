"""
Type system for the ABI transform.

This module provides the ABI type tags, the alias table, tuple type strings
and the type-hint mappings used by generated declaration files.
"""

from .abi_types import AbiTypeTag, ABI_TYPE_TO_STR, STR_TO_ABI_TYPE, ENUM_PREFIX
from .registry import TypeAliasTable
from .tuples import TupleTypeResolver, RESERVED_TUPLE_IDIOMS
from .mappings import abi_type_to_ts, ts_imports_for, ABI_TYPE_TO_TS_MAP

__all__ = [
    'AbiTypeTag',
    'ABI_TYPE_TO_STR',
    'STR_TO_ABI_TYPE',
    'ENUM_PREFIX',
    'TypeAliasTable',
    'TupleTypeResolver',
    'RESERVED_TUPLE_IDIOMS',
    'abi_type_to_ts',
    'ts_imports_for',
    'ABI_TYPE_TO_TS_MAP',
]
