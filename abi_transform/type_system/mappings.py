"""
Type-hint mappings for generated declaration files.

This module maps ABI type tags to the TypeScript types used by the client
library when calling a contract. The hints are only used for emitted type
fragments and never participate in signature or selector computation.
"""

from typing import Dict, Set

from .abi_types import AbiTypeTag


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

ABI_TYPE_TO_TS_MAP: Dict[AbiTypeTag, str] = {
    # Integers up to 32 bits fit a JS number
    AbiTypeTag.UINT8: 'number',
    AbiTypeTag.UINT16: 'number',
    AbiTypeTag.UINT32: 'number',
    AbiTypeTag.INT8: 'number',
    AbiTypeTag.INT16: 'number',
    AbiTypeTag.INT32: 'number',
    # Wider integers -> bigint
    AbiTypeTag.UINT64: 'bigint',
    AbiTypeTag.UINT128: 'bigint',
    AbiTypeTag.UINT256: 'bigint',
    AbiTypeTag.INT64: 'bigint',
    AbiTypeTag.INT128: 'bigint',
    # Addresses
    AbiTypeTag.ADDRESS: 'Address',
    AbiTypeTag.EXTENDED_ADDRESS: 'Address',
    AbiTypeTag.ARRAY_OF_ADDRESSES: 'Address[]',
    AbiTypeTag.ARRAY_OF_EXTENDED_ADDRESSES: 'Address[]',
    # Amount tuples -> ordered map keyed by address
    AbiTypeTag.ADDRESS_UINT256_TUPLE: 'AddressMap<bigint>',
    AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE: 'ExtendedAddressMap<bigint>',
    # Raw bytes
    AbiTypeTag.BYTES: 'Uint8Array',
    AbiTypeTag.BYTES4: 'Uint8Array',
    AbiTypeTag.BYTES32: 'Uint8Array',
    AbiTypeTag.ARRAY_OF_BYTES: 'Uint8Array[]',
    AbiTypeTag.ARRAY_OF_BUFFERS: 'Uint8Array[]',
    # Native
    AbiTypeTag.BOOL: 'boolean',
    AbiTypeTag.STRING: 'string',
    AbiTypeTag.ARRAY_OF_STRING: 'string[]',
    AbiTypeTag.SCHNORR_SIGNATURE: 'SchnorrSignature',
    # Integer arrays
    AbiTypeTag.ARRAY_OF_UINT8: 'number[]',
    AbiTypeTag.ARRAY_OF_UINT16: 'number[]',
    AbiTypeTag.ARRAY_OF_UINT32: 'number[]',
    AbiTypeTag.ARRAY_OF_UINT64: 'bigint[]',
    AbiTypeTag.ARRAY_OF_UINT128: 'bigint[]',
    AbiTypeTag.ARRAY_OF_UINT256: 'bigint[]',
}

# Hint types that must be imported from the transaction library
TRANSACTION_LIBRARY_TYPES: Set[str] = {
    'Address',
    'AddressMap',
    'ExtendedAddressMap',
    'SchnorrSignature',
}


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def abi_type_to_ts(tag: AbiTypeTag) -> str:
    """Map an ABI type tag to its TypeScript type hint ('unknown' if unmapped)."""
    return ABI_TYPE_TO_TS_MAP.get(tag, 'unknown')


def ts_imports_for(ts_type: str) -> Set[str]:
    """Return the transaction-library names referenced by a type hint.

    E.g. ``AddressMap<bigint>`` -> ``{'AddressMap'}``
    """
    base = ts_type.split('<', 1)[0].rstrip('[]')
    if base in TRANSACTION_LIBRARY_TYPES:
        return {base}
    return set()
