"""
ABI type tags and their spellings.

This module contains the closed AbiTypeTag enumeration together with the
constant tables mapping every accepted source spelling to a tag and every
tag back to its single canonical spelling.
"""

from enum import Enum
from typing import Dict


class AbiTypeTag(Enum):
    """Closed set of ABI data types understood by the contract runtime."""

    # Scalars
    ADDRESS = 'ADDRESS'
    EXTENDED_ADDRESS = 'EXTENDED_ADDRESS'
    BOOL = 'BOOL'
    BYTES = 'BYTES'
    UINT256 = 'UINT256'
    UINT128 = 'UINT128'
    UINT64 = 'UINT64'
    UINT32 = 'UINT32'
    UINT16 = 'UINT16'
    UINT8 = 'UINT8'
    INT128 = 'INT128'
    INT64 = 'INT64'
    INT32 = 'INT32'
    INT16 = 'INT16'
    INT8 = 'INT8'
    STRING = 'STRING'
    BYTES4 = 'BYTES4'
    BYTES32 = 'BYTES32'
    SCHNORR_SIGNATURE = 'SCHNORR_SIGNATURE'

    # Reserved tuple idioms
    ADDRESS_UINT256_TUPLE = 'ADDRESS_UINT256_TUPLE'
    EXTENDED_ADDRESS_UINT256_TUPLE = 'EXTENDED_ADDRESS_UINT256_TUPLE'

    # Homogeneous arrays
    ARRAY_OF_ADDRESSES = 'ARRAY_OF_ADDRESSES'
    ARRAY_OF_EXTENDED_ADDRESSES = 'ARRAY_OF_EXTENDED_ADDRESSES'
    ARRAY_OF_UINT256 = 'ARRAY_OF_UINT256'
    ARRAY_OF_UINT128 = 'ARRAY_OF_UINT128'
    ARRAY_OF_UINT64 = 'ARRAY_OF_UINT64'
    ARRAY_OF_UINT32 = 'ARRAY_OF_UINT32'
    ARRAY_OF_UINT16 = 'ARRAY_OF_UINT16'
    ARRAY_OF_UINT8 = 'ARRAY_OF_UINT8'
    ARRAY_OF_BYTES = 'ARRAY_OF_BYTES'
    ARRAY_OF_BUFFERS = 'ARRAY_OF_BUFFERS'
    ARRAY_OF_STRING = 'ARRAY_OF_STRING'


# Prefix of the enum-qualified spelling accepted at annotation sites
ENUM_PREFIX = 'ABIDataTypes.'


# =============================================================================
# CANONICAL SPELLINGS
# =============================================================================

# One canonical spelling per tag. Signatures are built only from these.
ABI_TYPE_TO_STR: Dict[AbiTypeTag, str] = {
    AbiTypeTag.ADDRESS: 'address',
    AbiTypeTag.EXTENDED_ADDRESS: 'extendedAddress',
    AbiTypeTag.BOOL: 'bool',
    AbiTypeTag.BYTES: 'bytes',
    AbiTypeTag.UINT256: 'uint256',
    AbiTypeTag.UINT128: 'uint128',
    AbiTypeTag.UINT64: 'uint64',
    AbiTypeTag.UINT32: 'uint32',
    AbiTypeTag.UINT16: 'uint16',
    AbiTypeTag.UINT8: 'uint8',
    AbiTypeTag.INT128: 'int128',
    AbiTypeTag.INT64: 'int64',
    AbiTypeTag.INT32: 'int32',
    AbiTypeTag.INT16: 'int16',
    AbiTypeTag.INT8: 'int8',
    AbiTypeTag.STRING: 'string',
    AbiTypeTag.BYTES4: 'bytes4',
    AbiTypeTag.BYTES32: 'bytes32',
    AbiTypeTag.SCHNORR_SIGNATURE: 'schnorrSignature',
    AbiTypeTag.ADDRESS_UINT256_TUPLE: 'tuple(address,uint256)[]',
    AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE: 'tuple(extendedAddress,uint256)[]',
    AbiTypeTag.ARRAY_OF_ADDRESSES: 'address[]',
    AbiTypeTag.ARRAY_OF_EXTENDED_ADDRESSES: 'extendedAddress[]',
    AbiTypeTag.ARRAY_OF_UINT256: 'uint256[]',
    AbiTypeTag.ARRAY_OF_UINT128: 'uint128[]',
    AbiTypeTag.ARRAY_OF_UINT64: 'uint64[]',
    AbiTypeTag.ARRAY_OF_UINT32: 'uint32[]',
    AbiTypeTag.ARRAY_OF_UINT16: 'uint16[]',
    AbiTypeTag.ARRAY_OF_UINT8: 'uint8[]',
    AbiTypeTag.ARRAY_OF_BYTES: 'bytes[]',
    AbiTypeTag.ARRAY_OF_BUFFERS: 'buffer[]',
    AbiTypeTag.ARRAY_OF_STRING: 'string[]',
}


# =============================================================================
# ACCEPTED SPELLINGS
# =============================================================================

# Runtime built-in names and shorthand spellings
_SCALAR_ALIASES: Dict[str, AbiTypeTag] = {
    'u256': AbiTypeTag.UINT256,
    'u128': AbiTypeTag.UINT128,
    'u64': AbiTypeTag.UINT64,
    'u32': AbiTypeTag.UINT32,
    'u16': AbiTypeTag.UINT16,
    'u8': AbiTypeTag.UINT8,
    'i128': AbiTypeTag.INT128,
    'i64': AbiTypeTag.INT64,
    'i32': AbiTypeTag.INT32,
    'i16': AbiTypeTag.INT16,
    'i8': AbiTypeTag.INT8,
    'boolean': AbiTypeTag.BOOL,
    'String': AbiTypeTag.STRING,
    'Uint8Array': AbiTypeTag.BYTES,
    'Address': AbiTypeTag.ADDRESS,
    'ExtendedAddress': AbiTypeTag.EXTENDED_ADDRESS,
    'extended_address': AbiTypeTag.EXTENDED_ADDRESS,
    'SchnorrSignature': AbiTypeTag.SCHNORR_SIGNATURE,
    'schnorr_signature': AbiTypeTag.SCHNORR_SIGNATURE,
}

_ARRAY_ALIASES: Dict[str, AbiTypeTag] = {
    'Address[]': AbiTypeTag.ARRAY_OF_ADDRESSES,
    'ExtendedAddress[]': AbiTypeTag.ARRAY_OF_EXTENDED_ADDRESSES,
    'extended_address[]': AbiTypeTag.ARRAY_OF_EXTENDED_ADDRESSES,
    'u256[]': AbiTypeTag.ARRAY_OF_UINT256,
    'u128[]': AbiTypeTag.ARRAY_OF_UINT128,
    'u64[]': AbiTypeTag.ARRAY_OF_UINT64,
    'u32[]': AbiTypeTag.ARRAY_OF_UINT32,
    'u16[]': AbiTypeTag.ARRAY_OF_UINT16,
    'u8[]': AbiTypeTag.ARRAY_OF_UINT8,
    'Uint8Array[]': AbiTypeTag.ARRAY_OF_BYTES,
    'String[]': AbiTypeTag.ARRAY_OF_STRING,
}

# The two amount-tuple idioms. These are dedicated entries, not derived from
# the general tuple grammar.
_TUPLE_ALIASES: Dict[str, AbiTypeTag] = {
    'AddressMap<u256>': AbiTypeTag.ADDRESS_UINT256_TUPLE,
    'ExtendedAddressMap<u256>': AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE,
    'tuple(extended_address,uint256)[]': AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE,
}


def _build_str_to_abi_type() -> Dict[str, AbiTypeTag]:
    mapping: Dict[str, AbiTypeTag] = {}
    for tag, canonical in ABI_TYPE_TO_STR.items():
        mapping[canonical] = tag
        mapping[f'{ENUM_PREFIX}{tag.value}'] = tag
    mapping.update(_SCALAR_ALIASES)
    mapping.update(_ARRAY_ALIASES)
    mapping.update(_TUPLE_ALIASES)
    return mapping


# Every accepted spelling -> tag
STR_TO_ABI_TYPE: Dict[str, AbiTypeTag] = _build_str_to_abi_type()
