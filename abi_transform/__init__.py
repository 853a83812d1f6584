"""
Contract ABI transform

This package extracts ABI manifests and call selectors from annotated
contract classes and synthesizes the selector dispatch method each class
needs at runtime.

Module Structure:
- type_system/: ABI type tags, spelling aliases, tuple strings, TS type hints
- parser/: Object-literal reader and parameter definition parser
- host/: Host declaration tree and JSON declaration dump adapter
- codegen/: Collection, manifests, selectors, dispatch and TS fragments
- abigen.py: Orchestration and command-line entry point

Usage:
    from abi_transform import AbiTransform
    from abi_transform.host import load_sources_from_file

    results = AbiTransform('abis-output').transform(load_sources_from_file('decls.json'))
"""

from .abigen import AbiTransform
from .errors import (
    AbiTransformError,
    UnresolvedTypeError,
    DeclarationNotFoundError,
    HostInputError,
)

__all__ = [
    'AbiTransform',
    'AbiTransformError',
    'UnresolvedTypeError',
    'DeclarationNotFoundError',
    'HostInputError',
]
