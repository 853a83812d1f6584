"""
Host module for the ABI transform.

This module provides the declaration tree handed over by the compiler front
end and a JSON adapter that builds it from a declaration dump.
"""

from .declarations import (
    # Base
    HostNode,
    # Tree
    Decorator,
    MethodDeclaration,
    FieldDeclaration,
    ClassMember,
    ClassDeclaration,
    HostSource,
    # Identity and resolution
    DeclarationArena,
    HostProgram,
    # Helpers
    unquote,
    is_std_lib_path,
    STD_LIB_PREFIX,
)
from .loader import load_sources, load_sources_from_file

__all__ = [
    'HostNode',
    'Decorator',
    'MethodDeclaration',
    'FieldDeclaration',
    'ClassMember',
    'ClassDeclaration',
    'HostSource',
    'DeclarationArena',
    'HostProgram',
    'unquote',
    'is_std_lib_path',
    'STD_LIB_PREFIX',
    'load_sources',
    'load_sources_from_file',
]
