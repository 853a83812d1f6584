"""
JSON host adapter.

Builds the host declaration tree from a JSON declaration dump, so the
transform can run outside of a compiler process. The dump format is::

    {"sources": [{"path": "src/Token.ts", "isLibrary": false, "classes": [
        {"name": "Token", "extends": "OP20", "decorators": [], "members": [
            {"kind": "method", "name": "transfer",
             "decorators": [{"name": "method", "args": ["'address'", "'uint256'"]}]},
            {"kind": "field", "name": "amount", "type": "u256"}]}]}]}
"""

import json
from typing import Any, Dict, List

from ..errors import HostInputError
from .declarations import (
    ClassDeclaration,
    ClassMember,
    Decorator,
    FieldDeclaration,
    HostSource,
    MethodDeclaration,
)


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise HostInputError(f'missing "{key}" in {where}')
    return data[key]


def _load_decorators(items: List[Any], where: str) -> List[Decorator]:
    decorators = []
    for item in items or []:
        name = _require(item, 'name', where)
        args = item.get('args', [])
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise HostInputError(f'decorator @{name} args must be a list of strings in {where}')
        decorators.append(Decorator(name=name, args=list(args)))
    return decorators


def _load_member(data: Dict[str, Any], where: str) -> ClassMember:
    kind = _require(data, 'kind', where)
    name = _require(data, 'name', where)
    member_where = f'{where}.{name}'
    decorators = _load_decorators(data.get('decorators', []), member_where)
    if kind == 'method':
        return MethodDeclaration(name=name, decorators=decorators)
    if kind == 'field':
        return FieldDeclaration(name=name, type_text=data.get('type'), decorators=decorators)
    raise HostInputError(f'unknown member kind "{kind}" in {member_where}')


def _load_class(data: Dict[str, Any], where: str) -> ClassDeclaration:
    name = _require(data, 'name', where)
    class_where = f'{where}:{name}'
    return ClassDeclaration(
        name=name,
        members=[_load_member(m, class_where) for m in data.get('members', [])],
        decorators=_load_decorators(data.get('decorators', []), class_where),
        base_class=data.get('extends'),
    )


def load_sources(data: Dict[str, Any]) -> List[HostSource]:
    """Build HostSource objects from a parsed declaration dump."""
    sources = []
    for source_data in _require(data, 'sources', 'declaration dump'):
        path = _require(source_data, 'path', 'source')
        sources.append(HostSource(
            internal_path=path,
            classes=[_load_class(c, path) for c in source_data.get('classes', [])],
            is_library=bool(source_data.get('isLibrary', False)),
        ))
    return sources


def load_sources_from_file(filepath: str) -> List[HostSource]:
    """Read and load a JSON declaration dump from disk."""
    try:
        with open(filepath, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise HostInputError(f'invalid JSON: {e}', filepath) from e
    except OSError as e:
        raise HostInputError(str(e), filepath) from e

    if not isinstance(data, dict):
        raise HostInputError('top level must be an object', filepath)
    try:
        return load_sources(data)
    except HostInputError as e:
        raise HostInputError(str(e), filepath) from e
