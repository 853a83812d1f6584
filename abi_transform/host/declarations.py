"""
Host declaration model.

The transform does not parse source text. The host front end hands over
already-parsed class, method and field declarations, with annotation
arguments kept as raw source text. This module contains the dataclasses
for that tree, the arena that gives each method declaration a stable
identity, and the resolved-program view used to check that every annotated
method survived the host's own resolution.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union


# Path prefix of the runtime's standard library sources
STD_LIB_PREFIX = '~lib/'


def unquote(raw: str) -> str:
    """Strip one pair of double quotes, then one pair of single quotes."""
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        raw = raw[1:-1]
    if len(raw) >= 2 and raw.startswith("'") and raw.endswith("'"):
        raw = raw[1:-1]
    return raw


def is_std_lib_path(internal_path: str) -> bool:
    return internal_path.startswith(STD_LIB_PREFIX)


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass
class HostNode:
    """Base class for all host declaration nodes."""
    pass


@dataclass
class Decorator(HostNode):
    """An annotation site, e.g. ``@method('address', 'uint256')``."""
    name: str
    args: List[str] = field(default_factory=list)  # raw argument text, quotes included

    def unquoted_args(self) -> List[str]:
        return [unquote(arg) for arg in self.args]


# =============================================================================
# MEMBER NODES
# =============================================================================

@dataclass
class MethodDeclaration(HostNode):
    """A method declared on a class."""
    name: str
    decorators: List[Decorator] = field(default_factory=list)
    source: str = ''  # raw member text; set for synthesized members
    is_synthesized: bool = False
    decl_id: Optional[int] = None  # assigned by DeclarationArena

    def decorators_named(self, name: str) -> List[Decorator]:
        return [d for d in self.decorators if d.name == name]


@dataclass
class FieldDeclaration(HostNode):
    """A data field declared on a class."""
    name: str
    type_text: Optional[str] = None  # None when the field has no type annotation
    decorators: List[Decorator] = field(default_factory=list)


ClassMember = Union[MethodDeclaration, FieldDeclaration]


@dataclass
class ClassDeclaration(HostNode):
    """A class declaration with its members in source order."""
    name: str
    members: List[ClassMember] = field(default_factory=list)
    decorators: List[Decorator] = field(default_factory=list)
    base_class: Optional[str] = None

    def methods(self) -> List[MethodDeclaration]:
        return [m for m in self.members if isinstance(m, MethodDeclaration)]

    def fields(self) -> List[FieldDeclaration]:
        return [m for m in self.members if isinstance(m, FieldDeclaration)]

    def find_method_index(self, name: str) -> int:
        """Index of the first method named ``name`` in members, or -1."""
        for i, member in enumerate(self.members):
            if isinstance(member, MethodDeclaration) and member.name == name:
                return i
        return -1


@dataclass
class HostSource(HostNode):
    """Root node representing one source file handed over by the host."""
    internal_path: str
    classes: List[ClassDeclaration] = field(default_factory=list)
    is_library: bool = False

    @property
    def is_std_lib(self) -> bool:
        return self.is_library or is_std_lib_path(self.internal_path)


# =============================================================================
# IDENTITY AND RESOLUTION
# =============================================================================

class DeclarationArena:
    """
    Assigns each method declaration a stable integer handle.

    Handles are arena indices, so records keyed by them do not depend on
    object identity or on the (overridable) method name.
    """

    def __init__(self):
        self._declarations: List[MethodDeclaration] = []
        self._owners: List[str] = []

    def __len__(self) -> int:
        return len(self._declarations)

    def add(self, method: MethodDeclaration, owner: str) -> int:
        """Register a method declaration, returning its handle.

        Re-adding an already registered declaration returns the same handle.
        """
        if method.decl_id is not None and method.decl_id < len(self._declarations):
            if self._declarations[method.decl_id] is method:
                return method.decl_id
        method.decl_id = len(self._declarations)
        self._declarations.append(method)
        self._owners.append(owner)
        return method.decl_id

    def ingest(self, sources: List[HostSource]) -> None:
        """Register every method declaration in the given sources."""
        for source in sources:
            for cls in source.classes:
                for method in cls.methods():
                    self.add(method, cls.name)

    def get(self, decl_id: int) -> MethodDeclaration:
        return self._declarations[decl_id]

    def owner_of(self, decl_id: int) -> str:
        return self._owners[decl_id]

    def __iter__(self) -> Iterator[MethodDeclaration]:
        return iter(self._declarations)


class HostProgram:
    """
    The host's resolved program: declaration handle -> internal element name.

    A declaration the host dropped during its own resolution has no entry.
    """

    def __init__(self, internal_names: Optional[Dict[int, str]] = None):
        self._internal_names: Dict[int, str] = dict(internal_names or {})

    def internal_name_for(self, decl_id: int) -> Optional[str]:
        return self._internal_names.get(decl_id)

    def register(self, decl_id: int, internal_name: str) -> None:
        self._internal_names[decl_id] = internal_name

    @classmethod
    def from_sources(cls, arena: DeclarationArena, sources: List[HostSource]) -> 'HostProgram':
        """Build a program in which every ingested method resolves.

        Internal names follow the ``<path>/<Class>#<method>`` element naming.
        """
        program = cls()
        for source in sources:
            base = source.internal_path.rsplit('.', 1)[0]
            for class_decl in source.classes:
                for method in class_decl.methods():
                    if method.decl_id is None:
                        method.decl_id = arena.add(method, class_decl.name)
                    program.register(method.decl_id, f'{base}/{class_decl.name}#{method.name}')
        return program
