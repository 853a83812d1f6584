"""
Annotation collection over the host declaration tree.

The MethodAbiAssembler walks classes handed over by the host and gathers,
per method declaration, everything its annotation sites contribute:

    @method(...)        method name override and parameter definitions
    @returns(...)       return definitions
    @emit("A", ...)     names of events the method emits
    @view / @payable / @onlyOwner
                        function flags

Classes marked ``@event`` (optionally ``@event("Name")``) contribute one
event record built from their directly declared fields.

Type spellings are kept raw here. They are resolved when the manifest is
built, where an unknown spelling is a fatal error.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import DeclarationNotFoundError
from ..host import (
    ClassDeclaration,
    DeclarationArena,
    HostProgram,
    HostSource,
    MethodDeclaration,
)
from ..parser import ParamDefinition, ParameterDefinitionParser
from .diagnostics import TransformDiagnostics


# Annotation names
METHOD_DECORATOR = 'method'
RETURNS_DECORATOR = 'returns'
EMIT_DECORATOR = 'emit'
VIEW_DECORATOR = 'view'
PAYABLE_DECORATOR = 'payable'
ONLY_OWNER_DECORATOR = 'onlyOwner'
EVENT_DECORATOR = 'event'

_FLAG_DECORATORS = {
    VIEW_DECORATOR: 'is_view',
    PAYABLE_DECORATOR: 'is_payable',
    ONLY_OWNER_DECORATOR: 'only_owner',
}


@dataclass
class MethodRecord:
    """Everything collected for one annotated method declaration."""
    method_name: str
    declared_name: str
    class_name: str
    declaration_id: int
    param_defs: List[ParamDefinition] = field(default_factory=list)
    return_defs: List[ParamDefinition] = field(default_factory=list)
    emitted_events: List[str] = field(default_factory=list)
    is_view: bool = False
    is_payable: bool = False
    only_owner: bool = False
    signature: Optional[str] = None
    selector: Optional[str] = None
    internal_name: Optional[str] = None


@dataclass
class EventField:
    """One field of an event; ``type`` is the raw spelling from the declaration."""
    name: str
    type: str


@dataclass
class EventRecord:
    """An event declared by a class carrying the event marker."""
    event_name: str
    class_name: str
    fields: List[EventField] = field(default_factory=list)
    file_path: str = ''


class MethodAbiAssembler:
    """
    Collects method and event records for one compilation unit.

    Records are keyed by the declaration handle from the DeclarationArena,
    not by method name, because ``@method`` can override the name.
    """

    def __init__(
        self,
        param_parser: Optional[ParameterDefinitionParser] = None,
        arena: Optional[DeclarationArena] = None,
    ):
        self._params = param_parser or ParameterDefinitionParser()
        self.arena = arena or DeclarationArena()
        self.methods_by_class: Dict[str, List[MethodRecord]] = {}
        self.class_declarations: Dict[str, ClassDeclaration] = {}
        self.class_paths: Dict[str, str] = {}
        self.events: List[EventRecord] = []
        self._records: Dict[int, MethodRecord] = {}
        self._pending: Dict[int, Dict[str, object]] = {}
        # Events named by @emit on methods without @method or @returns
        self._unrecorded_emits: List[str] = []

    # =========================================================================
    # VISITORS
    # =========================================================================

    def visit_sources(self, sources: List[HostSource]) -> None:
        """Visit every non-library source in order."""
        for source in sources:
            if source.is_std_lib:
                continue
            for class_decl in source.classes:
                self.visit_class(class_decl, source.internal_path)

    def visit_class(self, node: ClassDeclaration, file_path: str = '') -> None:
        self.class_declarations[node.name] = node
        self.class_paths[node.name] = file_path

        event_name = self._event_name_for(node)
        if event_name is not None:
            self._collect_event(node, event_name, file_path)

        for method in node.methods():
            self.visit_method(method, node.name)

    def visit_method(self, node: MethodDeclaration, class_name: str) -> None:
        """Apply every annotation site of a method, in source order."""
        decl_id = self.arena.add(node, class_name)

        for dec in node.decorators:
            args = dec.unquoted_args()
            if dec.name == METHOD_DECORATOR:
                method_name, param_defs = self._params.parse_method_arguments(args, node.name)
                record = self._record_for(decl_id, node, class_name, method_name)
                record.method_name = method_name
                record.param_defs = param_defs
            elif dec.name == RETURNS_DECORATOR:
                record = self._record_for(decl_id, node, class_name, node.name)
                record.return_defs = self._params.parse_return_arguments(args)
            elif dec.name == EMIT_DECORATOR:
                emitted = self._pending.setdefault(decl_id, {}).setdefault('emitted_events', [])
                for event_name in args:
                    if event_name not in emitted:
                        emitted.append(event_name)
            elif dec.name in _FLAG_DECORATORS:
                self._pending.setdefault(decl_id, {})[_FLAG_DECORATORS[dec.name]] = True

        pending = self._pending.pop(decl_id, None)
        record = self._records.get(decl_id)
        if record is not None:
            self._apply_pending(record, pending)
        elif pending:
            for event_name in pending.get('emitted_events', []):
                if event_name not in self._unrecorded_emits:
                    self._unrecorded_emits.append(event_name)

    # =========================================================================
    # RECORDS
    # =========================================================================

    def _record_for(
        self,
        decl_id: int,
        node: MethodDeclaration,
        class_name: str,
        method_name: str,
    ) -> MethodRecord:
        record = self._records.get(decl_id)
        if record is None:
            record = MethodRecord(
                method_name=method_name,
                declared_name=node.name,
                class_name=class_name,
                declaration_id=decl_id,
            )
            self._records[decl_id] = record
            self.methods_by_class.setdefault(class_name, []).append(record)
        return record

    def _apply_pending(self, record: MethodRecord, pending: Optional[Dict[str, object]]) -> None:
        if not pending:
            return
        for event_name in pending.get('emitted_events', []):
            if event_name not in record.emitted_events:
                record.emitted_events.append(event_name)
        for attr in _FLAG_DECORATORS.values():
            if pending.get(attr):
                setattr(record, attr, True)

    def record_for_declaration(self, decl_id: int) -> Optional[MethodRecord]:
        return self._records.get(decl_id)

    def records(self) -> List[MethodRecord]:
        """All method records, class by class, in collection order."""
        result: List[MethodRecord] = []
        for records in self.methods_by_class.values():
            result.extend(records)
        return result

    # =========================================================================
    # EVENTS
    # =========================================================================

    def _event_name_for(self, node: ClassDeclaration) -> Optional[str]:
        """Event name for an event-marked class, or None for other classes."""
        event_name = None
        for dec in node.decorators:
            if dec.name == EVENT_DECORATOR:
                args = dec.unquoted_args()
                event_name = args[0] if args else node.name
        return event_name

    def _collect_event(self, node: ClassDeclaration, event_name: str, file_path: str) -> None:
        record = EventRecord(event_name=event_name, class_name=node.name, file_path=file_path)
        for field_decl in node.fields():
            if not field_decl.type_text:
                continue
            record.fields.append(EventField(name=field_decl.name, type=field_decl.type_text.strip()))
        self.events.append(record)

    def declared_event_names(self) -> List[str]:
        return [e.event_name for e in self.events]

    def find_event(self, event_name: str) -> Optional[EventRecord]:
        for event in self.events:
            if event.event_name == event_name:
                return event
        return None

    def check_unused_events(self, diagnostics: TransformDiagnostics) -> None:
        """Report declared events nobody emits and emits of undeclared events."""
        declared = set(self.declared_event_names())
        emitted = set(self._unrecorded_emits)
        for record in self.records():
            for event_name in record.emitted_events:
                emitted.add(event_name)
                if event_name not in declared:
                    diagnostics.warn_undeclared_event(
                        event_name, record.class_name, record.method_name
                    )

        for event in self.events:
            if event.event_name not in emitted:
                diagnostics.warn_unused_event(event.event_name, event.class_name, event.file_path)

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve_internal_names(self, program: HostProgram) -> None:
        """Attach the host's internal element name to every record.

        Raises:
            DeclarationNotFoundError: if the host program lost a declaration
        """
        for class_name, records in self.methods_by_class.items():
            for record in records:
                internal_name = program.internal_name_for(record.declaration_id)
                if internal_name is None:
                    raise DeclarationNotFoundError(class_name, record.method_name)
                record.internal_name = internal_name
