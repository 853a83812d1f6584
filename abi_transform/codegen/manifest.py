"""
ABI manifest construction.

This module resolves collected method and event records into structured
ABI entries. Every parameter carries its AbiTypeTag and a TypeScript type
hint; the hint is only used for emitted declaration fragments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..errors import UnresolvedTypeError
from ..parser import ParamDefinition, param_name, param_type
from ..type_system import AbiTypeTag, TupleTypeResolver, abi_type_to_ts
from .collector import EventRecord, MethodAbiAssembler, MethodRecord
from .selector import SelectorEncoder


FUNCTION_TYPE = 'Function'
VIEW_TYPE = 'View'
EVENT_TYPE = 'Event'


@dataclass
class AbiParameter:
    """A resolved input, output or event field."""
    name: str
    type: AbiTypeTag
    type_hint: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type.value}


@dataclass
class FunctionEntry:
    """A callable function in the manifest."""
    name: str
    type: str
    payable: bool
    only_owner: bool
    inputs: List[AbiParameter] = field(default_factory=list)
    outputs: List[AbiParameter] = field(default_factory=list)
    signature: str = ''
    selector: str = ''
    declared_name: str = ''
    emitted_events: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.type,
            'payable': self.payable,
            'onlyOwner': self.only_owner,
            'inputs': [p.to_dict() for p in self.inputs],
            'outputs': [p.to_dict() for p in self.outputs],
        }


@dataclass
class EventEntry:
    """An event in the manifest."""
    name: str
    values: List[AbiParameter] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'values': [v.to_dict() for v in self.values],
            'type': EVENT_TYPE,
        }


@dataclass
class ClassAbi:
    """Functions and events of one class, or of a whole compilation unit."""
    functions: List[FunctionEntry] = field(default_factory=list)
    events: List[EventEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'functions': [f.to_dict() for f in self.functions],
            'events': [e.to_dict() for e in self.events],
        }


class AbiManifestBuilder:
    """
    Builds ABI manifests from an assembler's records.

    Resolution happens here; any spelling that does not resolve raises
    UnresolvedTypeError, aborting the manifest for the compilation unit.
    """

    def __init__(
        self,
        assembler: MethodAbiAssembler,
        tuple_resolver: Optional[TupleTypeResolver] = None,
        encoder: Optional[SelectorEncoder] = None,
    ):
        self._assembler = assembler
        self._tuples = tuple_resolver or TupleTypeResolver()
        self._encoder = encoder or SelectorEncoder(self._tuples)

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve_type(self, spelling: str, class_name: str, member: str, kind: str = 'method') -> AbiTypeTag:
        tag = self._tuples.resolve_tuple_or_scalar(spelling)
        if tag is None:
            raise UnresolvedTypeError(class_name, member, spelling, kind)
        return tag

    def _resolve_params(
        self,
        params: List[ParamDefinition],
        record: MethodRecord,
        default_prefix: str,
    ) -> List[AbiParameter]:
        resolved = []
        for idx, param in enumerate(params):
            tag = self.resolve_type(param_type(param), record.class_name, record.method_name)
            name = param_name(param) or f'{default_prefix}{idx + 1}'
            resolved.append(AbiParameter(name=name, type=tag, type_hint=abi_type_to_ts(tag)))
        return resolved

    def assign_selector(self, record: MethodRecord) -> str:
        """Compute (once) and store the signature and selector of a record."""
        if record.selector is None:
            canonical = []
            for param in record.param_defs:
                tag = self.resolve_type(param_type(param), record.class_name, record.method_name)
                canonical.append(self._tuples.alias_table.canonicalize(tag))
            record.signature, record.selector = self._encoder.encode(record.method_name, canonical)
        return record.selector

    def assign_selectors(self) -> None:
        for record in self._assembler.records():
            self.assign_selector(record)

    # =========================================================================
    # ENTRIES
    # =========================================================================

    def build_function(self, record: MethodRecord) -> FunctionEntry:
        self.assign_selector(record)
        return FunctionEntry(
            name=record.method_name,
            type=VIEW_TYPE if record.is_view else FUNCTION_TYPE,
            payable=record.is_payable,
            only_owner=record.only_owner,
            inputs=self._resolve_params(record.param_defs, record, 'param'),
            outputs=self._resolve_params(record.return_defs, record, 'returnVal'),
            signature=record.signature or '',
            selector=record.selector or '',
            declared_name=record.declared_name,
            emitted_events=list(record.emitted_events),
        )

    def build_event(self, event: EventRecord) -> EventEntry:
        values = []
        for event_field in event.fields:
            tag = self.resolve_type(event_field.type, event.class_name, event_field.name, 'event')
            values.append(AbiParameter(
                name=event_field.name,
                type=tag,
                type_hint=abi_type_to_ts(tag),
            ))
        return EventEntry(name=event.event_name, values=values)

    # =========================================================================
    # MANIFESTS
    # =========================================================================

    def build_abi(self) -> ClassAbi:
        """The manifest for the whole compilation unit: every function and event."""
        functions = [self.build_function(r) for r in self._assembler.records()]
        events = [self.build_event(e) for e in self._assembler.events]
        return ClassAbi(functions=functions, events=events)

    def build_abi_per_class(self) -> Dict[str, ClassAbi]:
        """One manifest per class with methods.

        A class's events are the declared events its methods emit, in order
        of first emission.
        """
        result: Dict[str, ClassAbi] = {}
        for class_name, records in self._assembler.methods_by_class.items():
            functions = [self.build_function(r) for r in records]

            events: List[EventEntry] = []
            seen = set()
            for record in records:
                for event_name in record.emitted_events:
                    if event_name in seen:
                        continue
                    seen.add(event_name)
                    event = self._assembler.find_event(event_name)
                    if event is not None:
                        events.append(self.build_event(event))

            result[class_name] = ClassAbi(functions=functions, events=events)
        return result
