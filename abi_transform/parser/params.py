"""
Parameter definitions from annotation arguments.

``@method`` accepts an optional method-name override followed by parameter
definitions, and ``@returns`` accepts only parameter definitions::

    @method()
    @method("myMethodName")
    @method("myMethodName", "address", "uint256")
    @method("address", "uint256", "bool")
    @method({ name: "to", type: "address" }, { name: "amount", type: "uint256" })
    @method("myMethodName", { name: "to", type: ABIDataTypes.ADDRESS }, "uint256")

Each argument becomes either a bare spelling (str) or a NamedParameter.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..type_system import TypeAliasTable, TupleTypeResolver
from .literal import NamedParameter, LiteralParseFailure, try_parse_named_parameter


# A single parameter definition: a bare type spelling or a named parameter
ParamDefinition = Union[str, NamedParameter]


@dataclass
class ParameterList:
    """Every argument of the annotation is a parameter definition."""
    params: List[ParamDefinition] = field(default_factory=list)


@dataclass
class NameOverride:
    """The first argument overrides the method name; the rest are parameters."""
    name: str
    params: List[ParamDefinition] = field(default_factory=list)


MethodArguments = Union[ParameterList, NameOverride]


def param_type(param: ParamDefinition) -> str:
    """The raw type spelling of a parameter definition."""
    if isinstance(param, NamedParameter):
        return param.type
    return param


def param_name(param: ParamDefinition) -> Optional[str]:
    if isinstance(param, NamedParameter):
        return param.name
    return None


class ParameterDefinitionParser:
    """
    Turns raw annotation argument text into parameter definitions.

    Arguments must already be unquoted by the host. Brace-delimited text is
    read as a named parameter when possible; anything else, including a
    malformed literal, is kept verbatim as a bare spelling and classified like
    any other: first in @method it becomes the name override, elsewhere it
    surfaces as an unresolved type when the manifest is built.
    """

    def __init__(self, tuple_resolver: Optional[TupleTypeResolver] = None):
        self._tuples = tuple_resolver or TupleTypeResolver()

    @property
    def alias_table(self) -> TypeAliasTable:
        return self._tuples.alias_table

    def parse_param_definition(self, raw: str) -> ParamDefinition:
        """Parse one argument into a NamedParameter or a trimmed bare spelling."""
        trimmed = raw.strip()
        parsed = try_parse_named_parameter(trimmed)
        if isinstance(parsed, LiteralParseFailure):
            return trimmed
        return parsed

    def parse_param_definitions(self, raw_args: List[str]) -> List[ParamDefinition]:
        return [self.parse_param_definition(arg) for arg in raw_args]

    def looks_like_type(self, spelling: str) -> bool:
        """Check if a spelling resolves to an ABI type or is enum-qualified."""
        if self.alias_table.is_enum_qualified(spelling):
            return True
        if self.alias_table.is_known(spelling):
            return True
        return self._tuples.resolve_tuple_or_scalar(spelling) is not None

    def is_param_definition(self, param: ParamDefinition) -> bool:
        """Check if a parsed argument is recognized as a parameter definition.

        A bare spelling must look like a type; a named parameter must have a
        ``type`` that looks like one.
        """
        return self.looks_like_type(param_type(param))

    def classify_method_arguments(self, raw_args: List[str]) -> MethodArguments:
        """Split ``@method`` arguments into an optional name override and parameters.

        Only the first argument is inspected. If it looks like a parameter,
        there is no override. Otherwise it is the method name.

        The rule is ambiguous: an override that is also a valid type spelling
        (say ``"bytes"``) is read as a parameter, not a name.
        """
        items = self.parse_param_definitions(raw_args)
        if not items:
            return ParameterList([])

        first = items[0]
        if self.is_param_definition(first):
            return ParameterList(items)

        if isinstance(first, NamedParameter):
            name = first.name
        else:
            name = first
        return NameOverride(name, items[1:])

    def parse_method_arguments(self, raw_args: List[str], default_name: str):
        """Resolve ``@method`` arguments to ``(method_name, param_defs)``."""
        classified = self.classify_method_arguments(raw_args)
        if isinstance(classified, NameOverride):
            return classified.name, classified.params
        return default_name, classified.params

    def parse_return_arguments(self, raw_args: List[str]) -> List[ParamDefinition]:
        """Parse ``@returns`` arguments; every argument is a descriptor."""
        return self.parse_param_definitions(raw_args)
