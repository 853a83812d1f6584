"""
Parser module for the ABI transform.

This module provides the object-literal reader and the parameter
definition parser for annotation arguments.
"""

from .literal import (
    NamedParameter,
    LiteralParseFailure,
    try_parse_named_parameter,
)
from .params import (
    ParamDefinition,
    ParameterList,
    NameOverride,
    MethodArguments,
    ParameterDefinitionParser,
    param_type,
    param_name,
)

__all__ = [
    'NamedParameter',
    'LiteralParseFailure',
    'try_parse_named_parameter',
    'ParamDefinition',
    'ParameterList',
    'NameOverride',
    'MethodArguments',
    'ParameterDefinitionParser',
    'param_type',
    'param_name',
]
