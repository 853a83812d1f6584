"""
Object-literal named parameters in annotation arguments.

Developers write named parameters as JavaScript-style object literals, which
are often not valid JSON: keys are unquoted, strings use single quotes,
enum members appear bare, and trailing commas are common. The text is run
through json_repair before reading ``name`` and ``type``; anything that
still does not yield both is reported as a LiteralParseFailure instead of
raising.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

import json_repair


@dataclass(frozen=True)
class NamedParameter:
    """A named parameter definition, e.g. ``{ name: 'to', type: 'address' }``."""
    name: str
    type: str


@dataclass(frozen=True)
class LiteralParseFailure:
    """Outcome of a literal that could not be read as a named parameter."""
    text: str
    reason: str


def try_parse_named_parameter(text: str) -> Union[NamedParameter, LiteralParseFailure]:
    """Read brace-delimited text as a NamedParameter.

    Returns a LiteralParseFailure when the text is not brace-delimited, cannot
    be repaired, or lacks string ``name`` and ``type`` properties.
    """
    trimmed = text.strip()
    if not (trimmed.startswith('{') and trimmed.endswith('}')):
        return LiteralParseFailure(trimmed, 'not brace-delimited')

    try:
        parsed = json_repair.loads(trimmed)
    except (ValueError, RecursionError) as e:
        return LiteralParseFailure(trimmed, f'{type(e).__name__}: {e}')

    if not isinstance(parsed, dict):
        return LiteralParseFailure(trimmed, 'not an object')

    name: Optional[Any] = parsed.get('name')
    type_: Optional[Any] = parsed.get('type')
    if not isinstance(name, str) or not isinstance(type_, str):
        return LiteralParseFailure(trimmed, 'missing string "name" or "type"')
    return NamedParameter(name=name, type=type_)
