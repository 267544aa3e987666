"""Legacy JSON-or-string column values.

Several profile columns were written either as JSON structures or as
JSON-encoded strings. Values are resolved once, when a row is turned into
its read schema, into one of two tagged variants.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class RawValue:
    """A string that is not valid JSON; kept verbatim."""
    text: str


@dataclass(frozen=True)
class ParsedValue:
    """A decoded JSON structure (dict, list, number, ...)."""
    value: Any


JsonField = Union[RawValue, ParsedValue]


def resolve_json_field(value: Any) -> Optional[JsonField]:
    if value is None:
        return None
    if not isinstance(value, str):
        return ParsedValue(value)
    try:
        return ParsedValue(json.loads(value))
    except ValueError:
        return RawValue(value)


def as_list(field: Optional[JsonField]) -> list:
    """List content of a resolved field; anything else yields an empty list."""
    if isinstance(field, ParsedValue) and isinstance(field.value, list):
        return list(field.value)
    return []


def as_dict(field: Optional[JsonField]) -> dict:
    if isinstance(field, ParsedValue) and isinstance(field.value, dict):
        return dict(field.value)
    return {}
