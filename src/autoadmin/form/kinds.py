"""
Field kinds and string <-> native conversion.

Every field the admin exposes maps to one of a closed set of kinds. The same
conversion function is used for ``initial`` directives at registration time
and for submitted form values at request time.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Optional

from autoadmin.exceptions import TypeConversionError

TRUE_VALUES = {"true", "1", "yes", "y", "on"}
FALSE_VALUES = {"false", "0", "no", "n", "off", ""}


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    IDENTIFIER = "identifier"
    OPAQUE = "opaque"


def kind_for_type(python_type: Optional[type]) -> FieldKind:
    if not isinstance(python_type, type):
        return FieldKind.OPAQUE
    # bool is a subclass of int
    if issubclass(python_type, bool):
        return FieldKind.BOOLEAN
    if issubclass(python_type, str):
        return FieldKind.TEXT
    if issubclass(python_type, int):
        return FieldKind.INTEGER
    if issubclass(python_type, float):
        return FieldKind.FLOAT
    if issubclass(python_type, uuid.UUID):
        return FieldKind.IDENTIFIER
    return FieldKind.OPAQUE


def convert_string_to_kind(value: str, kind: FieldKind) -> Any:
    """Parse ``value`` into the native type of ``kind``."""
    try:
        if kind == FieldKind.TEXT:
            return value
        if kind == FieldKind.INTEGER:
            return int(value.strip())
        if kind == FieldKind.FLOAT:
            return float(value.strip())
        if kind == FieldKind.BOOLEAN:
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ValueError("not a boolean")
        if kind == FieldKind.IDENTIFIER:
            return uuid.UUID(value.strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise TypeConversionError(value, kind, str(exc)) from exc
    return value


def format_value(value: Any, kind: FieldKind) -> str:
    """Inverse of convert_string_to_kind, used to populate HTML inputs."""
    if value is None:
        return ""
    if kind == FieldKind.BOOLEAN:
        return "true" if value else "false"
    if kind == FieldKind.FLOAT:
        return repr(float(value))
    return str(value)
