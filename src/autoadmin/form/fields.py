"""
Form-field widgets.

A widget pairs a field kind with its validation constraints. Widgets are
built once when a model is registered and are shared by every request, so
they are frozen: per-request values are handed to ``render`` instead of being
stored on the widget.

Constraints are compiled into a JSON Schema when the widget is built and
converted values are checked against it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from html import escape
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from jsonschema import ValidationError as JSONSchemaValidationError

from autoadmin.exceptions import TypeConversionError
from autoadmin.form.kinds import (
    TRUE_VALUES,
    FieldKind,
    convert_string_to_kind,
    format_value,
)

REQUIRED_MESSAGE = "This field is required."
INVALID_MESSAGE = "Enter a valid value."

_ZERO_VALUES = {
    FieldKind.TEXT: "",
    FieldKind.INTEGER: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.BOOLEAN: False,
}

# order in which schema errors are reported
_KEYWORD_ORDER = ("type", "minLength", "maxLength", "pattern", "minimum", "maximum")


def _is_empty(raw: Optional[str]) -> bool:
    return raw is None or str(raw).strip() == ""


def _schema_message(error: JSONSchemaValidationError) -> str:
    keyword, limit = error.validator, error.validator_value
    if keyword == "minLength":
        return f"Ensure this value has at least {limit} characters (it has {len(error.instance)})."
    if keyword == "maxLength":
        return f"Ensure this value has at most {limit} characters (it has {len(error.instance)})."
    if keyword == "minimum":
        return f"Ensure this value is greater than or equal to {limit}."
    if keyword == "maximum":
        return f"Ensure this value is less than or equal to {limit}."
    return INVALID_MESSAGE


def _error_rank(error: JSONSchemaValidationError) -> int:
    if error.validator in _KEYWORD_ORDER:
        return _KEYWORD_ORDER.index(error.validator)
    return len(_KEYWORD_ORDER)


def _attrs(**attrs: Any) -> str:
    parts = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        name = key.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(name)
        else:
            parts.append(f'{name}="{escape(str(value))}"')
    return " ".join(parts)


@dataclass(frozen=True)
class Field(ABC):
    name: str = ""
    label: str = ""
    required: bool = False
    nullable: bool = False
    initial: Any = None
    validator: Optional[Draft7Validator] = dataclass_field(
        default=None, init=False, repr=False, compare=False
    )

    kind = FieldKind.OPAQUE
    input_type = "text"

    def __post_init__(self) -> None:
        schema = self.schema()
        if schema:
            # frozen: the compiled validator is set once, at build time
            object.__setattr__(self, "validator", Draft7Validator(schema))

    def schema(self) -> Dict[str, Any]:
        """JSON Schema a converted value must satisfy; empty when unconstrained."""
        return {}

    def schema_errors(self, value: Any) -> List[str]:
        if self.validator is None:
            return []
        errors = sorted(self.validator.iter_errors(value), key=_error_rank)
        return [_schema_message(error) for error in errors]

    def get_label(self) -> str:
        return self.label or self.name

    def validate(self, raw: Optional[str]) -> List[str]:
        """Return user-facing errors for a submitted raw value."""
        if _is_empty(raw):
            return [REQUIRED_MESSAGE] if self.required else []
        return self._validate_value(str(raw))

    @abstractmethod
    def _validate_value(self, raw: str) -> List[str]:
        ...

    def to_python(self, raw: Optional[str]) -> Any:
        """Convert a submitted raw value; raises TypeConversionError."""
        if _is_empty(raw):
            if self.nullable:
                return None
            return _ZERO_VALUES.get(self.kind)
        return convert_string_to_kind(str(raw), self.kind)

    def format_value(self, value: Any) -> str:
        return format_value(value, self.kind)

    def render(self, raw: Optional[str] = None, *, css_class: Optional[str] = None, invalid: bool = False) -> str:
        """Render the input; ``raw`` is the submitted or formatted value."""
        if raw is None:
            raw = self.format_value(self.initial)
        if invalid and css_class:
            css_class = f"{css_class} is-invalid"
        return "<input " + _attrs(
            type=self.input_type,
            name=self.name,
            id=self.name,
            class_=css_class,
            value=raw,
            required=self.required,
            **self._extra_attrs(),
        ) + ">"

    def _extra_attrs(self) -> dict:
        return {}


@dataclass(frozen=True)
class TextField(Field):
    placeholder: Optional[str] = None
    regex: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    kind = FieldKind.TEXT

    def validate(self, raw: Optional[str]) -> List[str]:
        if raw is None or raw == "":
            return [REQUIRED_MESSAGE] if self.required else []
        return self._validate_value(raw)

    def to_python(self, raw: Optional[str]) -> Any:
        if raw is None or raw == "":
            return None if self.nullable else ""
        return raw

    def schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.regex is not None:
            # JSON Schema patterns search; the whole value must match
            schema["pattern"] = rf"^(?:{self.regex})\Z"
        if schema:
            schema["type"] = "string"
        return schema

    def _validate_value(self, raw: str) -> List[str]:
        return self.schema_errors(raw)

    def _extra_attrs(self) -> dict:
        return {
            "placeholder": self.placeholder,
            "pattern": self.regex,
            "minlength": self.min_length,
            "maxlength": self.max_length,
        }


@dataclass(frozen=True)
class _NumberField(Field):
    min_value: Any = None
    max_value: Any = None

    input_type = "number"
    invalid_message = "Enter a number."
    step = "any"

    def schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {}
        if self.min_value is not None:
            schema["minimum"] = self.min_value
        if self.max_value is not None:
            schema["maximum"] = self.max_value
        return schema

    def _validate_value(self, raw: str) -> List[str]:
        try:
            value = convert_string_to_kind(raw, self.kind)
        except TypeConversionError:
            return [self.invalid_message]
        return self.schema_errors(value)

    def _extra_attrs(self) -> dict:
        return {"min": self.min_value, "max": self.max_value, "step": self.step}


@dataclass(frozen=True)
class IntegerField(_NumberField):
    kind = FieldKind.INTEGER
    invalid_message = "Enter a whole number."
    step = "1"


@dataclass(frozen=True)
class FloatField(_NumberField):
    kind = FieldKind.FLOAT
    step = "any"


@dataclass(frozen=True)
class BooleanField(Field):
    kind = FieldKind.BOOLEAN
    input_type = "checkbox"

    def validate(self, raw: Optional[str]) -> List[str]:
        checked = raw is not None and str(raw).strip().lower() in TRUE_VALUES
        if self.required and not checked:
            return [REQUIRED_MESSAGE]
        return []

    def _validate_value(self, raw: str) -> List[str]:
        return []

    def to_python(self, raw: Optional[str]) -> Any:
        if raw is None:
            return False
        # browsers submit "on" for a checked box without a value attribute
        return str(raw).strip().lower() in TRUE_VALUES

    def render(self, raw: Optional[str] = None, *, css_class: Optional[str] = None, invalid: bool = False) -> str:
        if raw is None:
            checked = bool(self.initial)
        else:
            checked = str(raw).strip().lower() in TRUE_VALUES
        if invalid and css_class:
            css_class = f"{css_class} is-invalid"
        return "<input " + _attrs(
            type="checkbox",
            name=self.name,
            id=self.name,
            class_=css_class,
            value="true",
            checked=checked,
            required=self.required,
        ) + ">"


@dataclass(frozen=True)
class UUIDField(Field):
    kind = FieldKind.IDENTIFIER

    def _validate_value(self, raw: str) -> List[str]:
        try:
            convert_string_to_kind(raw, self.kind)
        except TypeConversionError:
            return ["Enter a valid UUID."]
        return []


@dataclass(frozen=True)
class OpaqueField(Field):
    """Unconstrained widget for values without a dedicated kind."""

    kind = FieldKind.OPAQUE

    def validate(self, raw: Optional[str]) -> List[str]:
        return []

    def _validate_value(self, raw: str) -> List[str]:
        return []

    def to_python(self, raw: Optional[str]) -> Any:
        if _is_empty(raw):
            return None
        return raw
