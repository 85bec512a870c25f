from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from autoadmin.exceptions import ConfigurationError
from autoadmin.form.fields import Field

# A validation function receives the raw submitted values and returns
# user-facing errors. Raising aborts the whole validation pass.
ValidationFunc = Callable[[Mapping[str, Any]], Optional[List[str]]]


class Form:
    """Ordered collection of widgets plus form-level validation functions."""

    def __init__(
        self,
        fields: Iterable[Field] = (),
        validation_funcs: Iterable[ValidationFunc] = (),
    ) -> None:
        self._fields: List[Field] = []
        self._validation_funcs: List[ValidationFunc] = []
        for f in fields:
            self.add_field(f)
        self.register_validation_functions(*validation_funcs)

    def add_field(self, field: Field) -> None:
        if any(existing.name == field.name for existing in self._fields):
            raise ConfigurationError(
                f"form field '{field.name}' already exists", config_key=field.name
            )
        self._fields.append(field)

    def get_fields(self) -> Sequence[Field]:
        return tuple(self._fields)

    def register_validation_functions(self, *funcs: ValidationFunc) -> None:
        self._validation_funcs.extend(funcs)

    def get_validation_functions(self) -> Sequence[ValidationFunc]:
        return tuple(self._validation_funcs)


def values_are_valid(
    form: Form, values: Mapping[str, Any]
) -> Tuple[List[str], Dict[str, List[str]]]:
    """
    Run every widget check and every form-level validation function.

    Returns ``(form_errors, field_errors)``; both empty means valid. A missing
    value is validated as empty. Exceptions raised by validation functions
    are not caught.
    """
    form_errors: List[str] = []
    field_errors: Dict[str, List[str]] = {}

    for field in form.get_fields():
        errs = field.validate(values.get(field.name))
        if errs:
            field_errors[field.name] = list(errs)

    for func in form.get_validation_functions():
        errs = func(values)
        if errs:
            form_errors.extend(errs)

    return form_errors, field_errors


def get_clean_data(form: Form, values: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert every submitted value to its native type."""
    clean: Dict[str, Any] = {}
    for field in form.get_fields():
        raw = values.get(field.name)
        clean[field.name] = field.to_python(raw if raw is not None else "")
    return clean


def first_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Collapse multi-valued form data (``{"a": ["1"]}``) into single values."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            out[key] = value[0] if value else ""
        else:
            out[key] = value
    return out
