from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from autoadmin.adminpanel.directives import (
    DirectiveOptions,
    get_directive,
    has_directive,
    parse_directives,
)
from autoadmin.adminpanel.introspection import FieldSpec
from autoadmin.exceptions import InvalidDirective, TypeConversionError
from autoadmin.form.fields import (
    BooleanField,
    Field,
    FloatField,
    IntegerField,
    OpaqueField,
    TextField,
    UUIDField,
)
from autoadmin.form.kinds import FieldKind, convert_string_to_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldConfig:
    name: str
    display_name: str
    kind: FieldKind
    optional: bool = False
    primary_key: bool = False
    include_in_list_display: bool = True
    include_in_list_fetch: bool = True
    include_in_search: bool = True
    include_in_instance_view: bool = True
    include_in_add_form: bool = True
    include_in_edit_form: bool = True
    add_form_field: Optional[Field] = None
    edit_form_field: Optional[Field] = None


def _constraint(directive: str, key: str, kind: FieldKind, field_name: str) -> Any:
    raw = get_directive(directive, key)
    if raw is None:
        return None
    try:
        return convert_string_to_kind(raw, kind)
    except TypeConversionError:
        logger.warning(
            "Ignoring '%s' directive on field %s: %r is not %s", key, field_name, raw, kind.value
        )
        return None


def _length(directive: str, key: str, field_name: str) -> Optional[int]:
    value = _constraint(directive, key, FieldKind.INTEGER, field_name)
    if value is not None and value < 0:
        logger.warning("Ignoring negative '%s' directive on field %s", key, field_name)
        return None
    return value


def _text_field(spec: FieldSpec, common: Dict[str, Any]) -> TextField:
    regex = get_directive(spec.directive, "regex")
    if regex is not None:
        try:
            re.compile(regex)
        except re.error as exc:
            raise InvalidDirective("regex", regex, field=spec.name) from exc
    return TextField(
        placeholder=get_directive(spec.directive, "placeholder"),
        regex=regex,
        min_length=_length(spec.directive, "minLength", spec.name),
        max_length=_length(spec.directive, "maxLength", spec.name),
        **common,
    )


def _number_field(cls, spec: FieldSpec, common: Dict[str, Any]):
    return cls(
        min_value=_constraint(spec.directive, "min", spec.kind, spec.name),
        max_value=_constraint(spec.directive, "max", spec.kind, spec.name),
        **common,
    )


def build_form_field(spec: FieldSpec, label: str = "") -> Field:
    """Build the widget for ``spec`` from its kind and directives."""
    common: Dict[str, Any] = {
        "name": spec.name,
        "label": label or spec.name,
        "nullable": spec.optional,
        "required": has_directive(spec.directive, "required"),
    }

    initial = get_directive(spec.directive, "initial")
    if initial is not None:
        # raises TypeConversionError, aborting registration
        common["initial"] = convert_string_to_kind(initial, spec.kind)

    if spec.kind == FieldKind.TEXT:
        return _text_field(spec, common)
    if spec.kind == FieldKind.INTEGER:
        return _number_field(IntegerField, spec, common)
    if spec.kind == FieldKind.FLOAT:
        return _number_field(FloatField, spec, common)
    if spec.kind == FieldKind.BOOLEAN:
        return BooleanField(**common)
    if spec.kind == FieldKind.IDENTIFIER:
        return UUIDField(**common)
    common["required"] = False
    return OpaqueField(**common)


FormFieldHook = Callable[[str, bool], Optional[Field]]


def build_field_config(spec: FieldSpec, form_field_hook: Optional[FormFieldHook] = None) -> FieldConfig:
    opts: DirectiveOptions = parse_directives(spec.directive, spec.name, spec.primary_key)

    widget: Optional[Field] = None
    if opts.include_in_add_form or opts.include_in_edit_form:
        widget = build_form_field(spec, opts.display_name)

    add_field = widget if opts.include_in_add_form else None
    edit_field = widget if opts.include_in_edit_form else None

    if form_field_hook is not None:
        override = form_field_hook(spec.name, False)
        if override is not None:
            add_field = override
        override = form_field_hook(spec.name, True)
        if override is not None:
            edit_field = override

    return FieldConfig(
        name=spec.name,
        display_name=opts.display_name,
        kind=spec.kind,
        optional=spec.optional,
        primary_key=spec.primary_key,
        include_in_list_display=opts.include_in_list_display,
        include_in_list_fetch=opts.include_in_list_fetch,
        include_in_search=opts.include_in_search,
        include_in_instance_view=opts.include_in_instance_view,
        include_in_add_form=opts.include_in_add_form,
        include_in_edit_form=opts.include_in_edit_form,
        add_form_field=add_field,
        edit_form_field=edit_field,
    )
