"""
Form renderers.

All renderers share one signature so they can be swapped at the call site:

    render(form, form_errors, field_errors, values) -> str

``values`` holds raw (string) values to show in the inputs; missing entries
fall back to each widget's initial value. Field errors are rendered under
their field and form errors once.
"""

from __future__ import annotations

from html import escape
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from autoadmin.form.fields import BooleanField, Field
from autoadmin.form.form import Form

FieldErrors = Mapping[str, Sequence[str]]
FormRenderer = Callable[[Form, Sequence[str], FieldErrors, Optional[Mapping[str, str]]], str]


def _error_list(errors: Sequence[str]) -> str:
    if not errors:
        return ""
    items = "</li><li>".join(escape(e) for e in errors)
    return f'<ul class="errorlist"><li>{items}</li></ul>'


def _raw(values: Optional[Mapping[str, str]], field: Field) -> Optional[str]:
    if values is None:
        return None
    return values.get(field.name)


def _plain_rows(
    form: Form,
    field_errors: FieldErrors,
    values: Optional[Mapping[str, str]],
    row: str,
) -> List[str]:
    rows = []
    for field in form.get_fields():
        rows.append(
            row.format(
                name=escape(field.name),
                label=escape(field.get_label()),
                input=field.render(_raw(values, field)),
                errors=_error_list(field_errors.get(field.name, ())),
            )
        )
    return rows


def render_as_p(form, form_errors, field_errors, values=None) -> str:
    rows = _plain_rows(
        form, field_errors, values, '<p><label for="{name}">{label}:</label> {input}{errors}</p>'
    )
    if form_errors:
        rows.append(_error_list(form_errors))
    return "\n".join(rows)


def render_as_ul(form, form_errors, field_errors, values=None) -> str:
    rows = _plain_rows(
        form, field_errors, values, '<li><label for="{name}">{label}:</label> {input}{errors}</li>'
    )
    if form_errors:
        rows.append(_error_list(form_errors))
    return "<ul>\n" + "\n".join(rows) + "\n</ul>"


def render_as_table(form, form_errors, field_errors, values=None) -> str:
    rows = _plain_rows(
        form,
        field_errors,
        values,
        '<tr><th><label for="{name}">{label}</label></th><td>{input}{errors}</td></tr>',
    )
    if form_errors:
        rows.append(f'<tr><td colspan="2">{_error_list(form_errors)}</td></tr>')
    return "<table>\n" + "\n".join(rows) + "\n</table>"


def _panel_field_errors(errors: Sequence[str]) -> str:
    if not errors:
        return ""
    return '<div class="invalid-feedback d-block">' + "<br>".join(escape(e) for e in errors) + "</div>"


def render_as_panel(form, form_errors, field_errors, values=None) -> str:
    """Bootstrap/Tabler markup: form errors in an alert above the fields."""
    rows = []
    if form_errors:
        items = "</li><li>".join(escape(e) for e in form_errors)
        rows.append(
            '<div class="alert alert-danger" role="alert">\n'
            f'<ul class="mb-0"><li>{items}</li></ul>\n</div>'
        )
    for field in form.get_fields():
        errors = field_errors.get(field.name, ())
        label = escape(field.get_label())
        name = escape(field.name)
        raw = _raw(values, field)
        if isinstance(field, BooleanField):
            control = field.render(raw, css_class="form-check-input", invalid=bool(errors))
            rows.append(
                '<div class="mb-3">\n<div class="form-check">\n'
                f'{control}\n<label class="form-check-label" for="{name}">{label}</label>\n'
                f"</div>\n{_panel_field_errors(errors)}\n</div>"
            )
            continue
        label_class = "form-label required-label" if field.required else "form-label"
        control = field.render(raw, css_class="form-control", invalid=bool(errors))
        rows.append(
            f'<div class="mb-3">\n<label class="{label_class}" for="{name}">{label}</label>\n'
            f"{control}\n{_panel_field_errors(errors)}\n</div>"
        )
    return "\n".join(rows)


FORM_RENDERERS: Dict[str, FormRenderer] = {
    "p": render_as_p,
    "ul": render_as_ul,
    "table": render_as_table,
    "panel": render_as_panel,
}


def get_form_renderer(style: str) -> FormRenderer:
    try:
        return FORM_RENDERERS[style]
    except KeyError:
        raise ValueError(f"unknown form style '{style}'") from None
