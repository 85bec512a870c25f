import uuid

import pytest

from autoadmin.adminpanel.directives import get_directive, has_directive, parse_directives
from autoadmin.adminpanel.field_config import build_field_config, build_form_field
from autoadmin.adminpanel.introspection import FieldSpec
from autoadmin.exceptions import InvalidDirective, TypeConversionError
from autoadmin.form import FieldKind, IntegerField, TextField
from autoadmin.utils import humanize_name, is_url_safe


def test_defaults_include_everywhere():
    opts = parse_directives("", "first_name")
    assert opts.include_in_list_display
    assert opts.include_in_list_fetch
    assert opts.include_in_search
    assert opts.include_in_instance_view
    assert opts.include_in_add_form
    assert opts.include_in_edit_form
    assert opts.display_name == "First Name"


def test_parse_is_idempotent():
    raw = "listDisplay:exclude;search:exclude;displayName:Surname"
    assert parse_directives(raw, "last_name") == parse_directives(raw, "last_name")


def test_list_fetch_mirrors_list_display_except_for_primary_key():
    assert parse_directives("listDisplay:exclude", "notes").include_in_list_fetch is False
    assert parse_directives("listDisplay:exclude", "id", primary_key=True).include_in_list_fetch is True
    opts = parse_directives("listDisplay:exclude;listFetch:include", "notes")
    assert opts.include_in_list_fetch is True


@pytest.mark.parametrize("raw", ["listDisplay:maybe", "addForm:", "listDisplay"])
def test_invalid_inclusion_value(raw):
    with pytest.raises(InvalidDirective):
        parse_directives(raw, "title")


def test_value_keeps_text_after_first_colon():
    raw = "regex:^a:b$;required"
    assert get_directive(raw, "regex") == "^a:b$"
    assert has_directive(raw, "required")
    assert get_directive(raw, "missing") is None


def test_unknown_keys_are_ignored_by_inclusion_parsing():
    opts = parse_directives("placeholder:Type here;min:3", "title")
    assert opts.include_in_add_form


def test_build_form_field_reads_constraints():
    spec = FieldSpec("age", FieldKind.INTEGER, "required;min:0;max:120;initial:18")
    widget = build_form_field(spec, "Age")
    assert isinstance(widget, IntegerField)
    assert widget.required
    assert (widget.min_value, widget.max_value, widget.initial) == (0, 120, 18)


@pytest.mark.parametrize(
    "kind, raw, expected",
    [
        (FieldKind.INTEGER, "42", 42),
        (FieldKind.FLOAT, "2.5", 2.5),
        (FieldKind.BOOLEAN, "true", True),
        (
            FieldKind.IDENTIFIER,
            "6f1c0f4e-2a4b-4c1d-9b7e-0d2c5e8a9f10",
            uuid.UUID("6f1c0f4e-2a4b-4c1d-9b7e-0d2c5e8a9f10"),
        ),
    ],
)
def test_initial_round_trips_through_the_widget(kind, raw, expected):
    widget = build_form_field(FieldSpec("value", kind, f"initial:{raw}"))
    assert widget.initial == expected
    assert widget.to_python(widget.format_value(widget.initial)) == widget.initial


def test_unconvertible_initial_aborts():
    with pytest.raises(TypeConversionError):
        build_form_field(FieldSpec("age", FieldKind.INTEGER, "initial:abc"))


def test_unparsable_bound_is_ignored():
    widget = build_form_field(FieldSpec("age", FieldKind.INTEGER, "min:zero"))
    assert widget.min_value is None


def test_invalid_regex_is_rejected():
    with pytest.raises(InvalidDirective):
        build_form_field(FieldSpec("code", FieldKind.TEXT, "regex:[unclosed"))


def test_widget_shared_between_forms_unless_hook_overrides():
    spec = FieldSpec("title", FieldKind.TEXT, "maxLength:10")
    config = build_field_config(spec)
    assert config.add_form_field is config.edit_form_field

    custom = TextField(name="title", max_length=3)

    def hook(name, is_edit):
        return custom if is_edit else None

    config = build_field_config(spec, hook)
    assert config.edit_form_field is custom
    assert config.add_form_field is not custom


def test_excluded_field_has_no_widget():
    config = build_field_config(FieldSpec("id", FieldKind.INTEGER, "addForm:exclude;editForm:exclude", primary_key=True))
    assert config.add_form_field is None
    assert config.edit_form_field is None
    assert config.include_in_list_fetch


def test_opaque_fields_are_never_required():
    widget = build_form_field(FieldSpec("blob", FieldKind.OPAQUE, "required"))
    assert widget.required is False


@pytest.mark.parametrize(
    "name,expected",
    [("first_name", "First Name"), ("createdAt", "Created At"), ("HTTPStatus", "HTTP Status"), ("id", "ID")],
)
def test_humanize_name(name, expected):
    assert humanize_name(name) == expected


def test_is_url_safe():
    assert is_url_safe("Persona_v2.~-")
    assert not is_url_safe("")
    assert not is_url_safe("has space")
    assert not is_url_safe("a/b")
    assert not is_url_safe("abc\n")
