import uuid

import pytest

from autoadmin.exceptions import ConfigurationError, TypeConversionError
from autoadmin.form import (
    BooleanField,
    FieldKind,
    FloatField,
    Form,
    IntegerField,
    OpaqueField,
    TextField,
    UUIDField,
    get_clean_data,
    values_are_valid,
)
from autoadmin.form.fields import REQUIRED_MESSAGE
from autoadmin.form.form import first_values
from autoadmin.form.kinds import convert_string_to_kind, format_value, kind_for_type


def test_kind_for_type_checks_bool_before_int():
    assert kind_for_type(bool) == FieldKind.BOOLEAN
    assert kind_for_type(int) == FieldKind.INTEGER
    assert kind_for_type(float) == FieldKind.FLOAT
    assert kind_for_type(str) == FieldKind.TEXT
    assert kind_for_type(uuid.UUID) == FieldKind.IDENTIFIER
    assert kind_for_type(dict) == FieldKind.OPAQUE
    assert kind_for_type(None) == FieldKind.OPAQUE


@pytest.mark.parametrize("raw", ["true", "1", "YES", " on "])
def test_convert_truthy_strings(raw):
    assert convert_string_to_kind(raw, FieldKind.BOOLEAN) is True


def test_convert_rejects_bad_values():
    with pytest.raises(TypeConversionError) as exc:
        convert_string_to_kind("twelve", FieldKind.INTEGER)
    assert "twelve" in exc.value.message
    with pytest.raises(TypeConversionError):
        convert_string_to_kind("maybe", FieldKind.BOOLEAN)
    with pytest.raises(TypeConversionError):
        convert_string_to_kind("not-a-uuid", FieldKind.IDENTIFIER)


def test_convert_and_format_are_inverse_for_initial_values():
    assert format_value(convert_string_to_kind("42", FieldKind.INTEGER), FieldKind.INTEGER) == "42"
    assert format_value(convert_string_to_kind("1.5", FieldKind.FLOAT), FieldKind.FLOAT) == "1.5"
    assert format_value(convert_string_to_kind("yes", FieldKind.BOOLEAN), FieldKind.BOOLEAN) == "true"
    assert format_value(None, FieldKind.TEXT) == ""


def test_required_text_rejects_empty_input():
    field = TextField(name="title", required=True)
    assert field.validate("") == [REQUIRED_MESSAGE]
    assert field.validate(None) == [REQUIRED_MESSAGE]
    assert field.validate("x") == []


def test_text_length_and_regex():
    field = TextField(name="code", min_length=2, max_length=4, regex=r"[A-Z]+")
    assert field.validate("A")
    assert field.validate("ABCDE")
    assert field.validate("ab") == ["Enter a valid value."]
    assert field.validate("ABC") == []


def test_constraints_compile_to_a_json_schema():
    field = TextField(name="code", min_length=2, max_length=4, regex=r"ab|cd")
    assert field.schema() == {
        "minLength": 2,
        "maxLength": 4,
        "pattern": r"^(?:ab|cd)\Z",
        "type": "string",
    }
    assert field.validator is not None
    assert TextField(name="free").validator is None
    assert IntegerField(name="age", min_value=0, max_value=9).schema() == {"minimum": 0, "maximum": 9}


def test_schema_errors_are_user_facing():
    field = TextField(name="code", min_length=3, regex=r"[a-z]+")
    assert field.validate("A") == [
        "Ensure this value has at least 3 characters (it has 1).",
        "Enter a valid value.",
    ]
    # the pattern must match the whole value, not a substring
    assert field.validate("abc1") == ["Enter a valid value."]
    assert TextField(name="t", max_length=2).validate("abc") == [
        "Ensure this value has at most 2 characters (it has 3)."
    ]
    assert FloatField(name="r", max_value=1.0).validate("2") == [
        "Ensure this value is less than or equal to 1.0."
    ]


def test_integer_min_rejects_negative():
    field = IntegerField(name="age", min_value=0)
    assert field.validate("-1") == ["Ensure this value is greater than or equal to 0."]
    assert field.validate("0") == []
    assert field.validate("1.5") == ["Enter a whole number."]


def test_float_bounds():
    field = FloatField(name="ratio", min_value=0.0, max_value=1.0)
    assert field.validate("0.5") == []
    assert field.validate("1.01")
    assert field.validate("abc") == ["Enter a number."]


def test_required_checkbox_must_be_checked():
    field = BooleanField(name="agree", required=True)
    assert field.validate(None) == [REQUIRED_MESSAGE]
    assert field.validate("on") == []
    assert field.to_python(None) is False
    assert field.to_python("true") is True


def test_uuid_field():
    field = UUIDField(name="ref")
    assert field.validate("nope") == ["Enter a valid UUID."]
    value = uuid.uuid4()
    assert field.to_python(str(value)) == value


def test_empty_input_converts_by_nullability():
    assert IntegerField(name="n", nullable=True).to_python("") is None
    assert IntegerField(name="n").to_python("") == 0
    assert TextField(name="t").to_python("") == ""
    assert OpaqueField(name="o").to_python("") is None


def test_render_escapes_and_marks_required():
    html = TextField(name="title", required=True, max_length=10).render('"><script>')
    assert 'name="title"' in html
    assert "required" in html
    assert 'maxlength="10"' in html
    assert "<script>" not in html


def test_render_falls_back_to_initial():
    assert 'value="7"' in IntegerField(name="n", initial=7).render()
    assert "checked" in BooleanField(name="b", initial=True).render()
    assert "checked" not in BooleanField(name="b", initial=True).render("false")


def test_form_rejects_duplicate_field_names():
    form = Form([TextField(name="a")])
    with pytest.raises(ConfigurationError):
        form.add_field(TextField(name="a"))


def test_values_are_valid_collects_field_and_form_errors():
    def no_bob(values):
        if values.get("name") == "bob":
            return ["bob is not allowed"]
        return None

    form = Form([TextField(name="name", required=True), IntegerField(name="age", min_value=0)], [no_bob])

    form_errors, field_errors = values_are_valid(form, {"name": "bob", "age": "-3"})
    assert form_errors == ["bob is not allowed"]
    assert set(field_errors) == {"age"}

    form_errors, field_errors = values_are_valid(form, {"name": "amy", "age": "3"})
    assert form_errors == [] and field_errors == {}


def test_validation_function_exceptions_propagate():
    def broken(values):
        raise RuntimeError("boom")

    form = Form([TextField(name="name")], [broken])
    with pytest.raises(RuntimeError):
        values_are_valid(form, {"name": "x"})


def test_get_clean_data_converts_each_field():
    form = Form(
        [
            TextField(name="name"),
            IntegerField(name="age", nullable=True),
            BooleanField(name="active"),
        ]
    )
    assert get_clean_data(form, {"name": "Ada", "age": "36"}) == {
        "name": "Ada",
        "age": 36,
        "active": False,
    }


def test_first_values_collapses_lists():
    assert first_values({"a": ["1", "2"], "b": [], "c": "x"}) == {"a": "1", "b": "", "c": "x"}
