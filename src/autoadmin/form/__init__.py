from autoadmin.form.fields import (
    BooleanField,
    Field,
    FloatField,
    IntegerField,
    OpaqueField,
    TextField,
    UUIDField,
)
from autoadmin.form.form import Form, ValidationFunc, get_clean_data, values_are_valid
from autoadmin.form.kinds import FieldKind
from autoadmin.form.render import FORM_RENDERERS, get_form_renderer

__all__ = [
    "Field",
    "TextField",
    "IntegerField",
    "FloatField",
    "BooleanField",
    "UUIDField",
    "OpaqueField",
    "FieldKind",
    "Form",
    "ValidationFunc",
    "values_are_valid",
    "get_clean_data",
    "FORM_RENDERERS",
    "get_form_renderer",
]
