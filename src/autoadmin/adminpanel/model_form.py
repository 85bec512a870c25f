from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from autoadmin.exceptions import FormValidationError
from autoadmin.form.form import Form, get_clean_data, values_are_valid
from autoadmin.form.render import get_form_renderer

if TYPE_CHECKING:
    from autoadmin.adminpanel.model import Model


class ModelForm:
    """Add or edit form of a registered model."""

    def __init__(self, model: "Model", form: Form, is_edit: bool = False):
        self.model = model
        self.form = form
        self.is_edit = is_edit

    def validate(self, values: Mapping[str, Any]) -> Tuple[List[str], Dict[str, List[str]]]:
        return values_are_valid(self.form, values)

    def save(self, values: Mapping[str, Any], instance_id: Any = None) -> Any:
        """
        Validate, convert and persist ``values``.

        Raises FormValidationError with the collected errors when the input is
        invalid; nothing is written in that case.
        """
        form_errors, field_errors = self.validate(values)
        if form_errors or field_errors:
            raise FormValidationError(form_errors, field_errors)

        clean = get_clean_data(self.form, values)
        orm = self.model.get_orm()
        if self.is_edit:
            return orm.update_instance(self.model.entity, instance_id, clean)
        for name in self._blank_primary_keys(values):
            # left to the data integrator to generate
            del clean[name]
        return orm.create_instance(self.model.entity, clean)

    def _blank_primary_keys(self, values: Mapping[str, Any]) -> List[str]:
        blank = []
        for field in self.form.get_fields():
            config = self.model.get_field(field.name)
            raw = values.get(field.name)
            if config is not None and config.primary_key and (raw is None or str(raw).strip() == ""):
                blank.append(field.name)
        return blank

    def initial_values(self, instance: Any) -> Dict[str, str]:
        """Raw input values for an existing instance."""
        values = {}
        for field in self.form.get_fields():
            values[field.name] = field.format_value(getattr(instance, field.name, None))
        return values

    def render(
        self,
        form_errors: Optional[List[str]] = None,
        field_errors: Optional[Mapping[str, List[str]]] = None,
        values: Optional[Mapping[str, str]] = None,
        style: Optional[str] = None,
    ) -> str:
        renderer = get_form_renderer(style or self.model.app.panel.config.form_style)
        return renderer(self.form, form_errors or [], field_errors or {}, values)
