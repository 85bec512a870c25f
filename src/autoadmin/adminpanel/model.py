from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from pydantic_core import to_jsonable_python

from autoadmin.adminpanel import ajax
from autoadmin.adminpanel.audit import LogStoreLevel
from autoadmin.adminpanel.field_config import FieldConfig
from autoadmin.adminpanel.integrators import DataIntegrator, HandlerFunc, JSONHandlerFunc
from autoadmin.adminpanel.listing import fetch_listing
from autoadmin.adminpanel.model_form import ModelForm
from autoadmin.adminpanel.responses import get_error_html, html_errors, redirect
from autoadmin.exceptions import (
    FormValidationError,
    IntegratorError,
    NotFound,
    PermissionDenied,
    TypeConversionError,
)
from autoadmin.form.form import Form, ValidationFunc, first_values
from autoadmin.form.kinds import FieldKind, convert_string_to_kind

if TYPE_CHECKING:
    from autoadmin.adminpanel.app import App

logger = logging.getLogger(__name__)


class Model:
    """A registered entity type inside an app."""

    def __init__(
        self,
        name: str,
        display_name: str,
        entity: type,
        app: "App",
        fields: Sequence[FieldConfig],
        orm: Optional[DataIntegrator] = None,
        add_validators: Sequence[ValidationFunc] = (),
        edit_validators: Sequence[ValidationFunc] = (),
    ) -> None:
        self.name = name
        self.display_name = display_name
        self.entity = entity
        self.app = app
        self.fields: Tuple[FieldConfig, ...] = tuple(fields)
        self.orm = orm
        # resolved once: model override, then app, then panel
        self._data_integrator = orm or app.get_orm()

        self.add_form = ModelForm(
            self,
            Form(
                [fc.add_form_field for fc in self.fields if fc.add_form_field is not None],
                add_validators,
            ),
        )
        self.edit_form = ModelForm(
            self,
            Form(
                [fc.edit_form_field for fc in self.fields if fc.edit_form_field is not None],
                edit_validators,
            ),
            is_edit=True,
        )

    def __repr__(self) -> str:
        return f"<Model {self.app.name}.{self.name}>"

    @property
    def panel(self):
        return self.app.panel

    def get_orm(self) -> DataIntegrator:
        if self._data_integrator is None:
            raise IntegratorError(f"no data integrator configured for model '{self.name}'")
        return self._data_integrator

    # -- links ------------------------------------------------------------

    def get_link(self) -> str:
        return f"{self.app.get_link()}/{self.name}"

    def get_full_link(self) -> str:
        return self.panel.config.get_link(self.get_link())

    def get_add_link(self) -> str:
        return f"{self.get_link()}/add"

    def get_full_add_link(self) -> str:
        return self.panel.config.get_link(self.get_add_link())

    def get_full_instance_link(self, instance_id: Any) -> str:
        return f"{self.get_full_link()}/{instance_id}/view"

    def get_full_edit_link(self, instance_id: Any) -> str:
        return f"{self.get_full_link()}/{instance_id}/edit"

    # -- fields -----------------------------------------------------------

    def get_field(self, name: str) -> Optional[FieldConfig]:
        return next((fc for fc in self.fields if fc.name == name), None)

    @property
    def list_display_fields(self) -> List[FieldConfig]:
        return [fc for fc in self.fields if fc.include_in_list_display]

    @property
    def instance_view_fields(self) -> List[FieldConfig]:
        return [fc for fc in self.fields if fc.include_in_instance_view]

    def get_primary_key_value(self, instance: Any) -> Any:
        return self.get_orm().primary_key_value(instance)

    def get_primary_key_kind(self) -> FieldKind:
        return self.get_orm().primary_key_kind(self.entity)

    def parse_instance_id(self, raw: Any) -> Any:
        """Convert an id taken from a URL or JSON body to the primary key type."""
        if not isinstance(raw, str):
            return raw
        return convert_string_to_kind(raw, self.get_primary_key_kind())

    def serialize_instance(self, instance: Any) -> Dict[str, Any]:
        return {
            fc.name: to_jsonable_python(getattr(instance, fc.name, None), fallback=str)
            for fc in self.fields
        }

    # -- audit ------------------------------------------------------------

    def create_view_log(self, ctx: Any) -> None:
        self.panel.config.create_log(
            ctx, LogStoreLevel.LIST_VIEW, f"{self.app.name} | {self.display_name}"
        )

    def create_instance_log(self, ctx: Any, level: LogStoreLevel, instance_id: Any, detail: Any = None) -> None:
        self.panel.config.create_log(ctx, level, str(instance_id), detail, self.name)

    # -- shared handler steps ---------------------------------------------

    def _instance_id_from_path(self, ctx: Any) -> Any:
        raw = self.panel.web.get_path_param(ctx, "id")
        if not raw:
            raise NotFound(self.display_name)
        try:
            return self.parse_instance_id(raw)
        except TypeConversionError:
            raise NotFound(self.display_name, raw) from None

    def _get_instance(self, instance_id: Any) -> Any:
        instance = self.get_orm().get_by_id(self.entity, instance_id)
        if instance is None:
            raise NotFound(self.display_name, instance_id)
        return instance

    def _base_context(self, ctx: Any) -> Dict[str, Any]:
        return {
            "admin": self.panel,
            "apps": self.panel.get_apps_with_read_permissions(ctx),
            "app": self.app,
            "model": self,
            "nav_bar_items": self.panel.config.get_nav_bar_items(ctx),
        }

    def _render(self, template: str, context: Dict[str, Any]) -> str:
        return self.panel.config.renderer.render_template(template, context)

    # -- HTML handlers ----------------------------------------------------

    def get_view_handler(self) -> HandlerFunc:
        @html_errors
        def view_handler(ctx: Any):
            listing = fetch_listing(self, ctx)
            context = self._base_context(ctx)
            context.update(
                {
                    "instances": listing.instances,
                    "total_count": listing.total_count,
                    "total_pages": listing.total_pages,
                    "current_page": listing.current_page,
                    "per_page": listing.per_page,
                    "search": listing.search,
                }
            )
            html = self._render("model", context)
            self.create_view_log(ctx)
            return 200, html

        return view_handler

    def get_instance_view_handler(self) -> HandlerFunc:
        @html_errors
        def instance_view_handler(ctx: Any):
            instance_id = self._instance_id_from_path(ctx)
            checker = self.panel.permission_checker
            if not checker.has_instance_read_permission(self.app.name, self.name, instance_id, ctx):
                raise PermissionDenied()
            instance = self._get_instance(instance_id)
            context = self._base_context(ctx)
            context.update(
                {
                    "instance": instance,
                    "instance_id": instance_id,
                    "fields": self.instance_view_fields,
                    "can_update": checker.has_instance_update_permission(
                        self.app.name, self.name, instance_id, ctx
                    ),
                    "can_delete": checker.has_instance_delete_permission(
                        self.app.name, self.name, instance_id, ctx
                    ),
                }
            )
            html = self._render("instance", context)
            self.create_instance_log(ctx, LogStoreLevel.INSTANCE_VIEW, instance_id)
            return 200, html

        return instance_view_handler

    def get_instance_delete_handler(self) -> HandlerFunc:
        @html_errors
        def instance_delete_handler(ctx: Any):
            instance_id = self._instance_id_from_path(ctx)
            checker = self.panel.permission_checker
            if not checker.has_instance_delete_permission(self.app.name, self.name, instance_id, ctx):
                raise PermissionDenied()
            try:
                self.get_orm().delete_by_id(self.entity, instance_id)
            except Exception as exc:
                logger.warning("Delete of %s %s failed: %s", self.name, instance_id, exc)
                return get_error_html(400, exc)
            self.create_instance_log(ctx, LogStoreLevel.INSTANCE_DELETE, instance_id)
            return 200, "Item deleted successfully"

        return instance_delete_handler

    def _form_response(
        self,
        ctx: Any,
        model_form: ModelForm,
        action: str,
        instance_id: Any = None,
        values: Optional[Dict[str, str]] = None,
        form_errors: Optional[List[str]] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        context = self._base_context(ctx)
        context.update(
            {
                "form_html": model_form.render(form_errors, field_errors, values),
                "is_edit": model_form.is_edit,
                "instance_id": instance_id,
                "action": action,
                "form_errors": form_errors or [],
            }
        )
        return 200, self._render("form", context)

    def get_add_handler(self) -> HandlerFunc:
        @html_errors
        def add_handler(ctx: Any):
            checker = self.panel.permission_checker
            if not checker.has_model_create_permission(self.app.name, self.name, ctx):
                raise PermissionDenied()
            action = self.get_full_add_link()
            if self.panel.web.get_request_method(ctx).upper() != "POST":
                return self._form_response(ctx, self.add_form, action)

            values = first_values(self.panel.web.get_form_data(ctx))
            try:
                created = self.add_form.save(values)
            except FormValidationError as exc:
                return self._form_response(
                    ctx,
                    self.add_form,
                    action,
                    values=values,
                    form_errors=exc.form_errors,
                    field_errors=exc.field_errors,
                )
            instance_id = self.get_primary_key_value(created)
            self.create_instance_log(ctx, LogStoreLevel.INSTANCE_CREATE, instance_id)
            return redirect(self.get_full_link())

        return add_handler

    def get_edit_handler(self) -> HandlerFunc:
        @html_errors
        def edit_handler(ctx: Any):
            instance_id = self._instance_id_from_path(ctx)
            checker = self.panel.permission_checker
            if not checker.has_instance_update_permission(self.app.name, self.name, instance_id, ctx):
                raise PermissionDenied()
            instance = self._get_instance(instance_id)
            action = self.get_full_edit_link(instance_id)
            if self.panel.web.get_request_method(ctx).upper() != "POST":
                return self._form_response(
                    ctx,
                    self.edit_form,
                    action,
                    instance_id=instance_id,
                    values=self.edit_form.initial_values(instance),
                )

            values = first_values(self.panel.web.get_form_data(ctx))
            try:
                self.edit_form.save(values, instance_id=instance_id)
            except FormValidationError as exc:
                return self._form_response(
                    ctx,
                    self.edit_form,
                    action,
                    instance_id=instance_id,
                    values=values,
                    form_errors=exc.form_errors,
                    field_errors=exc.field_errors,
                )
            self.create_instance_log(ctx, LogStoreLevel.INSTANCE_UPDATE, instance_id)
            return redirect(self.get_full_instance_link(instance_id))

        return edit_handler

    # -- JSON handlers ----------------------------------------------------

    def get_search_ajax_handler(self) -> JSONHandlerFunc:
        return lambda ctx: ajax.handle_search(self, ctx)

    def get_delete_ajax_handler(self) -> JSONHandlerFunc:
        return lambda ctx: ajax.handle_delete(self, ctx)

    def get_bulk_delete_ajax_handler(self) -> JSONHandlerFunc:
        return lambda ctx: ajax.handle_bulk_delete(self, ctx)
