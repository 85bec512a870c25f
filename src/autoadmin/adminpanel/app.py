from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from autoadmin.adminpanel.audit import LogStoreLevel
from autoadmin.adminpanel.field_config import build_field_config
from autoadmin.adminpanel.integrators import DataIntegrator, HandlerFunc
from autoadmin.adminpanel.introspection import introspect_entity
from autoadmin.adminpanel.model import Model
from autoadmin.adminpanel.responses import html_errors
from autoadmin.exceptions import DuplicateEntity, NotURLSafe, PermissionDenied
from autoadmin.utils import humanize_name, is_url_safe

if TYPE_CHECKING:
    from autoadmin.adminpanel.panel import AdminPanel

logger = logging.getLogger(__name__)


def _entity_hook(entity: type, name: str):
    hook = getattr(entity, name, None)
    return hook if callable(hook) else None


class App:
    """A named group of models, served under ``{prefix}/a/{name}``."""

    def __init__(
        self,
        name: str,
        display_name: str,
        panel: "AdminPanel",
        orm: Optional[DataIntegrator] = None,
    ) -> None:
        self.name = name
        self.display_name = display_name
        self.panel = panel
        self.orm = orm
        self.models: Dict[str, Model] = {}
        self.models_list: List[Model] = []

    def __repr__(self) -> str:
        return f"<App {self.name}>"

    def get_orm(self) -> Optional[DataIntegrator]:
        return self.orm or self.panel.get_orm()

    def get_link(self) -> str:
        return f"/a/{self.name}"

    def get_full_link(self) -> str:
        return self.panel.config.get_link(self.get_link())

    def get_models_with_read_permissions(self, ctx: Any) -> List[Model]:
        checker = self.panel.permission_checker
        return [
            m for m in self.models_list if checker.has_model_read_permission(self.name, m.name, ctx)
        ]

    def get_handler(self) -> HandlerFunc:
        @html_errors
        def app_handler(ctx: Any):
            if not self.panel.permission_checker.has_app_read_permission(self.name, ctx):
                raise PermissionDenied()
            context = {
                "admin": self.panel,
                "apps": self.panel.get_apps_with_read_permissions(ctx),
                "app": self,
                "models": self.get_models_with_read_permissions(ctx),
                "nav_bar_items": self.panel.config.get_nav_bar_items(ctx),
            }
            html = self.panel.config.renderer.render_template("app", context)
            self.panel.config.create_log(ctx, LogStoreLevel.PANEL_VIEW, self.name)
            return 200, html

        return app_handler

    def register_model(self, entity: Any, orm: Optional[DataIntegrator] = None) -> Model:
        """
        Register ``entity`` and its routes.

        Every field config is built before anything is registered, so a bad
        directive leaves the app untouched.
        """
        specs = introspect_entity(entity)

        name_hook = _entity_hook(entity, "admin_name")
        name = name_hook() if name_hook else entity.__name__
        if not is_url_safe(name):
            raise NotURLSafe(name)

        display_hook = _entity_hook(entity, "admin_display_name")
        display_name = display_hook() if display_hook else humanize_name(name)

        if name in self.models:
            raise DuplicateEntity(name, self.name)

        form_field_hook = _entity_hook(entity, "admin_form_field")
        fields = [build_field_config(spec, form_field_hook) for spec in specs]

        validators_hook = _entity_hook(entity, "admin_form_validators")
        add_validators = list(validators_hook(False) or []) if validators_hook else []
        edit_validators = list(validators_hook(True) or []) if validators_hook else []

        model = Model(
            name=name,
            display_name=display_name,
            entity=entity,
            app=self,
            fields=fields,
            orm=orm,
            add_validators=add_validators,
            edit_validators=edit_validators,
        )

        web = self.panel.web
        base = model.get_full_link()
        web.handle_route("GET", base, model.get_view_handler())
        web.handle_route("GET", f"{base}/{{id}}/view", model.get_instance_view_handler())
        web.handle_route("DELETE", f"{base}/{{id}}/view", model.get_instance_delete_handler())
        add_handler = model.get_add_handler()
        web.handle_route("GET", f"{base}/add", add_handler)
        web.handle_route("POST", f"{base}/add", add_handler)
        edit_handler = model.get_edit_handler()
        web.handle_route("GET", f"{base}/{{id}}/edit", edit_handler)
        web.handle_route("POST", f"{base}/{{id}}/edit", edit_handler)
        web.handle_json_route("GET", f"{base}/search", model.get_search_ajax_handler())
        web.handle_json_route("DELETE", f"{base}/{{id}}/delete", model.get_delete_ajax_handler())
        web.handle_json_route("POST", f"{base}/bulk-delete", model.get_bulk_delete_ajax_handler())

        self.models[name] = model
        self.models_list.append(model)
        logger.info("Registered admin model %s.%s (%d fields)", self.name, name, len(fields))
        return model
