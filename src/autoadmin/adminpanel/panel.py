from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from autoadmin.adminpanel.app import App
from autoadmin.adminpanel.audit import LogStoreLevel
from autoadmin.adminpanel.integrators import DataIntegrator, HandlerFunc, WebIntegrator
from autoadmin.adminpanel.panel_config import PanelConfig
from autoadmin.adminpanel.permissions import PermissionChecker, PermissionFunc, allow_all
from autoadmin.adminpanel.responses import html_errors
from autoadmin.exceptions import DuplicateEntity, NotURLSafe
from autoadmin.utils import humanize_name, is_url_safe

logger = logging.getLogger(__name__)


class AdminPanel:
    """
    Root of the admin site.

    The panel owns the web and data integrators, the permission checker and
    the runtime config. Apps and models register their routes through the web
    integrator as they are added; the root page is served at the prefix.
    """

    def __init__(
        self,
        orm: Optional[DataIntegrator],
        web: WebIntegrator,
        permission_func: Optional[PermissionFunc] = None,
        config: Optional[PanelConfig] = None,
    ) -> None:
        self.orm = orm
        self.web = web
        self.permission_checker = PermissionChecker(permission_func or allow_all)
        self.config = config or PanelConfig.from_settings()
        if self.config.renderer is None:
            from autoadmin.renderer import Jinja2Renderer

            self.config.renderer = Jinja2Renderer()
        self.apps: Dict[str, App] = {}
        self.apps_list: List[App] = []

        self.web.handle_route("GET", self.config.get_prefix() or "/", self.get_handler())

    def get_orm(self) -> Optional[DataIntegrator]:
        return self.orm

    def register_app(
        self,
        name: str,
        display_name: str = "",
        orm: Optional[DataIntegrator] = None,
    ) -> App:
        if not is_url_safe(name):
            raise NotURLSafe(name, kind="app")
        if name in self.apps:
            raise DuplicateEntity(name, self.config.name, kind="app")

        app = App(name, display_name or humanize_name(name), self, orm)
        self.web.handle_route("GET", app.get_full_link(), app.get_handler())
        self.apps[name] = app
        self.apps_list.append(app)
        logger.info("Registered admin app %s", name)
        return app

    def get_apps_with_read_permissions(self, ctx: Any) -> List[App]:
        return [a for a in self.apps_list if self.permission_checker.has_app_read_permission(a.name, ctx)]

    def get_handler(self) -> HandlerFunc:
        @html_errors
        def root_handler(ctx: Any):
            context = {
                "admin": self,
                "apps": self.get_apps_with_read_permissions(ctx),
                "nav_bar_items": self.config.get_nav_bar_items(ctx),
            }
            html = self.config.renderer.render_template("root", context)
            self.config.create_log(ctx, LogStoreLevel.PANEL_VIEW, self.config.name)
            return 200, html

        return root_handler
