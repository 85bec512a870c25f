from autoadmin.adminpanel.app import App
from autoadmin.adminpanel.audit import LoggerLogStore, LogStore, LogStoreLevel, MemoryLogStore
from autoadmin.adminpanel.field_config import FieldConfig, build_field_config, build_form_field
from autoadmin.adminpanel.instance import Instance, Permissions
from autoadmin.adminpanel.integrators import DataIntegrator, TemplateRenderer, WebIntegrator
from autoadmin.adminpanel.introspection import FieldSpec, introspect_entity
from autoadmin.adminpanel.model import Model
from autoadmin.adminpanel.navbar import NavBarItem
from autoadmin.adminpanel.panel import AdminPanel
from autoadmin.adminpanel.panel_config import PanelConfig
from autoadmin.adminpanel.permissions import (
    PermissionAction,
    PermissionChecker,
    PermissionRequest,
    allow_all,
)
from autoadmin.adminpanel.responses import JSONResponse, get_error_html

__all__ = [
    "AdminPanel",
    "App",
    "Model",
    "PanelConfig",
    "FieldSpec",
    "FieldConfig",
    "Instance",
    "Permissions",
    "introspect_entity",
    "build_field_config",
    "build_form_field",
    "DataIntegrator",
    "WebIntegrator",
    "TemplateRenderer",
    "PermissionAction",
    "PermissionRequest",
    "PermissionChecker",
    "allow_all",
    "LogStore",
    "LogStoreLevel",
    "LoggerLogStore",
    "MemoryLogStore",
    "NavBarItem",
    "JSONResponse",
    "get_error_html",
]
