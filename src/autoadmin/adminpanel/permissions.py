from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class PermissionAction(str, Enum):
    read = "read"
    add = "add"
    update = "update"
    delete = "delete"


@dataclass(frozen=True)
class PermissionRequest:
    """
    A single access question.

    ``model_name`` and ``instance_id`` are None for coarser scopes: an app-level
    request carries only ``app_name``.
    """

    action: PermissionAction
    app_name: str
    model_name: Optional[str] = None
    instance_id: Any = None


# (request, ctx) -> allowed. Raising signals a failed check (500), not a denial.
PermissionFunc = Callable[[PermissionRequest, Any], bool]


def allow_all(request: PermissionRequest, ctx: Any) -> bool:
    return True


class PermissionChecker:
    """Granular helpers over a single permission function."""

    def __init__(self, permission_func: PermissionFunc):
        self.permission_func = permission_func

    def _check(self, request: PermissionRequest, ctx: Any) -> bool:
        return bool(self.permission_func(request, ctx))

    def has_app_read_permission(self, app_name: str, ctx: Any) -> bool:
        return self._check(PermissionRequest(PermissionAction.read, app_name), ctx)

    def has_model_read_permission(self, app_name: str, model_name: str, ctx: Any) -> bool:
        return self._check(PermissionRequest(PermissionAction.read, app_name, model_name), ctx)

    def has_model_create_permission(self, app_name: str, model_name: str, ctx: Any) -> bool:
        return self._check(PermissionRequest(PermissionAction.add, app_name, model_name), ctx)

    def has_instance_read_permission(
        self, app_name: str, model_name: str, instance_id: Any, ctx: Any
    ) -> bool:
        return self._check(
            PermissionRequest(PermissionAction.read, app_name, model_name, instance_id), ctx
        )

    def has_instance_update_permission(
        self, app_name: str, model_name: str, instance_id: Any, ctx: Any
    ) -> bool:
        return self._check(
            PermissionRequest(PermissionAction.update, app_name, model_name, instance_id), ctx
        )

    def has_instance_delete_permission(
        self, app_name: str, model_name: str, instance_id: Any, ctx: Any
    ) -> bool:
        return self._check(
            PermissionRequest(PermissionAction.delete, app_name, model_name, instance_id), ctx
        )
