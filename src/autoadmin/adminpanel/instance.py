from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from autoadmin.adminpanel.model import Model


@dataclass(frozen=True)
class Permissions:
    read: bool = False
    update: bool = False
    delete: bool = False


@dataclass(frozen=True)
class Instance:
    """Read-only, per-request projection of a stored record."""

    instance_id: Any
    data: Any
    model: "Model"
    permissions: Permissions

    def get_field_value(self, name: str) -> Any:
        return getattr(self.data, name, None)

    def get_link(self) -> str:
        return self.model.get_full_instance_link(self.instance_id)

    def get_edit_link(self) -> str:
        return self.model.get_full_edit_link(self.instance_id)
