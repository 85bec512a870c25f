from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from autoadmin.adminpanel.audit import LoggerLogStore, LogStore, LogStoreLevel
from autoadmin.adminpanel.integrators import TemplateRenderer
from autoadmin.adminpanel.navbar import NavBarGenerator, NavBarItem
from autoadmin.config import Settings, get_settings
from autoadmin.exceptions import LoggingError

logger = logging.getLogger(__name__)


@dataclass
class PanelConfig:
    """
    Runtime configuration of a panel.

    ``from_settings`` seeds the plain values from the environment. The
    renderer, log store and nav-bar generators are supplied by the host; with
    no log store nothing is audited.
    """

    name: str = "Admin Panel"
    prefix: str = "/admin"
    default_instances_per_page: int = 25
    form_style: str = "panel"
    renderer: Optional[TemplateRenderer] = None
    log_store: Optional[LogStore] = None
    nav_bar_generators: List[NavBarGenerator] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "PanelConfig":
        settings = settings or get_settings()
        values = {
            "name": settings.NAME,
            "prefix": settings.PREFIX,
            "default_instances_per_page": settings.DEFAULT_INSTANCES_PER_PAGE,
            "form_style": settings.FORM_STYLE,
        }
        values.update(overrides)
        config = cls(**values)
        if config.log_store is None:
            config.log_store = LoggerLogStore(settings.AUDIT_LOGGER_NAME)
        return config

    def get_prefix(self) -> str:
        return self.prefix.rstrip("/")

    def get_link(self, path: str) -> str:
        return f"{self.get_prefix()}{path}"

    def get_nav_bar_items(self, ctx: Any) -> List[NavBarItem]:
        return [generator(ctx) for generator in self.nav_bar_generators]

    def create_log(
        self,
        ctx: Any,
        level: LogStoreLevel,
        subject: str,
        detail: Any = None,
        model: str = "",
        extra: str = "",
    ) -> None:
        if self.log_store is None:
            return
        try:
            self.log_store.record_event(ctx, level, subject, detail, model, extra)
        except Exception as exc:
            logger.error("Audit log store failed for %s %s: %s", level.value, subject, exc)
            raise LoggingError(str(exc), level=level.value, subject=subject) from exc
