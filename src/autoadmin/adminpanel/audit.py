"""
Audit Service
Records what was viewed, created, changed and deleted through the panel.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class LogStoreLevel(str, Enum):
    PANEL_VIEW = "panel_view"
    LIST_VIEW = "list_view"
    INSTANCE_VIEW = "instance_view"
    INSTANCE_CREATE = "instance_create"
    INSTANCE_UPDATE = "instance_update"
    INSTANCE_DELETE = "instance_delete"


@dataclass(frozen=True)
class LogEntry:
    level: LogStoreLevel
    subject: str
    detail: Any = None
    model: str = ""
    extra: str = ""
    user_id: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class LogStore(ABC):
    @abstractmethod
    def record_event(
        self,
        ctx: Any,
        level: LogStoreLevel,
        subject: str,
        detail: Any = None,
        model: str = "",
        extra: str = "",
    ) -> None:
        """Persist one entry. Any exception fails the enclosing request."""


def _user_id(ctx: Any) -> Optional[str]:
    user = getattr(ctx, "user", None)
    if user is None:
        return None
    user_id = getattr(user, "id", user)
    return None if user_id is None else str(user_id)


class LoggerLogStore(LogStore):
    """Emits entries on a standard logger."""

    def __init__(self, logger_name: str = "autoadmin.audit"):
        self.logger = logging.getLogger(logger_name)

    def record_event(self, ctx, level, subject, detail=None, model="", extra=""):
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "user_id": _user_id(ctx),
            "level": level.value,
            "subject": subject,
            "model": model,
            "detail": detail,
        }
        if extra:
            entry["extra"] = extra
        self.logger.info("[AUDIT] %s", entry)


class MemoryLogStore(LogStore):
    def __init__(self) -> None:
        self.entries: List[LogEntry] = []

    def record_event(self, ctx, level, subject, detail=None, model="", extra=""):
        self.entries.append(
            LogEntry(
                level=level,
                subject=subject,
                detail=detail,
                model=model,
                extra=extra,
                user_id=_user_id(ctx),
            )
        )

    def levels(self) -> List[LogStoreLevel]:
        return [e.level for e in self.entries]
