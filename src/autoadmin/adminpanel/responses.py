from __future__ import annotations

import functools
import logging
from html import escape
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from autoadmin.adminpanel.integrators import HandlerResult
from autoadmin.exceptions import AdminException

logger = logging.getLogger(__name__)


class JSONResponse(BaseModel):
    """Uniform body of every AJAX endpoint."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[List[str]] = Field(default=None)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def success_response(data: Any = None, message: str = "") -> JSONResponse:
    return JSONResponse(success=True, message=message or None, data=data)


def error_response(errors: List[str]) -> JSONResponse:
    return JSONResponse(success=False, errors=list(errors))


def get_error_html(code: int, err: Any) -> HandlerResult:
    return code, f"Code: {code}. Error: {escape(str(err))}"


def redirect(location: str, code: int = 303) -> Tuple[int, str]:
    return code, location


def html_errors(func):
    """Map exceptions raised by an HTML handler to an error page."""

    @functools.wraps(func)
    def wrapper(ctx):
        try:
            return func(ctx)
        except AdminException as exc:
            if exc.status_code >= 500:
                logger.error("Admin handler %s failed: %s", func.__name__, exc)
            return get_error_html(exc.status_code, exc)
        except Exception as exc:
            logger.exception("Admin handler %s failed", func.__name__)
            return get_error_html(500, exc)

    return wrapper
