from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from autoadmin.adminpanel.integrators import HandlerFunc, JSONHandlerFunc, WebIntegrator

logger = logging.getLogger(__name__)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class RequestContext:
    """Per-request state handed to admin handlers."""

    request: Request
    form: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""
    json_status: int = 200
    json_payload: Any = None

    @property
    def user(self) -> Any:
        return getattr(self.request.state, "user", None)


class FastAPIIntegrator(WebIntegrator):
    """
    Serves admin routes from a FastAPI app or APIRouter.

    Routes are added to ``router`` as they are registered. When an APIRouter
    is used it must be included in the app after the models are registered,
    since ``include_router`` copies routes at call time.
    """

    def __init__(self, router: Optional[Union[FastAPI, APIRouter]] = None):
        self.router = router if router is not None else APIRouter()

    async def _build_context(self, request: Request) -> RequestContext:
        ctx = RequestContext(request=request)
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            content_type = request.headers.get("content-type", "")
            if content_type.startswith(_FORM_CONTENT_TYPES):
                form = await request.form()
                for key, value in form.multi_items():
                    if isinstance(value, str):
                        ctx.form.setdefault(key, []).append(value)
            else:
                ctx.body = await request.body()
        return ctx

    def handle_route(self, method: str, path: str, handler: HandlerFunc) -> None:
        async def endpoint(request: Request) -> Response:
            ctx = await self._build_context(request)
            status_code, body = await run_in_threadpool(handler, ctx)
            if 300 <= status_code < 400:
                return RedirectResponse(url=body, status_code=status_code)
            return HTMLResponse(body, status_code=status_code)

        self.router.add_api_route(
            path,
            endpoint,
            methods=[method.upper()],
            include_in_schema=False,
            response_class=HTMLResponse,
        )
        logger.debug("Admin route %s %s", method, path)

    def handle_json_route(self, method: str, path: str, handler: JSONHandlerFunc) -> None:
        async def endpoint(request: Request) -> Response:
            ctx = await self._build_context(request)
            await run_in_threadpool(handler, ctx)
            return JSONResponse(ctx.json_payload, status_code=ctx.json_status)

        self.router.add_api_route(
            path,
            endpoint,
            methods=[method.upper()],
            include_in_schema=False,
            response_class=JSONResponse,
        )
        logger.debug("Admin JSON route %s %s", method, path)

    def get_query_param(self, ctx: RequestContext, name: str) -> str:
        return ctx.request.query_params.get(name, "")

    def get_path_param(self, ctx: RequestContext, name: str) -> str:
        value = ctx.request.path_params.get(name)
        return "" if value is None else str(value)

    def get_request_method(self, ctx: RequestContext) -> str:
        return ctx.request.method

    def get_form_data(self, ctx: RequestContext) -> Dict[str, List[str]]:
        return ctx.form

    def get_json_body(self, ctx: RequestContext) -> Any:
        # json.JSONDecodeError is a ValueError
        return json.loads(ctx.body or b"")

    def set_json_response(self, ctx: RequestContext, status_code: int, data: Any) -> None:
        to_payload = getattr(data, "to_payload", None)
        ctx.json_status = status_code
        ctx.json_payload = to_payload() if callable(to_payload) else jsonable_encoder(data)
