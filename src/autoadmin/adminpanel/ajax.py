"""
JSON endpoints used by the list page: search, single delete and bulk delete.

Every endpoint answers with a JSONResponse body. Delete failures reported by
the data integrator are treated as client-correctable (400).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List

from autoadmin.adminpanel.audit import LogStoreLevel
from autoadmin.adminpanel.listing import filter_instances_by_permission
from autoadmin.adminpanel.responses import JSONResponse, error_response, success_response
from autoadmin.exceptions import LoggingError, MissingParameter, TypeConversionError

if TYPE_CHECKING:
    from autoadmin.adminpanel.model import Model

logger = logging.getLogger(__name__)


def _respond(model: "Model", ctx: Any, status_code: int, response: JSONResponse) -> None:
    model.panel.web.set_json_response(ctx, status_code, response)


def handle_search(model: "Model", ctx: Any) -> None:
    web = model.panel.web
    query = web.get_query_param(ctx, "q")

    try:
        instances = model.get_orm().fetch_all(model.entity)
        filtered = filter_instances_by_permission(model, instances, ctx)
    except Exception as exc:
        logger.warning("Search on %s failed: %s", model.name, exc)
        return _respond(model, ctx, 400, error_response([str(exc)]))

    # ``query`` is echoed back, not applied; the list view does the searching.
    payload = {
        "instances": [model.serialize_instance(i) for i in filtered],
        "total": len(filtered),
        "query": query,
    }
    return _respond(model, ctx, 200, success_response(payload))


def _resolve_id(model: "Model", ctx: Any) -> str:
    web = model.panel.web
    instance_id = web.get_path_param(ctx, "id") or web.get_query_param(ctx, "id")
    if not instance_id:
        raise MissingParameter("id", "Instance ID is required")
    return instance_id


def handle_delete(model: "Model", ctx: Any) -> None:
    try:
        raw_id = _resolve_id(model, ctx)
    except MissingParameter as exc:
        return _respond(model, ctx, exc.status_code, error_response([exc.message]))

    checker = model.panel.permission_checker
    try:
        instance_id = model.parse_instance_id(raw_id)
        allowed = checker.has_instance_delete_permission(model.app.name, model.name, instance_id, ctx)
    except Exception as exc:
        return _respond(model, ctx, 400, error_response([str(exc)]))

    if not allowed:
        return _respond(model, ctx, 403, error_response(["Permission denied"]))

    try:
        model.get_orm().delete_by_id(model.entity, instance_id)
    except Exception as exc:
        logger.warning("Delete of %s %s failed: %s", model.name, instance_id, exc)
        return _respond(model, ctx, 400, error_response([str(exc)]))

    try:
        model.create_instance_log(ctx, LogStoreLevel.INSTANCE_DELETE, instance_id)
    except LoggingError as exc:
        return _respond(model, ctx, exc.status_code, error_response([exc.message]))

    return _respond(model, ctx, 200, success_response(None, "Item deleted successfully"))


def handle_bulk_delete(model: "Model", ctx: Any) -> None:
    """
    Delete every id in ``{"ids": [...]}``.

    Each id is handled on its own: a denied or failed id is reported in
    ``errors`` and the batch carries on. The request only fails (400) when
    nothing could be deleted.
    """
    web = model.panel.web
    try:
        body = web.get_json_body(ctx)
    except ValueError:
        return _respond(model, ctx, 400, error_response(["Invalid JSON data"]))

    if not isinstance(body, dict) or "ids" not in body:
        return _respond(model, ctx, 400, error_response(["No items selected"]))

    ids = body["ids"]
    if not isinstance(ids, list):
        return _respond(model, ctx, 400, error_response(["Invalid IDs format"]))

    checker = model.panel.permission_checker
    orm = model.get_orm()
    deleted = 0
    errors: List[str] = []

    for raw_id in ids:
        label = str(raw_id)
        try:
            instance_id = model.parse_instance_id(label)
        except TypeConversionError:
            errors.append(f"Failed to delete item {label}: invalid id")
            continue

        try:
            allowed = checker.has_instance_delete_permission(
                model.app.name, model.name, instance_id, ctx
            )
        except Exception as exc:
            logger.warning("Permission check for %s %s failed: %s", model.name, label, exc)
            allowed = False
        if not allowed:
            errors.append(f"Permission denied for item {label}")
            continue

        try:
            orm.delete_by_id(model.entity, instance_id)
        except Exception as exc:
            errors.append(f"Failed to delete item {label}: {exc}")
            continue

        deleted += 1
        try:
            model.create_instance_log(ctx, LogStoreLevel.INSTANCE_DELETE, instance_id)
        except LoggingError as exc:
            return _respond(model, ctx, exc.status_code, error_response([exc.message]))

    if errors:
        response = JSONResponse(
            success=deleted > 0,
            message=f"{deleted} items deleted, {len(errors)} failed",
            data={"deleted": deleted, "failed": len(errors)},
            errors=errors,
        )
        return _respond(model, ctx, 200 if deleted else 400, response)

    return _respond(
        model,
        ctx,
        200,
        success_response({"deleted": deleted}, f"{deleted} items deleted successfully"),
    )
