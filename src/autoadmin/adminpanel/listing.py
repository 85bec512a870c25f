"""
List view pipeline.

ResolveParams -> CheckModelPermission -> Fetch -> FilterByPermission ->
Paginate -> attach per-instance permissions. Rendering and the audit entry
are done by the model's view handler.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

from autoadmin.adminpanel.instance import Instance, Permissions
from autoadmin.exceptions import PermissionDenied

if TYPE_CHECKING:
    from autoadmin.adminpanel.model import Model

MIN_PER_PAGE = 10


@dataclass(frozen=True)
class ListingPage:
    instances: List[Instance]
    total_count: int
    total_pages: int
    current_page: int
    per_page: int
    search: str = ""


def _parse_positive_int(raw: Optional[str]) -> Optional[int]:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def resolve_pagination(page_raw: Optional[str], per_page_raw: Optional[str], default_per_page: int) -> Tuple[int, int]:
    """
    ``page`` falls back to 1; ``perPage`` falls back to ``default_per_page``.
    The page size is never below MIN_PER_PAGE.
    """
    page = _parse_positive_int(page_raw) or 1
    per_page = _parse_positive_int(per_page_raw) or default_per_page
    if per_page < MIN_PER_PAGE:
        per_page = MIN_PER_PAGE
    return page, per_page


def get_pagination(model: "Model", ctx: Any) -> Tuple[int, int]:
    web = model.app.panel.web
    return resolve_pagination(
        web.get_query_param(ctx, "page"),
        web.get_query_param(ctx, "perPage"),
        model.app.panel.config.default_instances_per_page,
    )


def get_fields_to_fetch(model: "Model") -> List[str]:
    return [fc.name for fc in model.fields if fc.include_in_list_fetch]


def get_fields_to_search(model: "Model") -> List[str]:
    return [fc.name for fc in model.fields if fc.include_in_search]


def filter_instances_by_permission(model: "Model", instances: Iterable[Any], ctx: Any) -> List[Any]:
    """Drop instances the caller may not read. Denials are not errors."""
    if instances is None:
        return []
    checker = model.app.panel.permission_checker
    filtered = []
    for instance in instances:
        if instance is None:
            continue
        instance_id = model.get_primary_key_value(instance)
        if checker.has_instance_read_permission(model.app.name, model.name, instance_id, ctx):
            filtered.append(instance)
    return filtered


def paginate(items: Sequence[Any], page: int, per_page: int) -> Tuple[List[Any], int, int]:
    """Return ``(window, total_count, total_pages)``; out-of-range pages are empty."""
    total = len(items)
    total_pages = math.ceil(total / per_page) if per_page else 0
    start = min(max((page - 1) * per_page, 0), total)
    end = min(start + per_page, total)
    return list(items[start:end]), total, total_pages


def build_clean_instances(model: "Model", ctx: Any, instances: Iterable[Any]) -> List[Instance]:
    checker = model.app.panel.permission_checker
    clean = []
    for instance in instances:
        instance_id = model.get_primary_key_value(instance)
        can_update = checker.has_instance_update_permission(
            model.app.name, model.name, instance_id, ctx
        )
        can_delete = checker.has_instance_delete_permission(
            model.app.name, model.name, instance_id, ctx
        )
        clean.append(
            Instance(
                instance_id=instance_id,
                data=instance,
                model=model,
                permissions=Permissions(read=True, update=can_update, delete=can_delete),
            )
        )
    return clean


def fetch_listing(model: "Model", ctx: Any) -> ListingPage:
    page, per_page = get_pagination(model, ctx)

    checker = model.app.panel.permission_checker
    if not checker.has_model_read_permission(model.app.name, model.name, ctx):
        raise PermissionDenied()

    orm = model.get_orm()
    fields_to_fetch = get_fields_to_fetch(model)
    search = model.app.panel.web.get_query_param(ctx, "search") or ""
    if search:
        instances = orm.fetch_fields_with_search(
            model.entity, fields_to_fetch, search, get_fields_to_search(model)
        )
    else:
        instances = orm.fetch_fields(model.entity, fields_to_fetch)

    filtered = filter_instances_by_permission(model, instances, ctx)
    window, total, total_pages = paginate(filtered, page, per_page)

    return ListingPage(
        instances=build_clean_instances(model, ctx, window),
        total_count=total,
        total_pages=total_pages,
        current_page=page,
        per_page=per_page,
        search=search,
    )
