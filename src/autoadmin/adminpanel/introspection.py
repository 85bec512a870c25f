"""
Entity introspection.

Turns a registered class into an ordered list of FieldSpec. Three shapes are
understood, checked in this order:

1. explicit descriptors: ``__admin_fields__ = [FieldSpec(...), ...]``
2. dataclasses: directives in ``field(metadata={"admin": "..."})``
3. SQLAlchemy mapped classes: directives in ``Column(info={"admin": "..."})``
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from autoadmin.exceptions import InvalidEntityShape
from autoadmin.form.kinds import FieldKind, kind_for_type

logger = logging.getLogger(__name__)

DIRECTIVE_KEY = "admin"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.OPAQUE
    directive: str = ""
    optional: bool = False
    primary_key: bool = False
    python_type: Optional[type] = None


def _unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    origin = typing.get_origin(tp)
    union_types = (typing.Union,)
    if hasattr(types, "UnionType"):
        union_types = union_types + (types.UnionType,)
    if origin in union_types:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        optional = len(args) != len(typing.get_args(tp))
        if len(args) == 1:
            return args[0], optional
        return None, optional
    return tp, False


def _dataclass_specs(entity: type) -> List[FieldSpec]:
    try:
        hints = typing.get_type_hints(entity)
    except (NameError, TypeError) as exc:
        logger.warning("Could not resolve type hints for %s: %s", entity.__name__, exc)
        hints = {}

    fields = dataclasses.fields(entity)
    explicit_pk = any(f.metadata.get("primary_key") for f in fields)
    specs = []
    for f in fields:
        tp, optional = _unwrap_optional(hints.get(f.name, f.type))
        if explicit_pk:
            primary_key = bool(f.metadata.get("primary_key"))
        else:
            primary_key = f.name.lower() == "id"
        python_type = tp if isinstance(tp, type) else None
        specs.append(
            FieldSpec(
                name=f.name,
                kind=kind_for_type(python_type),
                directive=f.metadata.get(DIRECTIVE_KEY, ""),
                optional=optional,
                primary_key=primary_key,
                python_type=python_type,
            )
        )
    return specs


def _sqlalchemy_specs(mapper) -> List[FieldSpec]:
    specs = []
    for attr in mapper.column_attrs:
        column = attr.columns[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            python_type = None
        specs.append(
            FieldSpec(
                name=attr.key,
                kind=kind_for_type(python_type),
                directive=column.info.get(DIRECTIVE_KEY, ""),
                optional=bool(column.nullable) and not column.primary_key,
                primary_key=bool(column.primary_key),
                python_type=python_type,
            )
        )
    return specs


def _sqlalchemy_mapper(entity: type):
    try:
        return sa_inspect(entity)
    except NoInspectionAvailable:
        return None


def introspect_entity(entity: Any) -> List[FieldSpec]:
    """Return the entity's fields in declaration order."""
    if not isinstance(entity, type):
        raise InvalidEntityShape(entity)

    declared = getattr(entity, "__admin_fields__", None)
    if declared is not None:
        specs = list(declared)
        if not all(isinstance(s, FieldSpec) for s in specs):
            raise InvalidEntityShape(entity)
        return specs

    if dataclasses.is_dataclass(entity):
        return _dataclass_specs(entity)

    mapper = _sqlalchemy_mapper(entity)
    if mapper is not None:
        return _sqlalchemy_specs(mapper)

    raise InvalidEntityShape(entity)
