from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Sequence

from sqlalchemy import String, cast, inspect as sa_inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, load_only

from autoadmin.adminpanel.integrators import DataIntegrator
from autoadmin.exceptions import IntegratorError, NotFound
from autoadmin.form.kinds import FieldKind, kind_for_type

logger = logging.getLogger(__name__)


class SQLAlchemyIntegrator(DataIntegrator):
    """
    Data integrator over SQLAlchemy 2.x mapped classes.

    A fresh session is opened per call from ``session_factory``; returned
    instances are detached with their loaded attributes intact.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _primary_key_column(self, entity: type):
        mapper = sa_inspect(entity)
        return mapper.primary_key[0]

    def _select(self, entity: type, field_names: Sequence[str]):
        query = select(entity)
        attrs = [getattr(entity, name) for name in field_names if hasattr(entity, name)]
        if attrs:
            query = query.options(load_only(*attrs))
        return query.order_by(self._primary_key_column(entity))

    def fetch_all(self, entity: type) -> List[Any]:
        try:
            with self.session_factory() as session:
                query = select(entity).order_by(self._primary_key_column(entity))
                return list(session.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def fetch_fields(self, entity: type, field_names: Sequence[str]) -> List[Any]:
        try:
            with self.session_factory() as session:
                return list(session.execute(self._select(entity, field_names)).scalars().all())
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def fetch_fields_with_search(
        self,
        entity: type,
        field_names: Sequence[str],
        term: str,
        search_fields: Sequence[str],
    ) -> List[Any]:
        columns = [getattr(entity, name) for name in search_fields if hasattr(entity, name)]
        if not columns:
            return []
        like = f"%{term}%"
        query = self._select(entity, field_names).where(
            or_(*[cast(column, String).ilike(like) for column in columns])
        )
        try:
            with self.session_factory() as session:
                return list(session.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def get_by_id(self, entity: type, instance_id: Any) -> Any:
        try:
            with self.session_factory() as session:
                return session.get(entity, instance_id)
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def create_instance(self, entity: type, values: Mapping[str, Any]) -> Any:
        try:
            with self.session_factory() as session:
                instance = entity(**dict(values))
                session.add(instance)
                session.commit()
                session.refresh(instance)
                return instance
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def update_instance(self, entity: type, instance_id: Any, values: Mapping[str, Any]) -> Any:
        try:
            with self.session_factory() as session:
                instance = session.get(entity, instance_id)
                if instance is None:
                    raise NotFound(entity.__name__, instance_id)
                for key, value in values.items():
                    setattr(instance, key, value)
                session.commit()
                session.refresh(instance)
                return instance
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc

    def delete_by_id(self, entity: type, instance_id: Any) -> None:
        try:
            with self.session_factory() as session:
                instance = session.get(entity, instance_id)
                if instance is None:
                    raise NotFound(entity.__name__, instance_id)
                session.delete(instance)
                session.commit()
        except SQLAlchemyError as exc:
            raise IntegratorError(str(exc), entity=entity.__name__) from exc
        logger.debug("Deleted %s %s", entity.__name__, instance_id)

    def primary_key_value(self, instance: Any) -> Any:
        mapper = sa_inspect(type(instance))
        return mapper.primary_key_from_instance(instance)[0]

    def primary_key_kind(self, entity: type) -> FieldKind:
        column = self._primary_key_column(entity)
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return FieldKind.OPAQUE
        return kind_for_type(python_type)
