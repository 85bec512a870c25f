from __future__ import annotations

import itertools
import threading
import uuid
from typing import Any, Dict, List, Mapping, Sequence

from autoadmin.adminpanel.integrators import DataIntegrator
from autoadmin.adminpanel.introspection import FieldSpec, introspect_entity
from autoadmin.exceptions import IntegratorError, NotFound
from autoadmin.form.kinds import FieldKind


class MemoryIntegrator(DataIntegrator):
    """
    Dict-backed storage, one table per entity class.

    Integer primary keys are assigned from a per-entity counter and UUID keys
    with ``uuid4`` when the submitted values do not carry one. Search is a
    case-insensitive substring match on the string form of each field.
    """

    def __init__(self) -> None:
        self._tables: Dict[type, Dict[Any, Any]] = {}
        self._counters: Dict[type, itertools.count] = {}
        self._lock = threading.Lock()

    def _primary_key(self, entity: type) -> FieldSpec:
        for spec in introspect_entity(entity):
            if spec.primary_key:
                return spec
        raise IntegratorError(f"entity '{entity.__name__}' has no primary key")

    def _table(self, entity: type) -> Dict[Any, Any]:
        return self._tables.setdefault(entity, {})

    def _next_id(self, entity: type, kind: FieldKind) -> Any:
        if kind == FieldKind.IDENTIFIER:
            return uuid.uuid4()
        if kind == FieldKind.INTEGER:
            counter = self._counters.setdefault(entity, itertools.count(1))
            return next(counter)
        raise IntegratorError(f"cannot generate a primary key of kind '{kind.value}'")

    def fetch_all(self, entity: type) -> List[Any]:
        with self._lock:
            return list(self._table(entity).values())

    def fetch_fields(self, entity: type, field_names: Sequence[str]) -> List[Any]:
        return self.fetch_all(entity)

    def fetch_fields_with_search(
        self,
        entity: type,
        field_names: Sequence[str],
        term: str,
        search_fields: Sequence[str],
    ) -> List[Any]:
        needle = term.lower()
        matches = []
        for instance in self.fetch_all(entity):
            for name in search_fields:
                value = getattr(instance, name, None)
                if value is not None and needle in str(value).lower():
                    matches.append(instance)
                    break
        return matches

    def get_by_id(self, entity: type, instance_id: Any) -> Any:
        with self._lock:
            return self._table(entity).get(instance_id)

    def create_instance(self, entity: type, values: Mapping[str, Any]) -> Any:
        pk = self._primary_key(entity)
        data = dict(values)
        with self._lock:
            table = self._table(entity)
            instance_id = data.get(pk.name)
            if instance_id is None:
                instance_id = self._next_id(entity, pk.kind)
                # skip ids inserted explicitly
                while instance_id in table:
                    instance_id = self._next_id(entity, pk.kind)
            elif instance_id in table:
                raise IntegratorError(f"{entity.__name__} '{instance_id}' already exists")
            data[pk.name] = instance_id
            try:
                instance = entity(**data)
            except TypeError as exc:
                raise IntegratorError(str(exc), entity=entity.__name__) from exc
            table[instance_id] = instance
        return instance

    def update_instance(self, entity: type, instance_id: Any, values: Mapping[str, Any]) -> Any:
        pk = self._primary_key(entity)
        with self._lock:
            instance = self._table(entity).get(instance_id)
            if instance is None:
                raise NotFound(entity.__name__, instance_id)
            for key, value in values.items():
                if key != pk.name:
                    setattr(instance, key, value)
        return instance

    def delete_by_id(self, entity: type, instance_id: Any) -> None:
        with self._lock:
            table = self._table(entity)
            if instance_id not in table:
                raise NotFound(entity.__name__, instance_id)
            del table[instance_id]

    def primary_key_value(self, instance: Any) -> Any:
        return getattr(instance, self._primary_key(type(instance)).name)

    def primary_key_kind(self, entity: type) -> FieldKind:
        return self._primary_key(entity).kind
