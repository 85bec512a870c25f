"""
Collaborator contracts.

The admin core never talks to a database, an HTTP framework or a template
engine directly. It goes through these interfaces; reference
implementations live in ``autoadmin.integrations`` and ``autoadmin.renderer``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from autoadmin.form.kinds import FieldKind

# HTML handlers return (status_code, body). For 3xx statuses the body is the
# redirect location.
HandlerResult = Tuple[int, str]
HandlerFunc = Callable[[Any], HandlerResult]
# JSON handlers answer through WebIntegrator.set_json_response.
JSONHandlerFunc = Callable[[Any], None]


class DataIntegrator(ABC):
    """Persistence access for registered entities."""

    @abstractmethod
    def fetch_all(self, entity: type) -> List[Any]:
        ...

    @abstractmethod
    def fetch_fields(self, entity: type, field_names: Sequence[str]) -> List[Any]:
        """Fetch every instance, loading at least ``field_names``."""

    @abstractmethod
    def fetch_fields_with_search(
        self,
        entity: type,
        field_names: Sequence[str],
        term: str,
        search_fields: Sequence[str],
    ) -> List[Any]:
        """Like fetch_fields, keeping instances where ``term`` matches a search field."""

    @abstractmethod
    def get_by_id(self, entity: type, instance_id: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def create_instance(self, entity: type, values: Mapping[str, Any]) -> Any:
        ...

    @abstractmethod
    def update_instance(self, entity: type, instance_id: Any, values: Mapping[str, Any]) -> Any:
        ...

    @abstractmethod
    def delete_by_id(self, entity: type, instance_id: Any) -> None:
        ...

    @abstractmethod
    def primary_key_value(self, instance: Any) -> Any:
        ...

    @abstractmethod
    def primary_key_kind(self, entity: type) -> FieldKind:
        ...


class WebIntegrator(ABC):
    """Binding to an HTTP framework."""

    @abstractmethod
    def handle_route(self, method: str, path: str, handler: HandlerFunc) -> None:
        """Register an HTML route. Path parameters use ``{name}`` syntax."""

    @abstractmethod
    def handle_json_route(self, method: str, path: str, handler: JSONHandlerFunc) -> None:
        ...

    @abstractmethod
    def get_query_param(self, ctx: Any, name: str) -> str:
        """Return the query parameter or ``""``."""

    @abstractmethod
    def get_path_param(self, ctx: Any, name: str) -> str:
        """Return the path parameter or ``""``."""

    @abstractmethod
    def get_request_method(self, ctx: Any) -> str:
        ...

    @abstractmethod
    def get_form_data(self, ctx: Any) -> Dict[str, List[str]]:
        ...

    @abstractmethod
    def get_json_body(self, ctx: Any) -> Any:
        """Return the decoded JSON body; raise ValueError when it is not JSON."""

    @abstractmethod
    def set_json_response(self, ctx: Any, status_code: int, data: Any) -> None:
        ...


class TemplateRenderer(ABC):
    @abstractmethod
    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        ...
