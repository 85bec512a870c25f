import json
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, Optional

import pytest

from autoadmin.adminpanel import AdminPanel, MemoryLogStore, PanelConfig
from autoadmin.adminpanel.integrators import WebIntegrator
from autoadmin.config import get_settings
from autoadmin.integrations.memory import MemoryIntegrator


class FakeWebIntegrator(WebIntegrator):
    """Records routes and serves requests from plain namespaces."""

    def __init__(self) -> None:
        self.routes: Dict[tuple, Any] = {}
        self.json_routes: Dict[tuple, Any] = {}

    def handle_route(self, method, path, handler):
        self.routes[(method, path)] = handler

    def handle_json_route(self, method, path, handler):
        self.json_routes[(method, path)] = handler

    def get_query_param(self, ctx, name):
        return ctx.query.get(name, "")

    def get_path_param(self, ctx, name):
        return ctx.path.get(name, "")

    def get_request_method(self, ctx):
        return ctx.method

    def get_form_data(self, ctx):
        return ctx.form

    def get_json_body(self, ctx):
        return json.loads(ctx.body)

    def set_json_response(self, ctx, status_code, data):
        ctx.status = status_code
        ctx.response = data

    @staticmethod
    def make_ctx(method="GET", query=None, path=None, form=None, body="", user=None):
        return SimpleNamespace(
            method=method,
            query=dict(query or {}),
            path=dict(path or {}),
            form=dict(form or {}),
            body=body,
            user=user,
            status=None,
            response=None,
        )

    def call(self, method: str, route: str, **kwargs):
        ctx = self.make_ctx(method=method, **kwargs)
        return self.routes[(method, route)](ctx)

    def call_json(self, method: str, route: str, **kwargs):
        ctx = self.make_ctx(method=method, **kwargs)
        self.json_routes[(method, route)](ctx)
        return ctx


@dataclass
class Person:
    id: int = field(default=0, metadata={"admin": "addForm:exclude;editForm:exclude"})
    name: str = field(default="", metadata={"admin": "required;maxLength:50"})
    age: Optional[int] = field(default=None, metadata={"admin": "min:0;max:150"})
    active: bool = field(default=True, metadata={"admin": "listDisplay:exclude;initial:true"})


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def web():
    return FakeWebIntegrator()


@pytest.fixture()
def memory_orm():
    return MemoryIntegrator()


@pytest.fixture()
def log_store():
    return MemoryLogStore()


@pytest.fixture()
def make_panel(web, memory_orm, log_store):
    def _make(permission_func=None, **config):
        config.setdefault("log_store", log_store)
        return AdminPanel(memory_orm, web, permission_func, PanelConfig(**config))

    return _make


@pytest.fixture()
def person_entity():
    return Person


@pytest.fixture()
def people(make_panel, memory_orm):
    """Panel with a ``people`` app holding the Person model and three rows."""
    panel = make_panel()
    app = panel.register_app("people")
    model = app.register_model(Person)
    for name, age in (("Ada", 36), ("Grace", 45), ("Linus", 21)):
        memory_orm.create_instance(Person, {"name": name, "age": age, "active": True})
    return SimpleNamespace(panel=panel, app=app, model=model, base="/admin/a/people/Person")
