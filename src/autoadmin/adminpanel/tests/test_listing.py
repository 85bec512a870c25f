from dataclasses import dataclass

import pytest

from autoadmin.adminpanel import LogStoreLevel
from autoadmin.adminpanel.listing import MIN_PER_PAGE, paginate, resolve_pagination
from autoadmin.adminpanel.permissions import PermissionAction


@pytest.mark.parametrize(
    "page,per_page,expected",
    [
        (None, None, (1, 25)),
        ("", "", (1, 25)),
        ("x", "abc", (1, 25)),
        ("0", "5", (1, MIN_PER_PAGE)),
        ("-2", "0", (1, 25)),
        ("3", "40", (3, 40)),
    ],
)
def test_resolve_pagination(page, per_page, expected):
    assert resolve_pagination(page, per_page, 25) == expected


def test_small_default_is_floored():
    assert resolve_pagination(None, None, 3) == (1, MIN_PER_PAGE)


def test_paginate_counts_pages_and_empties_out_of_range():
    items = list(range(25))
    window, total, pages = paginate(items, 3, 10)
    assert window == list(range(20, 25))
    assert (total, pages) == (25, 3)
    window, total, pages = paginate(items, 4, 10)
    assert window == [] and pages == 3
    assert paginate([], 1, 10) == ([], 0, 0)


def test_list_view_renders_and_logs(people, web, log_store):
    status, body = web.call("GET", people.base)
    assert status == 200
    for name in ("Ada", "Grace", "Linus"):
        assert name in body
    assert "3 total, page 1 of 1" in body
    assert log_store.levels() == [LogStoreLevel.LIST_VIEW]
    assert log_store.entries[0].subject == "people | Person"


def test_list_view_hides_excluded_columns(people, web):
    _, body = web.call("GET", people.base)
    assert "<th>Name</th>" in body
    assert "<th>Active</th>" not in body


def test_list_view_search(people, web):
    _, body = web.call("GET", people.base, query={"search": "gra"})
    assert "Grace" in body
    assert "Ada" not in body
    assert "1 total" in body


def test_list_view_out_of_range_page_is_empty(people, web):
    status, body = web.call("GET", people.base, query={"page": "9"})
    assert status == 200
    assert "No records." in body


def test_instances_without_read_permission_are_hidden(make_panel, web, memory_orm, person_entity):
    def deny_second(request, ctx):
        return not (request.action == PermissionAction.read and request.instance_id == 2)

    panel = make_panel(deny_second)
    panel.register_app("people").register_model(person_entity)
    for name in ("Ada", "Grace", "Linus"):
        memory_orm.create_instance(person_entity, {"name": name})

    status, body = web.call("GET", "/admin/a/people/Person")
    assert status == 200
    assert "Grace" not in body
    assert "2 total" in body


def test_model_read_denied_is_403(make_panel, web, log_store, person_entity):
    def deny_models(request, ctx):
        return request.model_name is None

    panel = make_panel(deny_models)
    panel.register_app("people").register_model(person_entity)

    status, body = web.call("GET", "/admin/a/people/Person")
    assert status == 403
    assert body.startswith("Code: 403. Error: ")
    assert log_store.entries == []


def test_permission_function_errors_are_500(make_panel, web, person_entity):
    def broken(request, ctx):
        raise RuntimeError("authority offline")

    panel = make_panel(broken)
    panel.register_app("people").register_model(person_entity)

    status, body = web.call("GET", "/admin/a/people/Person")
    assert status == 500
    assert "authority offline" in body


def test_log_failure_fails_the_request(make_panel, web, person_entity):
    class ExplodingStore:
        def record_event(self, *args, **kwargs):
            raise IOError("disk full")

    panel = make_panel(log_store=ExplodingStore())
    panel.register_app("people").register_model(person_entity)

    status, body = web.call("GET", "/admin/a/people/Person")
    assert status == 500
    assert "failed to record log entry: disk full" in body


def test_per_instance_permissions_drive_row_actions(make_panel, web, memory_orm):
    @dataclass
    class Doc:
        id: int = 0
        title: str = ""

    def read_only(request, ctx):
        return request.action == PermissionAction.read

    make_panel(read_only).register_app("docs").register_model(Doc)
    memory_orm.create_instance(Doc, {"title": "Readme"})

    _, body = web.call("GET", "/admin/a/docs/Doc")
    assert "Readme" in body
    assert "/admin/a/docs/Doc/1/view" in body
    assert "/admin/a/docs/Doc/1/edit" not in body
    rows = body.split("<tbody>")[1].split("</tbody>")[0]
    assert "select-row" not in rows
