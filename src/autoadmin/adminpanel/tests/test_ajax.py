import json
from unittest.mock import MagicMock

from autoadmin.adminpanel import LogStoreLevel
from autoadmin.adminpanel.permissions import PermissionAction
from autoadmin.exceptions import IntegratorError


def _deny_delete_of(*ids):
    def permission(request, ctx):
        return not (request.action == PermissionAction.delete and request.instance_id in ids)

    return permission


def _people_panel(make_panel, memory_orm, person_entity, permission=None, **config):
    panel = make_panel(permission, **config)
    model = panel.register_app("people").register_model(person_entity)
    for name in ("Ada", "Grace", "Linus"):
        memory_orm.create_instance(person_entity, {"name": name, "age": 30})
    return model


def test_search_returns_serialized_instances(people, web):
    ctx = web.call_json("GET", f"{people.base}/search", query={"q": "ada"})
    assert ctx.status == 200
    payload = ctx.response.to_payload()
    assert payload["success"] is True
    # the term is echoed back but not applied
    assert payload["data"]["query"] == "ada"
    assert payload["data"]["total"] == 3
    assert payload["data"]["instances"][0] == {"id": 1, "name": "Ada", "age": 36, "active": True}


def test_search_filters_by_read_permission(make_panel, web, memory_orm, person_entity):
    def deny_read_of_two(request, ctx):
        return not (request.action == PermissionAction.read and request.instance_id == 2)

    _people_panel(make_panel, memory_orm, person_entity, deny_read_of_two)
    ctx = web.call_json("GET", "/admin/a/people/Person/search")
    assert ctx.response.data["total"] == 2


def test_search_integrator_failure_is_400(make_panel, web, person_entity):
    orm = MagicMock()
    orm.fetch_all.side_effect = IntegratorError("db down")
    make_panel().register_app("people").register_model(person_entity, orm=orm)

    ctx = web.call_json("GET", "/admin/a/people/Person/search")
    assert ctx.status == 400
    assert ctx.response.to_payload() == {"success": False, "errors": ["db down"]}


def test_delete(people, web, memory_orm, log_store, person_entity):
    ctx = web.call_json("DELETE", f"{people.base}/{{id}}/delete", path={"id": "1"})
    assert ctx.status == 200
    assert ctx.response.message == "Item deleted successfully"
    assert memory_orm.get_by_id(person_entity, 1) is None
    assert log_store.levels() == [LogStoreLevel.INSTANCE_DELETE]


def test_delete_reads_id_from_query(people, web, memory_orm, person_entity):
    ctx = web.call_json("DELETE", f"{people.base}/{{id}}/delete", query={"id": "3"})
    assert ctx.status == 200
    assert memory_orm.get_by_id(person_entity, 3) is None


def test_delete_requires_id(people, web):
    ctx = web.call_json("DELETE", f"{people.base}/{{id}}/delete")
    assert ctx.status == 400
    assert ctx.response.errors == ["Instance ID is required"]


def test_delete_denied_is_403(make_panel, web, memory_orm, person_entity):
    _people_panel(make_panel, memory_orm, person_entity, _deny_delete_of(1))
    ctx = web.call_json("DELETE", "/admin/a/people/Person/{id}/delete", path={"id": "1"})
    assert ctx.status == 403
    assert ctx.response.errors == ["Permission denied"]
    assert memory_orm.get_by_id(person_entity, 1) is not None


def test_delete_integrator_failure_is_400(people, web):
    ctx = web.call_json("DELETE", f"{people.base}/{{id}}/delete", path={"id": "999"})
    assert ctx.status == 400
    assert ctx.response.success is False


def test_delete_log_failure_is_500(make_panel, web, memory_orm, person_entity):
    store = MagicMock()
    store.record_event.side_effect = RuntimeError("sink closed")
    _people_panel(make_panel, memory_orm, person_entity, log_store=store)

    ctx = web.call_json("DELETE", "/admin/a/people/Person/{id}/delete", path={"id": "1"})
    assert ctx.status == 500
    assert ctx.response.errors == ["failed to record log entry: sink closed"]


def test_bulk_delete_is_best_effort(make_panel, web, memory_orm, person_entity):
    _people_panel(make_panel, memory_orm, person_entity, _deny_delete_of(2))
    ctx = web.call_json(
        "POST", "/admin/a/people/Person/bulk-delete", body=json.dumps({"ids": [1, 2, 3]})
    )
    assert ctx.status == 200
    payload = ctx.response.to_payload()
    assert payload["success"] is True
    assert payload["data"] == {"deleted": 2, "failed": 1}
    assert payload["message"] == "2 items deleted, 1 failed"
    assert payload["errors"] == ["Permission denied for item 2"]
    assert [p.id for p in memory_orm.fetch_all(person_entity)] == [2]


def test_bulk_delete_nothing_deleted_is_400(make_panel, web, memory_orm, person_entity):
    _people_panel(make_panel, memory_orm, person_entity, _deny_delete_of(1, 2))
    ctx = web.call_json("POST", "/admin/a/people/Person/bulk-delete", body='{"ids": [1, 2, 42]}')
    assert ctx.status == 400
    assert ctx.response.success is False
    assert ctx.response.errors[2] == "Failed to delete item 42: Person '42' not found"


def test_bulk_delete_all(people, web, memory_orm, person_entity):
    ctx = web.call_json("POST", f"{people.base}/bulk-delete", body='{"ids": ["1", "2", "3"]}')
    assert ctx.status == 200
    assert ctx.response.message == "3 items deleted successfully"
    assert ctx.response.data == {"deleted": 3}
    assert memory_orm.fetch_all(person_entity) == []


def test_bulk_delete_rejects_bad_bodies(people, web):
    for body, error in [
        ("not json", "Invalid JSON data"),
        ("{}", "No items selected"),
        ('{"ids": "1,2"}', "Invalid IDs format"),
    ]:
        ctx = web.call_json("POST", f"{people.base}/bulk-delete", body=body)
        assert ctx.status == 400
        assert ctx.response.errors == [error]
