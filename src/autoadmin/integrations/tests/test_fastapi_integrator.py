import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from autoadmin.api.app import create_app
from autoadmin.integrations.fastapi import FastAPIIntegrator

BASE = "/admin/a/Personas/Persona"


@pytest.fixture()
def client():
    return TestClient(create_app(database_url="sqlite://"))


def test_index_and_root_page(client):
    assert client.get("/").json()["admin"] == "/admin"
    resp = client.get("/admin")
    assert resp.status_code == 200
    assert "Persona Management" in resp.text


def test_list_page(client):
    resp = client.get(BASE, params={"perPage": "5"})
    assert resp.status_code == 200
    assert "John Doe" in resp.text
    assert "Alice Brown" in resp.text
    assert "4 total, page 1 of 1" in resp.text


def test_list_search(client):
    resp = client.get(BASE, params={"search": "smith"})
    assert "Jane Smith" in resp.text
    assert "John Doe" not in resp.text


def test_detail_and_missing(client):
    assert "jane@example.com" in client.get(f"{BASE}/2/view").text
    assert client.get(f"{BASE}/999/view").status_code == 404


def test_add_redirects_to_list(client):
    resp = client.post(
        f"{BASE}/add",
        data={"name": "Eve", "email": "eve@example.com", "age": "41", "is_active": "true"},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == BASE
    assert "Eve" in client.get(BASE).text


def test_invalid_edit_rerenders(client):
    resp = client.post(f"{BASE}/1/edit", data={"name": "John", "email": "not-an-email"})
    assert resp.status_code == 200
    assert "Enter a valid value." in resp.text


def test_json_endpoints(client):
    search = client.get(f"{BASE}/search", params={"q": "x"}).json()
    assert search["data"]["total"] == 4

    resp = client.delete(f"{BASE}/1/delete")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Item deleted successfully"}

    resp = client.post(f"{BASE}/bulk-delete", json={"ids": [2, 3, 1]})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"deleted": 2, "failed": 1}

    resp = client.post(f"{BASE}/bulk-delete", content=b"nope", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Invalid JSON data"]


def test_routes_registered_on_router():
    integrator = FastAPIIntegrator()
    integrator.handle_route("GET", "/x/{id}", lambda ctx: (200, integrator.get_path_param(ctx, "id")))
    integrator.handle_json_route(
        "POST", "/y", lambda ctx: integrator.set_json_response(ctx, 201, {"got": integrator.get_json_body(ctx)})
    )
    app = FastAPI()
    app.include_router(integrator.router)
    client = TestClient(app)

    assert client.get("/x/abc").text == "abc"
    resp = client.post("/y", json={"a": 1})
    assert resp.status_code == 201
    assert resp.json() == {"got": {"a": 1}}
