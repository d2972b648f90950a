import uuid

import pytest
from flask import Flask

from tasktracker.db import DatabaseConfigError, connect, init_schema
from tasktracker.handlers import TaskHandler
from tasktracker.repository import TaskRepository, User, UserRepository
from tasktracker.server import create_app, main, new_server, register_routes
from tasktracker.service import TaskService

ORIGIN = "http://localhost:5173"


@pytest.fixture
def connection():
    conn = connect(":memory:")
    init_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def handler(connection):
    return TaskHandler(TaskService(TaskRepository(connection), UserRepository(connection)))


@pytest.fixture
def client(handler):
    return create_app(handler).test_client()


@pytest.fixture
def owner(connection):
    return UserRepository(connection).create_user(
        User(username="alice", email="alice@example.com")
    )


def test_index(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json() == {"message": "Task manager api."}


def test_health(client):
    response = client.get("/health")
    assert response.get_json() == {"status": "It's aight mate"}


def test_register_routes_adds_task_rules(handler):
    app = register_routes(Flask("routes"), handler)
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert {
        "/",
        "/health",
        "/api/task/",
        "/api/task/all-task",
        "/api/task/id/<task_id>",
        "/api/task/user",
        "/api/task/<task_id>",
    } <= rules


def test_task_lifecycle_through_routes(client, owner):
    created = client.post("/api/task/", json={"name": "ship it", "user_id": owner.id})
    assert created.status_code == 201
    task_id = created.get_json()["id"]

    listed = client.get("/api/task/all-task").get_json()
    assert [task["id"] for task in listed] == [task_id]

    fetched = client.get(f"/api/task/id/{task_id}")
    assert fetched.get_json()["name"] == "ship it"

    mine = client.get("/api/task/user", query_string={"uid": owner.id}).get_json()
    assert [task["id"] for task in mine] == [task_id]

    assert client.delete(f"/api/task/{task_id}").status_code == 204
    assert client.get("/api/task/all-task").get_json() is None


def test_response_keeps_field_order(client, owner):
    created = client.post("/api/task/", json={"name": "ordered", "user_id": owner.id})
    keys = list(created.get_json().keys())
    assert keys == ["id", "name", "description", "status", "created_at", "updated_at"]


def test_get_tasks_route_requires_query(client):
    response = client.get("/api/task/user")
    assert response.status_code == 400


def test_delete_unknown_task_route(client):
    response = client.delete(f"/api/task/{uuid.uuid4()}")
    assert response.status_code == 500
    assert response.get_json() == {"error": "task not found"}


def test_cors_headers_for_allowed_origin(client):
    response = client.get("/", headers={"Origin": ORIGIN})
    assert response.headers["Access-Control-Allow-Origin"] == ORIGIN
    assert response.headers["Access-Control-Allow-Credentials"] == "true"
    assert "Origin" in response.headers["Vary"]


def test_no_cors_headers_without_origin(client):
    response = client.get("/")
    assert "Access-Control-Allow-Origin" not in response.headers
    assert response.status_code == 200


def test_disallowed_origin_is_forbidden(client):
    response = client.get("/", headers={"Origin": "http://evil.example.com"})
    assert response.status_code == 403
    assert "Access-Control-Allow-Origin" not in response.headers


def test_preflight_for_allowed_origin(client):
    response = client.options(
        "/api/task/",
        headers={"Origin": ORIGIN, "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 204
    methods = response.headers["Access-Control-Allow-Methods"].split(",")
    assert set(methods) == {"GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"}
    headers = response.headers["Access-Control-Allow-Headers"].split(",")
    assert set(headers) == {"Accept", "Authorization", "Content-Type"}
    assert response.headers["Access-Control-Allow-Origin"] == ORIGIN


def test_new_server_serves_app(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONNECTION_STRING", ":memory:")
    monkeypatch.setenv("PORT", "0")
    monkeypatch.delenv("IP", raising=False)
    server = new_server()
    try:
        assert capsys.readouterr().out == "Initialized server with: :0\n"
        response = server.get_app().test_client().get("/health")
        assert response.get_json() == {"status": "It's aight mate"}
        assert server.server_address[1] > 0
    finally:
        server.server_close()


def test_new_server_reads_env_file(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONNECTION_STRING", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("IP", raising=False)
    (tmp_path / ".env").write_text("CONNECTION_STRING=:memory:\nPORT=0\nIP=localhost\n")
    server = new_server()
    try:
        assert capsys.readouterr().out == "Initialized server with: localhost:0\n"
    finally:
        server.server_close()
        monkeypatch.delenv("CONNECTION_STRING", raising=False)
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("IP", raising=False)


def test_new_server_without_connection_string(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONNECTION_STRING", raising=False)
    monkeypatch.setenv("PORT", "0")
    with pytest.raises(DatabaseConfigError):
        new_server()


def test_main_requires_env_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(RuntimeError, match="No .env file found"):
        main([])