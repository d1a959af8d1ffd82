import pytest
from fastapi.testclient import TestClient

from d1_manager.api.container import Container
from d1_manager.api.main import create_app
from d1_manager.common.settings import Settings

REMOTE_HEADERS = {
    "X-CF-Account-ID": "acc",
    "X-CF-API-Token": "tok",
    "X-CF-Database-ID": "db",
}


def _client(local_database, api_client):
    container = Container(
        settings=Settings(local_database=None),
        local_database=local_database,
        api_client=api_client,
    )
    return TestClient(create_app(container))


@pytest.fixture()
def local_client(local_database, api_client):
    with _client(local_database, api_client) as client:
        yield client


@pytest.fixture()
def remote_only_client(api_client):
    with _client(None, api_client) as client:
        yield client


def test_mode_reports_local_binding(local_client):
    response = local_client.get("/api/mode")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"local": True, "remote": True, "hasBinding": True},
    }


def test_mode_without_binding(remote_only_client):
    response = remote_only_client.get("/api/mode")

    assert response.json()["data"] == {"local": False, "remote": True, "hasBinding": False}


def test_local_query_returns_canonical_result(local_client):
    # Validates the full local path because the SQL console depends on this envelope.
    # Act
    response = local_client.post("/api/query", json={"sql": "SELECT id, name FROM users ORDER BY id"})

    # Assert
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["columns"] == ["id", "name"]
    assert body["data"]["rows"] == [[1, "Ada"], [2, "Linus"], [3, "Grace"]]
    assert body["data"]["meta"]["rows_read"] == 3


def test_local_write_then_read(local_client):
    write = local_client.post("/api/query", json={"sql": "UPDATE users SET age = 31 WHERE id = 1"})
    read = local_client.post("/api/query", json={"sql": "SELECT age FROM users WHERE id = 1"})

    written = write.json()["data"]
    assert written["columns"] == []
    assert written["rows"] == []
    assert written["meta"]["changes"] == 1
    assert read.json()["data"]["rows"] == [[31]]


def test_empty_sql_is_rejected(local_client):
    response = local_client.post("/api/query", json={"sql": ""})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "SQL query is required"}


def test_malformed_body_is_a_client_error(local_client):
    response = local_client.post(
        "/api/query", content="not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_local_blob_cells_are_byte_arrays(local_client):
    # Validates blob encoding because local rows must match the remote D1 shape.
    # Act
    response = local_client.post("/api/query", json={"sql": "SELECT x'ff00' AS b"})

    # Assert
    assert response.status_code == 200
    assert response.json()["data"]["columns"] == ["b"]
    assert response.json()["data"]["rows"] == [[[255, 0]]]


def test_local_failure_is_passed_through(local_client):
    # Validates error pass-through because failed backends must not be normalized.
    # Act
    response = local_client.post("/api/query", json={"sql": "SELEC * FROM users"})

    # Assert
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "syntax error" in body["error"]
    assert "data" not in body


def test_list_tables_passes_rows_through(local_client):
    response = local_client.get("/api/tables")

    assert response.status_code == 200
    tables = response.json()["data"]
    assert [table["name"] for table in tables] == ["users"]
    assert set(tables[0]) == {"name", "type", "sql"}


def test_describe_table_wraps_pragma_rows(local_client):
    response = local_client.get("/api/tables/users/schema")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tableName"] == "users"
    assert [column["name"] for column in data["columns"]] == ["id", "name", "age"]
    assert data["columns"][0]["pk"] == 1


def test_local_databases_is_synthesized(local_client):
    response = local_client.get("/api/databases")

    data = response.json()["data"]
    assert data[0]["uuid"] == "local"
    assert data[0]["name"] == "local-dev-db"


def test_remote_wins_over_local_binding(local_client, remote_stub):
    # Validates mode precedence because credentials must always route remotely.
    # Arrange
    remote_stub.respond(json_body={
        "success": True,
        "errors": [],
        "result": [{"results": [{"id": 9, "name": "remote"}], "meta": {"duration": 3}}],
    })

    # Act
    response = local_client.post("/api/query", json={"sql": "SELECT id, name FROM users"}, headers=REMOTE_HEADERS)

    # Assert
    assert len(remote_stub.requests) == 1
    assert remote_stub.requests[0].url.path.endswith("/accounts/acc/d1/database/db/query")
    assert response.json() == {
        "success": True,
        "data": {"columns": ["id", "name"], "rows": [[9, "remote"]], "meta": {"duration": 3}},
    }


def test_missing_database_id_without_binding_is_unavailable(remote_only_client, remote_stub):
    # Arrange
    headers = {k: v for k, v in REMOTE_HEADERS.items() if k != "X-CF-Database-ID"}

    # Act
    response = remote_only_client.post("/api/query", json={"sql": "SELECT 1"}, headers=headers)

    # Assert
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No database connection available"}
    assert remote_stub.requests == []


def test_no_connection_available(remote_only_client):
    response = remote_only_client.get("/api/tables")

    assert response.status_code == 400
    assert response.json()["error"] == "No database connection available"


def test_remote_failure_message_is_passed_through(remote_only_client, remote_stub):
    remote_stub.respond(status_code=400, json_body={"success": False, "errors": [{"message": "syntax error"}]})

    response = remote_only_client.post("/api/query", json={"sql": "SELEC 1"}, headers=REMOTE_HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "syntax error"}


def test_remote_tables_and_schema(remote_only_client, remote_stub):
    # Arrange
    remote_stub.respond(json_body={"success": True, "result": [{"results": [
        {"name": "orders", "type": "table", "sql": "CREATE TABLE orders (id INTEGER)"},
    ]}]})
    remote_stub.respond(json_body={"success": True, "result": [{"results": [
        {"cid": 0, "name": "id", "type": "INTEGER", "notnull": 0, "dflt_value": None, "pk": 1},
    ]}]})

    # Act
    tables = remote_only_client.get("/api/tables", headers=REMOTE_HEADERS)
    schema = remote_only_client.get("/api/tables/orders/schema", headers=REMOTE_HEADERS)

    # Assert
    assert "sqlite_master" in remote_stub.body(0)["sql"]
    assert remote_stub.body(1) == {"sql": "PRAGMA table_info(orders)"}
    assert tables.json()["data"][0]["name"] == "orders"
    assert schema.json()["data"]["tableName"] == "orders"
    assert schema.json()["data"]["columns"][0]["dflt_value"] is None


def test_remote_databases_only_need_account_credentials(remote_only_client, remote_stub):
    remote_stub.respond(json_body={"success": True, "errors": [], "result": [{"uuid": "u1", "name": "prod"}]})
    headers = {k: v for k, v in REMOTE_HEADERS.items() if k != "X-CF-Database-ID"}

    response = remote_only_client.get("/api/databases", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": [{"uuid": "u1", "name": "prod"}]}


def test_unmatched_path_is_not_found(local_client, remote_stub):
    # Validates the not-found outcome because unknown operations must not reach an executor.
    response = local_client.get("/api/unknown", headers=REMOTE_HEADERS)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not found"}
    assert remote_stub.requests == []


def test_unsupported_method_is_not_found(local_client):
    response = local_client.delete("/api/query")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not found"}


def test_unexpected_exception_becomes_error_envelope(local_client, monkeypatch):
    # Arrange
    container = local_client.app.state.container

    def _boom(credentials):
        raise RuntimeError("boom")

    monkeypatch.setattr(container.database, "list_tables", _boom)

    # Act
    response = local_client.get("/api/tables")

    # Assert
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "boom"}


def test_request_id_is_echoed(local_client):
    response = local_client.get("/api/mode", headers={"X-Request-ID": "req-1"})

    assert response.headers["X-Request-ID"] == "req-1"


def test_cors_preflight_allows_credential_headers(local_client):
    response = local_client.options(
        "/api/query",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "X-CF-Account-ID, X-CF-API-Token, X-CF-Database-ID",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:5173")


def test_bare_options_request_is_answered(local_client):
    response = local_client.options("/api/query")

    assert response.status_code == 200
    assert response.content == b""


def test_prefix_comes_from_container_settings(local_database, api_client):
    # Validates settings injection because embedded apps may mount the API elsewhere.
    # Arrange
    container = Container(
        settings=Settings(local_database=None, api_prefix="/v1"),
        local_database=local_database,
        api_client=api_client,
    )

    # Act
    with TestClient(create_app(container)) as client:
        moved = client.get("/v1/mode")
        default = client.get("/api/mode")

    # Assert
    assert moved.status_code == 200
    assert moved.json()["data"]["hasBinding"] is True
    assert default.status_code == 404
