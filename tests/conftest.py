import json
import sqlite3

import httpx
import pytest

from d1_manager.backends import D1ApiClient, LocalDatabase

API_BASE_URL = "https://d1.test/client/v4"


class RemoteStub:
    """Records requests sent to the remote D1 API and answers with canned bodies."""

    def __init__(self):
        self.requests = []
        self.responses = []

    def respond(self, status_code=200, json_body=None, text=None, error=None):
        self.responses.append((status_code, json_body, text, error))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json={"success": True, "errors": [], "result": []})
        status_code, json_body, text, error = self.responses.pop(0)
        if error is not None:
            raise error
        if json_body is not None:
            return httpx.Response(status_code, json=json_body)
        return httpx.Response(status_code, text=text or "")

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture()
def remote_stub():
    return RemoteStub()


@pytest.fixture()
def api_client(remote_stub):
    return D1ApiClient(base_url=API_BASE_URL, transport=httpx.MockTransport(remote_stub.handler))


@pytest.fixture()
def sqlite_db_path(tmp_path):
    db_path = tmp_path / "local.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, age INTEGER DEFAULT 18)"
        )
        conn.executemany(
            "INSERT INTO users (name, age) VALUES (?, ?)",
            [("Ada", 30), ("Linus", 45), ("Grace", 50)],
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture()
def local_database(sqlite_db_path):
    database = LocalDatabase(str(sqlite_db_path))
    yield database
    database.dispose()
