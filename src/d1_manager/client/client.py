"""HTTP client for a running D1 Manager API."""

from typing import Any, Dict, Generic, List, Optional, TypeVar

import httpx
from pydantic import BaseModel

from d1_manager.backends.models import (
    ACCOUNT_ID_HEADER,
    API_TOKEN_HEADER,
    DATABASE_ID_HEADER,
    CanonicalQueryResult,
    DatabaseDescriptor,
    ModeReport,
    RemoteConnection,
    TableInfo,
    TableSchema,
)
from d1_manager.common.logger import get_logger

from . import statements

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "http://127.0.0.1:8787/api"


class OperationOutcome(BaseModel, Generic[T]):
    """Uniform result of every client call; ``data`` is unset on failure."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None


class D1ManagerClient:
    """Talks to the D1 Manager API on behalf of one connection."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def _headers(connection) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if isinstance(connection, RemoteConnection) and connection.account_id and connection.api_token:
            headers[ACCOUNT_ID_HEADER] = connection.account_id
            headers[API_TOKEN_HEADER] = connection.api_token.get_secret_value()
            if connection.database_id:
                headers[DATABASE_ID_HEADER] = connection.database_id
        return headers

    def _request(self, method: str, endpoint: str, connection=None, json: Any = None) -> OperationOutcome:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    headers=self._headers(connection),
                    json=json,
                )
        except httpx.HTTPError as e:
            logger.warning(f"API request to {endpoint} failed: {e}")
            return OperationOutcome(success=False, error=str(e) or "Network request failed")

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.is_success:
            message = body.get("error") if isinstance(body, dict) else None
            return OperationOutcome(
                success=False,
                error=message or f"HTTP {response.status_code}: {response.reason_phrase}",
            )
        if isinstance(body, dict) and body.get("success") is False:
            return OperationOutcome(success=False, error=body.get("error") or "Request failed")

        data = body.get("data") if isinstance(body, dict) and "data" in body else body
        return OperationOutcome(success=True, data=data)

    def get_mode(self) -> OperationOutcome[ModeReport]:
        outcome = self._request("GET", "/mode")
        if outcome.success:
            outcome.data = ModeReport.model_validate(outcome.data)
        return outcome

    def get_databases(self, connection=None) -> OperationOutcome[List[DatabaseDescriptor]]:
        outcome = self._request("GET", "/databases", connection)
        if outcome.success:
            outcome.data = [DatabaseDescriptor.model_validate(item) for item in outcome.data or []]
        return outcome

    def execute_query(self, sql: str, connection=None) -> OperationOutcome[CanonicalQueryResult]:
        outcome = self._request("POST", "/query", connection, json={"sql": sql})
        if outcome.success:
            outcome.data = CanonicalQueryResult.model_validate(outcome.data)
        return outcome

    def get_tables(self, connection=None) -> OperationOutcome[List[TableInfo]]:
        outcome = self._request("GET", "/tables", connection)
        if outcome.success:
            outcome.data = [TableInfo.model_validate(item) for item in outcome.data or []]
        return outcome

    def get_table_schema(self, table_name: str, connection=None) -> OperationOutcome[TableSchema]:
        outcome = self._request("GET", f"/tables/{table_name}/schema", connection)
        if outcome.success:
            outcome.data = TableSchema.model_validate(outcome.data)
        return outcome

    def get_table_data(
        self, table_name: str, page: int = 1, page_size: int = 50, connection=None
    ) -> OperationOutcome[CanonicalQueryResult]:
        return self.execute_query(statements.select_page(table_name, page, page_size), connection)

    def get_table_count(self, table_name: str, connection=None) -> OperationOutcome[int]:
        outcome = self.execute_query(statements.count_rows(table_name), connection)
        if outcome.success and outcome.data.rows:
            return OperationOutcome(success=True, data=outcome.data.rows[0][0])
        return OperationOutcome(success=False, error="Failed to get table row count")

    def insert_row(self, table_name: str, data: Dict[str, Any], connection=None) -> OperationOutcome:
        return self.execute_query(statements.insert_row(table_name, data), connection)

    def update_rows(
        self, table_name: str, data: Dict[str, Any], where: str, connection=None
    ) -> OperationOutcome:
        return self.execute_query(statements.update_rows(table_name, data, where), connection)

    def delete_rows(self, table_name: str, where: str, connection=None) -> OperationOutcome:
        return self.execute_query(statements.delete_rows(table_name, where), connection)

    def test_connection(self, connection=None) -> OperationOutcome[bool]:
        outcome = self.execute_query("SELECT 1", connection)
        return OperationOutcome(success=outcome.success, data=outcome.success, error=outcome.error)
