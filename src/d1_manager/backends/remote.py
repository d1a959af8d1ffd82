"""HTTP client for the remote D1 REST API.

One attempt per call, no retries. Query failures, including transport
faults, come back as failed results instead of exceptions.
"""

from typing import Any, Dict, List, Optional

import httpx

from d1_manager.common.errors import BackendExecutionError, ErrorCode
from d1_manager.common.logger import get_logger

from .interfaces import QueryExecutor
from .models import BackendResult, RemoteConnection

logger = get_logger(__name__)

DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"

# Header encoding and URL faults surface before httpx reaches the network.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError)


def _first_error_message(body: Dict[str, Any]) -> Optional[str]:
    errors = body.get("errors") or []
    if errors and isinstance(errors[0], dict):
        return errors[0].get("message") or None
    return None


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class D1ApiClient:
    """Thin client over the account-scoped D1 endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL of the D1 REST API.
            timeout: Request timeout in seconds, None waits indefinitely.
            transport: Optional httpx transport, used by tests to stub the service.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def query(self, account_id: str, database_id: str, api_token: str, sql: str) -> BackendResult:
        url = f"{self.base_url}/accounts/{account_id}/d1/database/{database_id}/query"
        try:
            with self._client() as client:
                response = client.post(
                    url,
                    headers={
                        "Authorization": f"Bearer {api_token}",
                        "Content-Type": "application/json",
                    },
                    json={"sql": sql},
                )
        except REQUEST_ERRORS as e:
            logger.warning(f"Remote query transport failure for database {database_id}: {e}")
            return BackendResult.failure(
                str(e) or "Remote API request failed", ErrorCode.TRANSPORT_ERROR
            )

        body = _json_body(response)
        if not response.is_success or not body.get("success"):
            message = _first_error_message(body) or "Remote query failed"
            logger.warning(
                f"Remote query failed for database {database_id} "
                f"(HTTP {response.status_code}): {message}"
            )
            return BackendResult.failure(message)

        # The API answers with one result entry per statement.
        statements = body.get("result") or []
        first = statements[0] if statements and isinstance(statements[0], dict) else {}
        return BackendResult(
            success=True,
            results=first.get("results") or [],
            meta=first.get("meta"),
        )

    def list_databases(self, account_id: str, api_token: str) -> List[Dict[str, Any]]:
        """Returns the account's database descriptors.

        Raises:
            BackendExecutionError: when the API call fails for any reason.
        """
        url = f"{self.base_url}/accounts/{account_id}/d1/database"
        try:
            with self._client() as client:
                response = client.get(url, headers={"Authorization": f"Bearer {api_token}"})
        except REQUEST_ERRORS as e:
            logger.warning(f"Database listing transport failure: {e}")
            raise BackendExecutionError(str(e) or "API request failed", ErrorCode.TRANSPORT_ERROR)

        body = _json_body(response)
        if not response.is_success or not body.get("success"):
            message = _first_error_message(body) or "Failed to fetch databases"
            logger.warning(f"Database listing failed (HTTP {response.status_code}): {message}")
            raise BackendExecutionError(message)

        return body.get("result") or []


class RemoteExecutor(QueryExecutor):
    def __init__(self, client: D1ApiClient, connection: RemoteConnection):
        self.client = client
        self.connection = connection

    @property
    def mode(self) -> str:
        return "remote"

    def execute(self, sql: str) -> BackendResult:
        return self.client.query(
            self.connection.account_id,
            self.connection.database_id,
            self.connection.api_token.get_secret_value(),
            sql,
        )
