from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from d1_manager.backends import (
    BackendResult,
    CanonicalQueryResult,
    ConnectionDescriptor,
    ConnectionModeResolver,
    D1ApiClient,
    LocalDatabase,
    LocalExecutor,
    QueryExecutor,
    RemoteConnection,
    RemoteExecutor,
    RequestCredentials,
    normalize,
)
from d1_manager.backends.models import ModeReport, TableSchema
from d1_manager.common.errors import (
    BackendExecutionError,
    ErrorCode,
    MissingSQLError,
    UnavailableModeError,
)
from d1_manager.common.logger import get_logger

logger = get_logger(__name__)

LIST_TABLES_SQL = (
    "SELECT name, type, sql FROM sqlite_master "
    "WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
)


def table_info_sql(table_name: str) -> str:
    # The name is interpolated verbatim; callers own identifier safety.
    return f"PRAGMA table_info({table_name})"


class DatabaseService:
    """Runs the fixed set of browser operations against the resolved backend."""

    def __init__(
        self,
        local_database: Optional[LocalDatabase],
        api_client: D1ApiClient,
        local_database_name: str = "local-dev-db",
    ):
        self.local_database = local_database
        self.api_client = api_client
        self.local_database_name = local_database_name
        self.resolver = ConnectionModeResolver(has_local_binding=local_database is not None)

    def executor_for(self, connection: ConnectionDescriptor) -> QueryExecutor:
        if isinstance(connection, RemoteConnection):
            return RemoteExecutor(self.api_client, connection)
        if self.local_database is None:
            raise UnavailableModeError()
        return LocalExecutor(self.local_database)

    def _execute(self, credentials: RequestCredentials, sql: str, default_error: str) -> BackendResult:
        connection = self.resolver.resolve(credentials, require_database=True)
        executor = self.executor_for(connection)
        logger.info(f"Executing statement in {executor.mode} mode")
        result = executor.execute(sql)
        if not result.success:
            raise BackendExecutionError(
                result.error or default_error,
                result.error_code or ErrorCode.DB_EXECUTION_ERROR,
            )
        return result

    def get_mode(self) -> ModeReport:
        """Reports usable modes. Remote is always offered since credentials travel per request."""
        has_binding = self.local_database is not None
        return ModeReport(local=has_binding, remote=True, hasBinding=has_binding)

    def list_databases(self, credentials: RequestCredentials) -> List[Dict[str, Any]]:
        connection = self.resolver.resolve(credentials, require_database=False)
        if isinstance(connection, RemoteConnection):
            return self.api_client.list_databases(
                connection.account_id, connection.api_token.get_secret_value()
            )
        return [{
            "name": self.local_database_name,
            "uuid": "local",
            "version": "1.0",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }]

    def run_query(self, credentials: RequestCredentials, sql: Optional[str]) -> CanonicalQueryResult:
        if not sql:
            raise MissingSQLError()
        result = self._execute(credentials, sql, "Query failed")
        return normalize(result)

    def list_tables(self, credentials: RequestCredentials) -> List[Any]:
        result = self._execute(credentials, LIST_TABLES_SQL, "Failed to get tables")
        return result.results or []

    def describe_table(self, credentials: RequestCredentials, table_name: str) -> TableSchema:
        result = self._execute(credentials, table_info_sql(table_name), "Failed to get schema")
        return TableSchema(tableName=table_name, columns=result.results or [])
