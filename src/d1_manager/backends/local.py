import time
from typing import Any, Dict

from sqlalchemy import create_engine, Engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from d1_manager.common.logger import get_logger

from .interfaces import QueryExecutor
from .models import BackendResult

logger = get_logger(__name__)


def _cell(value: Any) -> Any:
    # D1 returns blobs as arrays of byte values.
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value))
    return value


def _to_sqlalchemy_url(database: str) -> str:
    try:
        make_url(database)
        return database
    except ArgumentError:
        return f"sqlite:///{database}"


class LocalDatabase:
    """
    The in-process database binding.
    Wraps a SQLAlchemy engine over a SQLite database and runs one statement per call.
    """
    def __init__(self, database: str, name: str = "local-dev-db"):
        self.name = name
        self.url = _to_sqlalchemy_url(database)
        self.engine: Engine = None
        self.connect()

    def __str__(self):
        return f"{self.name} ({self.url})"

    def connect(self) -> None:
        try:
            self.engine = create_engine(self.url, pool_pre_ping=True)
        except Exception as e:
            logger.error(f"Failed to open local database {self}: {e}")
            raise

        if self.engine.dialect.name == "sqlite":
            @event.listens_for(self.engine, "connect")
            def _enable_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys = ON")
                cursor.close()

    def run_all(self, sql: str) -> Dict[str, Any]:
        """Runs one statement and returns its rows with execution stats.

        Raises whatever the driver raises.
        """
        if not self.engine:
            raise RuntimeError(f"Not connected to {self}")

        start = time.perf_counter()
        with self.engine.begin() as conn:
            result = conn.exec_driver_sql(sql)
            if result.returns_rows:
                # Later duplicate column names win, as with D1 row objects.
                keys = list(result.keys())
                rows = [
                    {key: _cell(value) for key, value in zip(keys, row)}
                    for row in result.fetchall()
                ]
                changes = 0
                last_row_id = 0
            else:
                rows = []
                changes = max(result.rowcount, 0)
                last_row_id = result.lastrowid or 0

        duration = (time.perf_counter() - start) * 1000
        return {
            "results": rows,
            "meta": {
                "duration": duration,
                "rows_read": len(rows),
                "rows_written": changes,
                "changes": changes,
                "last_row_id": last_row_id,
                "changed_db": changes > 0,
            },
        }

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


class LocalExecutor(QueryExecutor):
    def __init__(self, database: LocalDatabase):
        self.database = database

    @property
    def mode(self) -> str:
        return "local"

    def execute(self, sql: str) -> BackendResult:
        try:
            output = self.database.run_all(sql)
        except Exception as e:
            message = str(getattr(e, "orig", None) or e) or "Query execution failed"
            logger.warning(f"Local query failed on {self.database}: {message}")
            return BackendResult.failure(message)

        return BackendResult(
            success=True,
            results=output["results"],
            meta=output["meta"],
        )
