from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Standardized error codes surfaced by the router."""
    UNAVAILABLE_MODE = "UNAVAILABLE_MODE"
    MISSING_SQL = "MISSING_SQL"
    INVALID_REQUEST = "INVALID_REQUEST"
    DB_EXECUTION_ERROR = "DB_EXECUTION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_CODES = {
    ErrorCode.UNAVAILABLE_MODE: 400,
    ErrorCode.MISSING_SQL: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.DB_EXECUTION_ERROR: 500,
    ErrorCode.TRANSPORT_ERROR: 500,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL_ERROR: 500,
}

NO_CONNECTION_MESSAGE = "No database connection available"


class D1ManagerError(Exception):
    """Base error for failures that end in an error envelope.

    Attributes:
        code (ErrorCode): The standardized error code.
        message (str): Message returned to the caller verbatim.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 500)


class UnavailableModeError(D1ManagerError):
    """Neither the local binding nor the remote credentials can serve the request."""

    code = ErrorCode.UNAVAILABLE_MODE

    def __init__(self, message: str = NO_CONNECTION_MESSAGE):
        super().__init__(message)


class MissingSQLError(D1ManagerError):
    code = ErrorCode.MISSING_SQL

    def __init__(self, message: str = "SQL query is required"):
        super().__init__(message)


class BackendExecutionError(D1ManagerError):
    """A backend reported failure. The message is passed through unchanged."""

    code = ErrorCode.DB_EXECUTION_ERROR
