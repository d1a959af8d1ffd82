from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from d1_manager.common.errors import ErrorCode

ACCOUNT_ID_HEADER = "X-CF-Account-ID"
API_TOKEN_HEADER = "X-CF-API-Token"
DATABASE_ID_HEADER = "X-CF-Database-ID"


class LocalConnection(BaseModel):
    """Database reachable through the in-process binding."""

    kind: Literal["local"] = "local"

    model_config = ConfigDict(frozen=True)


class RemoteConnection(BaseModel):
    """Database reachable only through the remote D1 REST API."""

    kind: Literal["remote"] = "remote"
    account_id: str
    api_token: SecretStr
    database_id: str

    model_config = ConfigDict(frozen=True)


ConnectionDescriptor = Annotated[
    Union[LocalConnection, RemoteConnection], Field(discriminator="kind")
]


class RequestCredentials(BaseModel):
    """Credential headers carried by one inbound request."""

    account_id: Optional[str] = None
    api_token: Optional[SecretStr] = None
    database_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_remote_credentials(self) -> bool:
        return bool(
            self.account_id and self.api_token and self.api_token.get_secret_value()
        )


class BackendResult(BaseModel):
    """Backend-native result of one statement.

    ``results`` holds row mappings, or row arrays when ``columns`` is set.
    """

    success: bool
    results: Optional[List[Any]] = None
    columns: Optional[List[str]] = None
    meta: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = Field(default=None, exclude=True)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode = ErrorCode.DB_EXECUTION_ERROR) -> "BackendResult":
        return cls(success=False, error=error, error_code=error_code)


class CanonicalQueryResult(BaseModel):
    """Tabular result every query-shaped consumer relies on."""

    columns: List[str] = Field(default_factory=list)
    rows: List[List[Any]] = Field(default_factory=list)
    meta: Optional[Any] = None


class ModeReport(BaseModel):
    local: bool
    remote: bool
    hasBinding: bool


class DatabaseDescriptor(BaseModel):
    uuid: str
    name: str
    version: Optional[str] = None
    created_at: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class TableInfo(BaseModel):
    name: str
    type: str
    sql: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class TableSchema(BaseModel):
    tableName: str
    columns: List[Dict[str, Any]] = Field(default_factory=list)
