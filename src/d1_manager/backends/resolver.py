from typing import Optional

from pydantic import BaseModel

from d1_manager.common.errors import UnavailableModeError

from .models import ConnectionDescriptor, LocalConnection, RemoteConnection, RequestCredentials


class ModeResolution(BaseModel):
    """Which connection modes can serve one request."""

    local: bool
    remote: bool


class ConnectionModeResolver:
    """Decides between the local binding and the remote API for a request.

    Precedence: remote if credentialed, else local if bound, else unavailable.
    """

    def __init__(self, has_local_binding: bool):
        self.has_local_binding = has_local_binding

    def eligible_modes(self, credentials: RequestCredentials) -> ModeResolution:
        return ModeResolution(
            local=self.has_local_binding,
            remote=credentials.has_remote_credentials,
        )

    def resolve(
        self,
        credentials: RequestCredentials,
        require_database: bool = True,
    ) -> ConnectionDescriptor:
        """Picks the connection for one operation.

        Args:
            credentials (RequestCredentials): Credential headers of the request.
            require_database (bool): Whether the operation needs a database id
                to use remote mode. Database listing does not.

        Returns:
            The chosen connection descriptor. The database id of a remote
            descriptor is empty when ``require_database`` is False and none was sent.

        Raises:
            UnavailableModeError: If no mode can serve the operation.
        """
        modes = self.eligible_modes(credentials)
        database_id: Optional[str] = credentials.database_id

        if modes.remote and (database_id or not require_database):
            return RemoteConnection(
                account_id=credentials.account_id,
                api_token=credentials.api_token,
                database_id=database_id or "",
            )
        if modes.local:
            return LocalConnection()
        raise UnavailableModeError()
