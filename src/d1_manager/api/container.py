from typing import Optional

from d1_manager.backends import D1ApiClient, LocalDatabase
from d1_manager.common.settings import Settings, settings as default_settings

from d1_manager.api.services import DatabaseService


class Container:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        local_database: Optional[LocalDatabase] = None,
        api_client: Optional[D1ApiClient] = None,
    ):
        self.settings = settings or default_settings
        self.local_database = local_database or self._open_local_database()
        self.api_client = api_client or D1ApiClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.remote_timeout_sec,
        )
        self.database = DatabaseService(
            self.local_database,
            self.api_client,
            local_database_name=self.settings.local_database_name,
        )

    def _open_local_database(self) -> Optional[LocalDatabase]:
        if not self.settings.local_database:
            return None
        return LocalDatabase(
            self.settings.local_database,
            name=self.settings.local_database_name,
        )

    def close(self) -> None:
        if self.local_database is not None:
            self.local_database.dispose()
