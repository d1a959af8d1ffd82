from abc import ABC, abstractmethod

from .models import BackendResult


class QueryExecutor(ABC):
    """Runs exactly one SQL statement against one backend."""

    @property
    @abstractmethod
    def mode(self) -> str:
        """Connection mode served by this executor ('local' or 'remote')."""
        pass

    @abstractmethod
    def execute(self, sql: str) -> BackendResult:
        """Execute a statement and return the backend-native result.

        Implementations must capture every fault into ``BackendResult.error``
        instead of raising.
        """
        pass
