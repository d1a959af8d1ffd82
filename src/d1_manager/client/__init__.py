from .client import D1ManagerClient, OperationOutcome
from . import statements

__all__ = ["D1ManagerClient", "OperationOutcome", "statements"]
