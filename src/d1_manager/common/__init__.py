"""Shared configuration, logging and error types."""
from d1_manager.common.errors import (
    ErrorCode,
    D1ManagerError,
    UnavailableModeError,
    MissingSQLError,
    BackendExecutionError,
)
from d1_manager.common.logger import get_logger, configure_logging, request_context

__all__ = [
    "ErrorCode",
    "D1ManagerError",
    "UnavailableModeError",
    "MissingSQLError",
    "BackendExecutionError",
    "get_logger",
    "configure_logging",
    "request_context",
]
