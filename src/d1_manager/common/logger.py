import contextvars
import json
import logging
from contextlib import contextmanager
from typing import NamedTuple, Optional


class RequestScope(NamedTuple):
    request_id: str
    method: Optional[str] = None
    path: Optional[str] = None

    def label(self) -> str:
        if self.method and self.path:
            return f"{self.request_id} {self.method} {self.path}"
        return self.request_id


_scope_ctx: contextvars.ContextVar[Optional[RequestScope]] = contextvars.ContextVar(
    "request_scope", default=None
)


@contextmanager
def request_context(request_id: str, method: Optional[str] = None, path: Optional[str] = None):
    """Binds the inbound request to every record logged inside the block."""
    token = _scope_ctx.set(RequestScope(request_id, method, path))
    try:
        yield
    finally:
        _scope_ctx.reset(token)


class RequestContextFilter(logging.Filter):
    """Stamps records with the active request scope, or '-' outside a request."""

    def filter(self, record):
        scope = _scope_ctx.get()
        record.request_id = scope.request_id if scope else None
        record.http_method = scope.method if scope else None
        record.http_path = scope.path if scope else None
        record.request = scope.label() if scope else "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, request fields included when bound."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, attr in (("request_id", "request_id"), ("method", "http_method"), ("path", "http_path")):
            value = getattr(record, attr, None)
            if value:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_format: bool = False):
    """Installs a single stream handler on the root logger.

    Args:
        level (str): Root log level.
        json_format (bool): Emit JSON lines instead of plain text.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - [%(request)s] - %(name)s - %(levelname)s - %(message)s"
        ))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
