
from .database import DatabaseService


__all__ = [
    "DatabaseService",
]
