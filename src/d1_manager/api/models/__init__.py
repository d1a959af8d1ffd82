from .query import QueryRequest
from .response import ErrorResponse, SuccessResponse

__all__ = ["QueryRequest", "ErrorResponse", "SuccessResponse"]
