from pydantic import BaseModel
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
