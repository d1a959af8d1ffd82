from fastapi import APIRouter, Depends
from typing import Annotated, Any, List

from d1_manager.api.models.response import SuccessResponse
from d1_manager.api.dependencies import get_credentials, get_database_service
from d1_manager.api.services import DatabaseService
from d1_manager.backends import RequestCredentials
from d1_manager.backends.models import TableSchema

router = APIRouter()

DatabaseSvc = Annotated[DatabaseService, Depends(get_database_service)]
Credentials = Annotated[RequestCredentials, Depends(get_credentials)]


@router.get("/tables", response_model=SuccessResponse[List[Any]])
def list_tables(
    service: DatabaseSvc,
    credentials: Credentials,
):
    return SuccessResponse(data=service.list_tables(credentials))


@router.get("/tables/{table_name}/schema", response_model=SuccessResponse[TableSchema])
def describe_table(
    table_name: str,
    service: DatabaseSvc,
    credentials: Credentials,
):
    return SuccessResponse(data=service.describe_table(credentials, table_name))
