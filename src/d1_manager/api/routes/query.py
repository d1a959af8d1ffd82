from fastapi import APIRouter, Depends
from typing import Annotated

from d1_manager.api.models.query import QueryRequest
from d1_manager.api.models.response import SuccessResponse
from d1_manager.api.dependencies import get_credentials, get_database_service
from d1_manager.api.services import DatabaseService
from d1_manager.backends import CanonicalQueryResult, RequestCredentials

router = APIRouter()

DatabaseSvc = Annotated[DatabaseService, Depends(get_database_service)]
Credentials = Annotated[RequestCredentials, Depends(get_credentials)]


@router.post("/query", response_model=SuccessResponse[CanonicalQueryResult])
def execute_query(
    payload: QueryRequest,
    service: DatabaseSvc,
    credentials: Credentials,
):
    return SuccessResponse(data=service.run_query(credentials, payload.sql))
