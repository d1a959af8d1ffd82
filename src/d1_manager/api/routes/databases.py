from fastapi import APIRouter, Depends
from typing import Annotated, Any, Dict, List

from d1_manager.api.models.response import SuccessResponse
from d1_manager.api.dependencies import get_credentials, get_database_service
from d1_manager.api.services import DatabaseService
from d1_manager.backends import RequestCredentials

router = APIRouter()

DatabaseSvc = Annotated[DatabaseService, Depends(get_database_service)]
Credentials = Annotated[RequestCredentials, Depends(get_credentials)]


@router.get("/databases", response_model=SuccessResponse[List[Dict[str, Any]]])
def list_databases(
    service: DatabaseSvc,
    credentials: Credentials,
):
    return SuccessResponse(data=service.list_databases(credentials))
