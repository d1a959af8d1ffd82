from fastapi import APIRouter, Depends
from typing import Annotated

from d1_manager.api.models.response import SuccessResponse
from d1_manager.api.dependencies import get_database_service
from d1_manager.api.services import DatabaseService
from d1_manager.backends.models import ModeReport

router = APIRouter()

DatabaseSvc = Annotated[DatabaseService, Depends(get_database_service)]


@router.get("/mode", response_model=SuccessResponse[ModeReport])
def get_mode(
    service: DatabaseSvc,
):
    return SuccessResponse(data=service.get_mode())
