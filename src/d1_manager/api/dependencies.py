from typing import Annotated, Optional

from fastapi import Depends, Header, Request
from pydantic import SecretStr

from d1_manager.backends import RequestCredentials
from d1_manager.backends.models import ACCOUNT_ID_HEADER, API_TOKEN_HEADER, DATABASE_ID_HEADER
from d1_manager.api.container import Container
from d1_manager.api.services import DatabaseService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_database_service(
    container: Container = Depends(get_container),
) -> DatabaseService:
    return container.database


def get_credentials(
    account_id: Annotated[Optional[str], Header(alias=ACCOUNT_ID_HEADER)] = None,
    api_token: Annotated[Optional[str], Header(alias=API_TOKEN_HEADER)] = None,
    database_id: Annotated[Optional[str], Header(alias=DATABASE_ID_HEADER)] = None,
) -> RequestCredentials:
    return RequestCredentials(
        account_id=account_id or None,
        api_token=SecretStr(api_token) if api_token else None,
        database_id=database_id or None,
    )
