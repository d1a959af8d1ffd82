import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from d1_manager.backends.models import ACCOUNT_ID_HEADER, API_TOKEN_HEADER, DATABASE_ID_HEADER
from d1_manager.common.errors import STATUS_CODES, D1ManagerError, ErrorCode
from d1_manager.common.logger import get_logger, request_context
from d1_manager.common.settings import settings

from .container import Container
from .models.response import ErrorResponse
from .routes import mode, databases, query, tables

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(message: str, code: ErrorCode, status_code: Optional[int] = None) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(error=message).model_dump(),
        status_code=status_code or STATUS_CODES[code],
    )


async def handle_d1_error(request: Request, exc: D1ManagerError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} failed with {exc.code.value}: {exc.message}")
    return error_response(exc.message, exc.code, exc.status_code)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods both surface as not found.
    if exc.status_code in (404, 405):
        return error_response("Not found", ErrorCode.NOT_FOUND)
    code = ErrorCode.INVALID_REQUEST if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR
    return error_response(str(exc.detail), code, exc.status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(message, ErrorCode.INVALID_REQUEST)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Builds the API. Prefix and CORS origins come from the injected container's
    settings, else from the process settings.
    """
    app_settings = container.settings if container is not None else settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.container = container or Container()
        try:
            yield
        finally:
            app.state.container.close()

    app = FastAPI(
        title="D1 Manager API",
        version="0.1.0",
        lifespan=lifespan,
    )

    prefix = app_settings.api_prefix
    app.include_router(mode.router, prefix=prefix)
    app.include_router(databases.router, prefix=prefix)
    app.include_router(query.router, prefix=prefix)
    app.include_router(tables.router, prefix=prefix)

    app.add_exception_handler(D1ManagerError, handle_d1_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    @app.middleware("http")
    async def request_scope(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        with request_context(request_id, request.method, request.url.path):
            try:
                if request.method == "OPTIONS":
                    # Preflights without CORS headers still get an empty answer.
                    response = Response(status_code=200)
                else:
                    response = await call_next(request)
            except Exception as e:
                logger.exception("Unhandled error")
                response = error_response(str(e) or "Internal server error", ErrorCode.INTERNAL_ERROR)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", ACCOUNT_ID_HEADER, API_TOKEN_HEADER, DATABASE_ID_HEADER, REQUEST_ID_HEADER],
    )

    return app


app = create_app()
