"""
Maps exceptions to HTTP responses. Routers and these handlers are the only
places that produce HTTP status codes.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dealership.exceptions import (
    InvalidReferenceError,
    InvalidUploadError,
    StorageError,
    StorageNotConfiguredError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {"error": "Internal server error"}


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            content={"error": exc.detail},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content={"error": "Validation error", "details": jsonable_encoder(exc.errors())},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(InvalidReferenceError)
    @app.exception_handler(InvalidUploadError)
    async def client_error_handler(request: Request, exc: Exception):
        return JSONResponse(content={"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StorageNotConfiguredError)
    async def storage_config_handler(request: Request, exc: StorageNotConfiguredError):
        logger.error("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            content={"error": "File storage is not configured", "details": exc.errors},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            content={"error": "File storage request failed"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(content=INTERNAL_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(content=INTERNAL_ERROR, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
