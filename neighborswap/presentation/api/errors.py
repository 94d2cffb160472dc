"""Translation of service failures into the HTTP error envelope."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import (
    DuplicateAccount,
    Forbidden,
    InvalidCredentials,
    InvalidToken,
    NeighborSwapError,
    NotFound,
    StoreError,
    Unauthenticated,
    UploadRejected,
    ValidationError,
)
from .schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[Type[NeighborSwapError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateAccount: status.HTTP_400_BAD_REQUEST,
    InvalidCredentials: status.HTTP_400_BAD_REQUEST,
    UploadRejected: status.HTTP_400_BAD_REQUEST,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    InvalidToken: status.HTTP_403_FORBIDDEN,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    fields: Optional[List[str]] = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, fields=fields or []))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def status_for(exc: NeighborSwapError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_service_error(request: Request, exc: NeighborSwapError) -> JSONResponse:
    status_code = status_for(exc)
    message = exc.message
    if status_code >= 500:
        message = "Internal server error"
    else:
        logger.debug("%s %s failed with %s: %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(status_code, exc.code, message, exc.fields)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: List[str] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        name = location[0] if location else "request"
        if name not in fields:
            fields.append(name)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        ValidationError.code,
        "Invalid request: " + ", ".join(fields),
        fields,
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, "http_error", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error"
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NeighborSwapError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
