"""Translate supply-chain failures into HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from supplychain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    SupplyChainError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    InvalidTransitionError: 409,
    ConflictError: 409,
    PermissionDeniedError: 403,
}


async def _supplychain_error(request: Request, exc: SupplyChainError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    logger.info("Request rejected", path=request.url.path, kind=exc.kind, detail=exc.detail)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Request failed validation", path=request.url.path, errors=exc.messages)
    return JSONResponse(status_code=422, content={"kind": "validation", "detail": exc.messages})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SupplyChainError, _supplychain_error)
    app.add_exception_handler(ValidationError, _validation_error)
