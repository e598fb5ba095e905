"""HTTP mapping for ordering errors.

Protean exceptions are first mapped by
``protean.integrations.fastapi.register_exception_handlers``. Validation and
not-found errors are then re-mapped so every error body has the shape
``{"error": ...}``, and the ordering-specific errors plus request-body
validation failures are added.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.order.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    ItemNotFoundError,
    OrderingError,
    StorageError,
    UnauthenticatedError,
)

_STATUS_CODES = {
    ItemNotFoundError: 404,
    InvalidTransitionError: 400,
    ConflictError: 409,
    ForbiddenError: 403,
    UnauthenticatedError: 401,
    StorageError: 503,
}


def status_code_for(exc: OrderingError) -> int:
    for error_cls, status_code in _STATUS_CODES.items():
        if isinstance(exc, error_cls):
            return status_code
    return 500


async def _ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    content = {"error": exc.message}
    if isinstance(exc, InvalidTransitionError):
        content["current_status"] = exc.current_status
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(status_code=status_code_for(exc), content=content, headers=headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": errors})


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.messages})


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the ordering-specific ones on ``app``."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
    app.add_exception_handler(OrderingError, _ordering_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
