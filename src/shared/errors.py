"""HTTP translation of Protean domain errors, shared by every router."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": exc.messages})


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """ValidationError → 400, ObjectNotFoundError → 404."""
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
