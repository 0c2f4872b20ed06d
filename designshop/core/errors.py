"""
Handlers d'exceptions de l'application.

Toute erreur sort sous la forme ``{success: false, message, errors?}``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from designshop.config import settings
from designshop.core.exceptions import DomainException
from designshop.core.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, payload: ErrorResponse, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(payload.model_dump(exclude_none=True)),
        headers=headers,
    )


def format_validation_errors(raw_errors) -> list:
    """Réduit les erreurs pydantic à ``{field, message}``."""
    formatted = []
    for err in raw_errors:
        location = [str(part) for part in err.get("loc", ()) if part != "body"]
        formatted.append({"field": ".".join(location), "message": err.get("msg", "")})
    return formatted


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    logger.debug(f"{exc.__class__.__name__} sur {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, ErrorResponse(message=exc.message, errors=exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Validation échouée sur {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(message="Validation failed", errors=format_validation_errors(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(
        exc.status_code,
        ErrorResponse(message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Erreur inattendue sur {request.method} {request.url.path}: {exc}")
    payload = ErrorResponse(message=settings.SERVER_ERROR_MSG)
    if not settings.is_production:
        payload.error = str(exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, payload)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
