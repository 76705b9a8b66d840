"""
Tradução de erros em respostas HTTP
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from propfind.services.storage_service import UploadError

logger = logging.getLogger(__name__)

# Prefixos de localização que não fazem parte do nome do campo
_LOC_SOURCES = {"body", "query", "path", "header", "cookie"}


def format_validation_errors(errors) -> list:
    formatted = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in _LOC_SOURCES]
        formatted.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": format_validation_errors(exc.errors())},
    )


async def upload_exception_handler(request: Request, exc: UploadError):
    logger.error(f"Erro no upload: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to upload images"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Erro não tratado em {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UploadError, upload_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
