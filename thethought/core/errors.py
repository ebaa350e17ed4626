# thethought/core/errors.py
"""
Errores de dominio y su traducción a respuestas HTTP.

Los servicios lanzan estas excepciones; los handlers registrados en
`main.py` las convierten siempre en `{"error": "<mensaje>"}`.
"""
import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError

from thethought.core.json import UTF8JSONResponse

log = logging.getLogger("uvicorn")


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class UnexpectedError(AppError):
    status_code = 500


def _error(status_code: int, message: str) -> UTF8JSONResponse:
    return UTF8JSONResponse(status_code=status_code, content={"error": message})


async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, UnexpectedError):
        # el detalle se queda en el log, al cliente solo el genérico
        log.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return _error(500, "Server error")
    return _error(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: HTTPException):
    return _error(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "invalid request"
    return _error(400, message)


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception(f"❌ error no controlado en {request.method} {request.url.path}")
    return _error(500, "Server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
