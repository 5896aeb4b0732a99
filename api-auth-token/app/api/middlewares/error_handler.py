# app/api/middlewares/error_handler.py
import logging

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from app.config.settings import settings
from app.core.clock import utc_now
from app.core.exceptions import AppError
from app.core.result import ErrorKind
from app.entities.request_context import RequestContext

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_body(*, path: str, message: str, status: int, kind: ErrorKind | str | None = None) -> dict:
    error = kind.value if isinstance(kind, ErrorKind) else kind
    return {
        "path": path,
        "message": message,
        "status": status,
        "timestamp": utc_now().isoformat(),
        "error": error,
    }


def _validation_message(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        field = ".".join(str(p) for p in item.get("loc", ())) or "body"
        parts.append(f"{field}: {item.get('msg')}")
    return "; ".join(parts) or "Invalid request"


def error_response(exc: Exception, *, path: str) -> Response:
    """Traduz qualquer exceção no corpo JSON padrão de erro."""
    if isinstance(exc, AppError):
        status, message, kind = exc.status_code, exc.message, exc.kind
        if status >= 500:
            logger.error("application error path=%s kind=%s message=%s", path, kind, message)
    elif isinstance(exc, ValidationError):
        status, message, kind = 400, _validation_message(exc), ErrorKind.VALIDATION
    elif isinstance(exc, HTTPException):
        status, message, kind = exc.code or 500, exc.description or exc.name, None
    else:
        logger.exception("unhandled error path=%s", path, exc_info=exc)
        status, kind = 500, None
        message = str(exc) if settings.debug else INTERNAL_ERROR_MESSAGE

    response = jsonify(error_body(path=path, message=message, status=status, kind=kind))
    response.status_code = status
    return response


class ExceptionTranslationStage:
    """Primeiro estágio da cadeia: nenhuma exceção dos estágios seguintes escapa."""

    def __call__(self, ctx: RequestContext, call_next) -> Response | None:
        try:
            return call_next(ctx)
        except Exception as exc:  # noqa: BLE001 - tudo vira resposta estruturada
            return error_response(exc, path=ctx.path)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        return error_response(err, path=request.path)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response(err, path=request.path)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err, path=request.path)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return error_response(err, path=request.path)
