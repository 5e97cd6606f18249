"""Application-wide exception handlers.

In production the client only sees an opaque message and the status code.
Elsewhere the response carries the error details for debugging.
"""

import logging
import traceback
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from movies_api.core.config import settings

logger = logging.getLogger(__name__)


def error_payload(exc: BaseException, production: bool) -> dict:
    if production:
        return {"error": HTTPStatus.INTERNAL_SERVER_ERROR.phrase}
    # цикличные ссылки в args не сериализуются, поэтому repr
    return {
        "error": str(exc) or HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
        "type": type(exc).__name__,
        "args": [repr(arg) for arg in exc.args],
        "cause": repr(exc.__cause__) if exc.__cause__ else None,
        "traceback": traceback.format_exception(
            type(exc), exc, exc.__traceback__),
    }


async def unhandled_error_handler(
        request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error",
        exc_info=exc,
        extra={"path": request.url.path, "err": str(exc)},
    )
    return JSONResponse(
        error_payload(exc, production=settings.is_production),
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    # RuntimeError/PyMongoError обрабатываются в ExceptionMiddleware,
    # Exception: в ServerErrorMiddleware, последний рубеж
    app.add_exception_handler(RuntimeError, unhandled_error_handler)
    app.add_exception_handler(PyMongoError, unhandled_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
