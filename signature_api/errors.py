"""
Error kinds raised by the handlers, the store and the mail sender.

BadRequest and NotFound are shown to the caller as-is. Everything else is
logged with its traceback and collapsed into one generic 500, so the
caller never learns whether the email went out before a storage error.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Erro ao enviar ou registrar assinatura."
MISSING_FIELDS = "Dados obrigatórios faltando."


class SignatureServiceError(Exception):
    """Base class. status_code is the HTTP status the error maps to."""

    status_code = 500
    body_key = "error"

    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)
        self.message = message


class BadRequest(SignatureServiceError):
    status_code = 400


class NotFound(SignatureServiceError):
    status_code = 404
    body_key = "mensagem"


class TransportFailure(SignatureServiceError):
    """The mail transport refused or failed to deliver the message."""


class StorageFailure(SignatureServiceError):
    """The record file could not be written."""


class Internal(SignatureServiceError):
    pass


async def _service_error_handler(request: Request, exc: SignatureServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed (%s)", request.method, request.url.path, type(exc).__name__,
            exc_info=exc,
        )
        message = GENERIC_ERROR
    else:
        message = exc.message
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, exc.body_key: message},
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"ok": False, "error": MISSING_FIELDS})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SignatureServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
