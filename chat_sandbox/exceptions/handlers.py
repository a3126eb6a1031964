import bugsnag
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from chat_sandbox.chat.exceptions import (
    ConfirmationRequiredError,
    EmptyMessageError,
    SessionBusyError,
    SessionNotFoundError,
)
from chat_sandbox.llm.exceptions import ChatCompletionError, ModelNotFoundError, ProviderConfigurationError
from chat_sandbox.logs import BUGSNAG_ENABLED
from chat_sandbox.logs.logs_handler import logger


def log_and_respond(status_code: int, request: Request, exc: Exception) -> Response:
    logger.error(f"Error in endpoint {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def failed_response(status_code: int, error_code: str, exc: Exception) -> Response:
    return JSONResponse(
        status_code=status_code,
        content={"status": "failed", "error_code": error_code, "status_message": str(exc)},
    )


async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> Response:
    return log_and_respond(status_code=404, request=request, exc=exc)


async def session_busy_handler(request: Request, exc: SessionBusyError) -> Response:
    return log_and_respond(status_code=409, request=request, exc=exc)


async def empty_message_handler(request: Request, exc: EmptyMessageError) -> Response:
    return log_and_respond(status_code=400, request=request, exc=exc)


async def confirmation_required_handler(request: Request, exc: ConfirmationRequiredError) -> Response:
    return log_and_respond(status_code=400, request=request, exc=exc)


async def chat_completion_exception_handler(request: Request, exc: ChatCompletionError) -> Response:
    logger.error(f"Chat completion failed in endpoint {request.url.path}: {exc}")
    return failed_response(502, "CHAT_COMPLETION_ERROR", exc)


async def configuration_exception_handler(request: Request, exc: Exception) -> Response:
    logger.error(f"Configuration error in endpoint {request.url.path}: {exc}")
    if BUGSNAG_ENABLED:
        bugsnag.notify(exc)
    return failed_response(500, "PROVIDER_CONFIGURATION_ERROR", exc)


def register_exception_handlers(app: FastAPI):
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(SessionNotFoundError)(session_not_found_handler)
    app.exception_handler(SessionBusyError)(session_busy_handler)
    app.exception_handler(EmptyMessageError)(empty_message_handler)
    app.exception_handler(ConfirmationRequiredError)(confirmation_required_handler)
    app.exception_handler(ChatCompletionError)(chat_completion_exception_handler)
    app.exception_handler(ProviderConfigurationError)(configuration_exception_handler)
    app.exception_handler(ModelNotFoundError)(configuration_exception_handler)
