import asyncio
from asyncio import exceptions
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_sandbox.chat.store import session_store
from chat_sandbox.config import IS_DEV, REQUEST_TIMEOUT_SECS, TTC_API_KEY, URL_HOSTNAME
from chat_sandbox.exceptions.handlers import register_exception_handlers
from chat_sandbox.logs import BUGSNAG_ENABLED, BugsnagLogger
from chat_sandbox.logs.logs_handler import logger
from chat_sandbox.routers import routers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan function that runs code before startup and on shutdown.

    Sessions are held in memory only, so shutting down discards every conversation.
    """
    if not TTC_API_KEY:
        logger.warning("TTC_API_KEY is not set, sessions must supply their own compression API key")

    yield

    logger.info(f"Discarding {len(session_store)} chat sessions")
    session_store.clear()


app = FastAPI(title="Chat Sandbox API", version="0.1.0", lifespan=lifespan)

# Configure CORS
if IS_DEV:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins in development
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[URL_HOSTNAME],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Setup Bugsnag logger
logger.info(f"BUGSNAG_ENABLED: {BUGSNAG_ENABLED}")
if BUGSNAG_ENABLED:
    bugsnag_logger = BugsnagLogger()
    bugsnag_logger.setup_bugsnag(app)


@app.middleware("http")
async def request_middleware(request: Request, call_next):
    # Apply global timeout
    try:
        response = await asyncio.wait_for(call_next(request), timeout=REQUEST_TIMEOUT_SECS)
        return response
    except exceptions.TimeoutError:
        return JSONResponse(
            status_code=503,
            content={
                "status": "failed",
                "error_code": "REQUEST_TIMED_OUT",
                "status_message": "Server failed to process the request on time",
            },
        )


for router in routers:
    app.include_router(router.router, prefix=router.prefix, tags=list(router.tags))

register_exception_handlers(app)
