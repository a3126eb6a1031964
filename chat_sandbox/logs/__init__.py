import bugsnag
from bugsnag.asgi import BugsnagMiddleware
from fastapi import FastAPI

from chat_sandbox.config import BUGSNAG_API_KEY, BUGSNAG_RELEASE_STAGE
from chat_sandbox.logs.logs_handler import logger

BUGSNAG_ENABLED = bool(BUGSNAG_API_KEY)


class BugsnagLogger:
    def setup_bugsnag(self, app: FastAPI):
        """
        Configures Bugsnag and wraps the FastAPI app so unhandled errors are reported.

        Args:
            app (FastAPI): The FastAPI application instance
        """
        bugsnag.configure(
            api_key=BUGSNAG_API_KEY,
            project_root=".",
            release_stage=BUGSNAG_RELEASE_STAGE,
            auto_capture_sessions=False,
        )
        app.add_middleware(BugsnagMiddleware)
        logger.info(f"Bugsnag configured for release stage '{BUGSNAG_RELEASE_STAGE}'")
