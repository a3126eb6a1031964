import logging
import sys
from contextvars import ContextVar

from chat_sandbox.config import IS_DEV

session_id_var: ContextVar[str] = ContextVar("session_id", default="-")


class SessionIdFilter(logging.Filter):
    """Stamps every record with the chat session handled by the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = session_id_var.get()
        return True


def _build_logger() -> logging.Logger:
    app_logger = logging.getLogger("chat_sandbox")
    if app_logger.handlers:
        return app_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | session=%(session_id)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(SessionIdFilter())
    app_logger.addHandler(handler)
    app_logger.setLevel(logging.DEBUG if IS_DEV else logging.INFO)
    return app_logger


logger = _build_logger()


class LogsHandler:
    @staticmethod
    def error(error: Exception, task: str = ""):
        if task:
            logger.error(f"Error while {task}: {error}", exc_info=error)
        else:
            logger.error(f"{error}", exc_info=error)
