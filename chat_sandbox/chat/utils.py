from uuid import UUID

from fastapi import HTTPException, Path, status

from chat_sandbox.chat.service import ChatSession
from chat_sandbox.chat.store import session_store
from chat_sandbox.logs.logs_handler import LogsHandler, session_id_var


async def session_validator(session_uuid: str = Path(..., description="Chat session UUID")) -> ChatSession:
    try:
        parsed_uuid = UUID(session_uuid)
    except ValueError:
        error = HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'session_uuid' parameter '{session_uuid}' is not a valid UUID",
        )
        LogsHandler.error(error, task="validating session_uuid")
        raise error from None

    session = session_store.get(parsed_uuid)
    session_id_var.set(str(parsed_uuid))
    return session
