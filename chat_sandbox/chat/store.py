from typing import Dict
from uuid import UUID

from chat_sandbox.chat.exceptions import SessionNotFoundError
from chat_sandbox.chat.service import ChatSession
from chat_sandbox.logs.logs_handler import logger


class SessionStore:
    """In-memory registry of live chat sessions. Nothing survives a restart."""

    def __init__(self):
        self._sessions: Dict[UUID, ChatSession] = {}

    def add(self, session: ChatSession) -> ChatSession:
        self._sessions[session.uuid] = session
        logger.info(f"Session {session.uuid} created with model {session.model.id}")
        return session

    def get(self, session_uuid: UUID) -> ChatSession:
        session = self._sessions.get(session_uuid)
        if session is None:
            raise SessionNotFoundError(f"No chat session found with UUID '{session_uuid}'")
        return session

    def delete(self, session_uuid: UUID):
        if self._sessions.pop(session_uuid, None) is None:
            raise SessionNotFoundError(f"No chat session found with UUID '{session_uuid}'")
        logger.info(f"Session {session_uuid} discarded")

    def clear(self):
        self._sessions.clear()

    def __len__(self):
        return len(self._sessions)


session_store = SessionStore()
