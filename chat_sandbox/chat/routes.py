# ruff: noqa: B008
import logging

from fastapi import APIRouter, Body, Depends, Response

from chat_sandbox.api.endpoints import ENDPOINTS
from chat_sandbox.chat.schemas import (
    ChatSettings,
    MessageRequest,
    RawMessagesResponse,
    SessionCreateRequest,
    SessionResponse,
    SettingsPatch,
    SimulatedMessageResponse,
    StatsResponse,
    SystemPromptRequest,
    TurnResponse,
)
from chat_sandbox.chat.service import ChatSession
from chat_sandbox.chat.store import session_store
from chat_sandbox.chat.utils import session_validator
from chat_sandbox.compression.client import CompressionClient
from chat_sandbox.llm.catalog import get_model

router = APIRouter()

logger = logging.getLogger(__name__)


@router.post(path=ENDPOINTS.SESSIONS, response_model=SessionResponse, status_code=201)
async def create_session(data: SessionCreateRequest = Body(...)):
    """
    Start a new chat session. Unknown model ids fall back to the first model of the catalog.
    """
    session = ChatSession(
        model=get_model(data.model_id),
        system_prompt=data.system_prompt,
        settings=data.settings,
        compression_client=CompressionClient(api_key=data.compression_api_key),
    )
    session_store.add(session)
    return session.client_response()


@router.get(path=ENDPOINTS.SESSION_ITEM, response_model=SessionResponse)
async def get_session(session: ChatSession = Depends(session_validator)):
    return session.client_response()


@router.delete(path=ENDPOINTS.SESSION_ITEM, status_code=204, response_model=None)
async def delete_session(session: ChatSession = Depends(session_validator)) -> Response:
    session_store.delete(session.uuid)
    return Response(status_code=204)


@router.post(path=ENDPOINTS.SESSION_MESSAGES, response_model=TurnResponse)
async def send_message(session: ChatSession = Depends(session_validator), data: MessageRequest = Body(...)):
    """
    Send a user message and get the assistant's reply.

    Compaction runs first when the session is due for it. A failed compaction is reported in
    `warning` and does not stop the reply.
    """
    return await session.send_message(data.content)


@router.get(path=ENDPOINTS.SESSION_RAW_MESSAGES, response_model=RawMessagesResponse)
async def get_raw_messages(session: ChatSession = Depends(session_validator)):
    return session.raw_messages()


@router.get(path=ENDPOINTS.SESSION_STATS, response_model=StatsResponse)
async def get_stats(session: ChatSession = Depends(session_validator)):
    return session.stats_response()


@router.patch(path=ENDPOINTS.SESSION_SETTINGS, response_model=ChatSettings)
async def patch_settings(session: ChatSession = Depends(session_validator), data: SettingsPatch = Body(...)):
    return session.update_settings(data)


@router.put(path=ENDPOINTS.SESSION_SYSTEM_PROMPT, response_model=SessionResponse)
async def put_system_prompt(session: ChatSession = Depends(session_validator), data: SystemPromptRequest = Body(...)):
    """
    Replace the system prompt. This wipes the conversation, its summary and all statistics,
    so the request must carry `confirm: true`.
    """
    session.change_system_prompt(data.system_prompt, confirm=data.confirm)
    return session.client_response()


@router.post(path=ENDPOINTS.SESSION_TEST_MESSAGE, response_model=SimulatedMessageResponse)
async def create_test_message(session: ChatSession = Depends(session_validator)):
    """
    Generate a follow-up the user could send next. The message is returned, not sent.
    """
    content = await session.generate_test_message()
    return SimulatedMessageResponse(content=content)
