from unittest.mock import AsyncMock, Mock

import pytest
from httpx import ASGITransport, AsyncClient

from chat_sandbox.chat.schemas import ChatSettings
from chat_sandbox.chat.service import ChatSession
from chat_sandbox.chat.store import session_store
from chat_sandbox.compression.schemas import CompressionResult
from chat_sandbox.llm.schemas import ChatCompletionResult, ModelInfo, Usage

SYSTEM_PROMPT = "You are a helpful AI assistant. Keep responses SHORT (2-3 sentences max)."


@pytest.fixture
def model():
    return ModelInfo(
        id="test/model",
        name="Test Model",
        provider="Test",
        input_cost_per_1m=1.0,
        output_cost_per_1m=2.0,
        context_window=8192,
    )


@pytest.fixture
def cached_model():
    return ModelInfo(
        id="test/cached-model",
        name="Test Cached Model",
        provider="Test",
        input_cost_per_1m=1.0,
        output_cost_per_1m=2.0,
        cached_input_cost_per_1m=0.25,
        context_window=8192,
    )


@pytest.fixture
def compression_client():
    client = Mock()
    client.compress = AsyncMock(
        return_value=CompressionResult(output="summary", output_tokens=20, original_input_tokens=100, latency_ms=120)
    )
    return client


@pytest.fixture
def completion_client():
    client = Mock()
    client.complete = AsyncMock(
        return_value=ChatCompletionResult(content="Sure!", usage=Usage(prompt_tokens=100, completion_tokens=10))
    )
    client.generate_user_message = AsyncMock(return_value="What else?")
    return client


@pytest.fixture
def session_factory(model, compression_client, completion_client):
    def _create_session(system_prompt: str = SYSTEM_PROMPT, **settings) -> ChatSession:
        return ChatSession(
            model=model,
            system_prompt=system_prompt,
            settings=ChatSettings(**settings),
            compression_client=compression_client,
            completion_client=completion_client,
        )

    return _create_session


@pytest.fixture
def session(session_factory):
    return session_factory()


def mock_http_client(mocker, target: str, status_code: int = 200, json_data=None, text: str = "", side_effect=None):
    """Patch the AsyncClient used by `target` and return the mocked inner client."""
    mock_client = Mock()
    mock_response = Mock()
    mock_response.status_code = status_code
    mock_response.text = text
    mock_response.json = Mock(return_value=json_data)
    mock_client.post = AsyncMock(return_value=mock_response, side_effect=side_effect)
    mock_async_client = AsyncMock()
    mock_async_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_async_client.__aexit__ = AsyncMock(return_value=None)
    mocker.patch(target, return_value=mock_async_client)
    return mock_client


@pytest.fixture(autouse=True)
def clear_session_store():
    yield
    session_store.clear()


@pytest.fixture
async def async_client():
    from chat_sandbox.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
