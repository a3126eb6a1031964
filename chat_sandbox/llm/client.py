import logging
from dataclasses import dataclass, field
from typing import Iterable

from httpx import AsyncClient, HTTPError

from chat_sandbox.chat.schemas import Message
from chat_sandbox.config import (
    CHAT_COMPLETION_TIMEOUT_SECS,
    CHAT_MAX_COMPLETION_TOKENS,
    GROQ_API_KEY,
    GROQ_API_URL,
    OPENROUTER_API_KEY,
    OPENROUTER_API_URL,
    OPENROUTER_REFERER,
    OPENROUTER_TITLE,
)
from chat_sandbox.llm.exceptions import ChatCompletionError, ProviderConfigurationError
from chat_sandbox.llm.schemas import ChatCompletionResult, ModelInfo, Usage

logger = logging.getLogger(__name__)

SIMULATED_USER_SYSTEM_PROMPT = (
    "You are simulating a user in a chat conversation. Generate a short, natural follow-up message or question "
    "based on the AI's last response. Keep it very short. Just output the message, no quotes or explanation."
)
SIMULATED_USER_FALLBACK = "Tell me more about that."


@dataclass
class ProviderConfig:
    url: str
    api_key: str
    extra_headers: dict = field(default_factory=dict)


def get_provider_config(provider: str) -> ProviderConfig:
    """Groq models are served by Groq directly; every other provider is reached through OpenRouter."""
    if provider == "Groq":
        if not GROQ_API_KEY:
            raise ProviderConfigurationError("GROQ_API_KEY environment variable is not set")
        return ProviderConfig(url=GROQ_API_URL, api_key=GROQ_API_KEY)

    if not OPENROUTER_API_KEY:
        raise ProviderConfigurationError("OPENROUTER_API_KEY environment variable is not set")
    return ProviderConfig(
        url=OPENROUTER_API_URL,
        api_key=OPENROUTER_API_KEY,
        extra_headers={
            "HTTP-Referer": OPENROUTER_REFERER,
            "X-Title": OPENROUTER_TITLE,
        },
    )


class ChatCompletionClient:
    async def _post(self, model: ModelInfo, messages: list[dict]) -> dict:
        config = get_provider_config(model.provider)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
            **config.extra_headers,
        }
        payload = {
            "model": model.id,
            "messages": messages,
            "max_completion_tokens": CHAT_MAX_COMPLETION_TOKENS,
            "temperature": 1,
            "top_p": 1,
        }

        try:
            async with AsyncClient(timeout=CHAT_COMPLETION_TIMEOUT_SECS) as client:
                response = await client.post(config.url, json=payload, headers=headers)
        except HTTPError as e:
            raise ChatCompletionError(f"Chat completion failed: {e}") from e

        if response.status_code != 200:
            raise ChatCompletionError(f"Chat completion failed: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ChatCompletionError(f"Chat completion failed: unexpected response {response.text!r}") from e
        if not isinstance(data, dict):
            raise ChatCompletionError(f"Chat completion failed: unexpected response {response.text!r}")
        return data

    @staticmethod
    def _first_choice_content(data: dict) -> str:
        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    async def complete(self, messages: Iterable[Message], model: ModelInfo) -> ChatCompletionResult:
        """
        Send the conversation to the chat model and return its reply with token usage.

        Raises:
            ProviderConfigurationError: if the model's provider has no API key configured
            ChatCompletionError: if the provider is unreachable or answers with a non-success status
        """
        params = [m.to_api_param() for m in messages]
        logger.debug(f"Requesting completion from {model.id} with {len(params)} messages")

        data = await self._post(model, params)
        usage = data.get("usage") or {}
        return ChatCompletionResult(
            content=self._first_choice_content(data),
            usage=Usage(
                prompt_tokens=usage.get("prompt_tokens") or 0,
                completion_tokens=usage.get("completion_tokens") or 0,
            ),
        )

    async def generate_user_message(self, last_assistant_message: str, model: ModelInfo) -> str:
        """Ask the chat model to play the user and write a short follow-up to its last answer."""
        params = [
            {"role": "system", "content": SIMULATED_USER_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f'The AI just said: "{last_assistant_message}"\n\nGenerate a follow-up message from the user:',
            },
        ]
        data = await self._post(model, params)
        return self._first_choice_content(data) or SIMULATED_USER_FALLBACK
