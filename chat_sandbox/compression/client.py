from typing import Optional

from httpx import AsyncClient, HTTPError

from chat_sandbox.compression.exceptions import CompressionError
from chat_sandbox.compression.schemas import CompressionResult
from chat_sandbox.config import COMPRESSION_TIMEOUT_SECS, TTC_API_KEY, TTC_API_URL, TTC_COMPRESSION_MODEL
from chat_sandbox.logs.logs_handler import logger

VERIFY_KEY_SAMPLE_TEXT = "Hello, this is a test."


class CompressionClient:
    URL = TTC_API_URL

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or TTC_API_KEY

    def _headers(self, api_key: str) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    async def compress(
        self, text: str, aggressiveness: float, max_output_tokens: Optional[int] = None
    ) -> CompressionResult:
        """
        Compress text with the compression provider.

        Args:
            text: The text to compress; spans wrapped in the provider's safe tags are kept verbatim
            aggressiveness: How hard to compress, between 0 and 1
            max_output_tokens: Optional cap on the size of the compressed output

        Returns:
            CompressionResult with the compressed text and the provider's token counts

        Raises:
            CompressionError: if no API key is configured, the provider is unreachable,
            or it answers with a non-success status or a malformed body
        """
        if not self.api_key:
            raise CompressionError("TTC API key is required.")

        compression_settings = {"aggressiveness": aggressiveness}
        if max_output_tokens is not None:
            compression_settings["max_output_tokens"] = max_output_tokens

        payload = {
            "model": TTC_COMPRESSION_MODEL,
            "input": text,
            "compression_settings": compression_settings,
        }

        logger.debug(f"Compressing {len(text)} characters with aggressiveness {aggressiveness}")
        try:
            async with AsyncClient(timeout=COMPRESSION_TIMEOUT_SECS) as client:
                response = await client.post(self.URL, json=payload, headers=self._headers(self.api_key))
        except HTTPError as e:
            raise CompressionError(f"Compression failed: {e}") from e

        if response.status_code != 200:
            raise CompressionError(f"Compression failed: {response.text}")

        try:
            data = response.json()
            return CompressionResult(
                output=data["output"],
                output_tokens=data["output_tokens"],
                original_input_tokens=data["original_input_tokens"],
                latency_ms=round((data.get("compression_time") or 0) * 1000),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise CompressionError(f"Compression failed: unexpected response {response.text!r}") from e

    @staticmethod
    async def verify_api_key(api_key: str) -> tuple[bool, Optional[str]]:
        """
        Check an API key by compressing a short sample text with it.

        Returns:
            Tuple of (valid, error message)
        """
        if not api_key or not api_key.strip():
            return False, "API key is required"

        try:
            await CompressionClient(api_key=api_key.strip()).compress(VERIFY_KEY_SAMPLE_TEXT, aggressiveness=0.1)
        except CompressionError as e:
            logger.warning(f"Compression API key rejected: {e}")
            return False, str(e)

        return True, None
