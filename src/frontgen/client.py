"""Client for the hosted chat-completion endpoint (OpenRouter-compatible)."""

import logging
from typing import Optional

import httpx

from .config import Config
from .core import Message
from .errors import ConfigurationError, EmptyResponseError, TransportError

logger = logging.getLogger(__name__)

MAX_ERROR_BODY = 500


class CompletionClient:
    """Sends one chat-completion request per call. No retries."""

    def __init__(self, config: Config, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._http_client = http_client

    @property
    def has_credential(self) -> bool:
        return bool(self.config.api_key)

    def build_payload(self, messages: list[Message]) -> dict:
        return {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
        }

    def build_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.title,
        }

    async def complete(self, messages: list[Message]) -> str:
        """Return the text of the first choice.

        Raises TransportError on network failure or a non-2xx status, and
        EmptyResponseError when the response carries no content.
        """
        if not self.has_credential:
            raise ConfigurationError("API key is not configured")

        url = f"{self.config.base_url}/chat/completions"
        payload = self.build_payload(messages)
        logger.debug("POST %s model=%s messages=%d", url, self.config.model, len(messages))

        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, json=payload, headers=self.build_headers())
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.post(url, json=payload, headers=self.build_headers())
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY]
            raise TransportError(
                f"API request failed with status: {response.status_code}. Body: {body}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise EmptyResponseError() from e

        content = _first_choice_content(result)
        if not content:
            raise EmptyResponseError()
        return content


def _first_choice_content(result) -> Optional[str]:
    if not isinstance(result, dict):
        return None
    choices = result.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None
