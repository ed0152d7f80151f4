"""Anthropic text source.

Streams a message from the Anthropic API. The API key comes from the
ANTHROPIC_API_KEY environment variable unless one is passed in.
"""

import logging
from collections.abc import AsyncIterator

import anthropic

from studio.application.ports import GenerationRequest
from studio.domain.shared import StreamFailure

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicTextSource:
    """Text source backed by ``anthropic.AsyncAnthropic`` message streaming."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 8192,
        api_key: str | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._api_key = api_key

    def _content(self, request: GenerationRequest) -> list[dict]:
        blocks: list[dict] = [
            {
                "type": "image",
                "source": {"type": "base64", "media_type": "image/jpeg", "data": image},
            }
            for image in request.images
        ]
        blocks.append({"type": "text", "text": request.prompt})
        return blocks

    async def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        logger.debug(f"Streaming from Anthropic model {self._model}")
        try:
            client = anthropic.AsyncAnthropic(api_key=self._api_key)
            async with client.messages.stream(
                model=self._model,
                max_tokens=self._max_tokens,
                system=request.system,
                messages=[{"role": "user", "content": self._content(request)}],
            ) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIConnectionError as e:
            raise StreamFailure("Could not connect to Anthropic API") from e
        except anthropic.RateLimitError as e:
            raise StreamFailure("Rate limited by Anthropic API, try again shortly") from e
        except anthropic.APIStatusError as e:
            raise StreamFailure(f"Anthropic API error ({e.status_code}): {e.message}") from e
        except anthropic.AnthropicError as e:
            raise StreamFailure(f"Anthropic client error: {e}") from e
