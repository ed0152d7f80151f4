"""Ollama text source.

Streams a chat completion from a local Ollama server. Server and
connection errors surface as ``StreamFailure``.
"""

import logging
from collections.abc import AsyncIterator

import ollama

from studio.application.ports import GenerationRequest
from studio.domain.shared import StreamFailure

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "qwen2.5-coder:7b"


class OllamaTextSource:
    """Text source backed by ``ollama.AsyncClient``.

    Example:
        source = OllamaTextSource(model="qwen2.5-coder:7b")
        async for chunk in source.generate(request):
            print(chunk, end="")
    """

    def __init__(self, model: str = DEFAULT_MODEL, host: str | None = None) -> None:
        """Initialize the source.

        Args:
            model: Model to chat with.
            host: Ollama server URL. None uses OLLAMA_HOST or the default.
        """
        self._model = model
        self._host = host

    def _messages(self, request: GenerationRequest) -> list[dict]:
        user: dict = {"role": "user", "content": request.prompt}
        if request.images:
            user["images"] = list(request.images)
        return [{"role": "system", "content": request.system}, user]

    async def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        client = ollama.AsyncClient(host=self._host)
        logger.debug(f"Streaming from Ollama model {self._model}")
        try:
            stream = await client.chat(
                model=self._model,
                messages=self._messages(request),
                stream=True,
            )
            async for chunk in stream:
                content = chunk.get("message", {}).get("content", "")
                if content:
                    yield content
        except ollama.ResponseError as e:
            raise StreamFailure(f"Ollama error ({e.status_code}): {e.error}") from e
        except ConnectionError as e:
            raise StreamFailure(f"Could not connect to Ollama: {e}") from e
