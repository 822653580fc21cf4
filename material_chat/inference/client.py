"""Inference client: one prompt in, one assistant turn out.

The client never raises. Every failure path, from a model that is
still loading to a stream cut off halfway, resolves to an assistant
``ChatTurn`` whose message tells the user what went wrong.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from material_chat.inference.backends import FragmentStream, create_backend
from material_chat.inference.config import InferenceConfig, get_inference_config
from material_chat.inference.errors import InferenceError
from material_chat.inference.retry import Sleep, retry_while_warming_up
from material_chat.models.schemas import ChatTurn

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InferenceClient:
    """Sends prompts to the configured backend with bounded retries.

    Wraps a backend with:
    - Retry while the model is warming up (opening only, for streams)
    - Conversion of every failure into a displayable assistant turn
    - Incremental fragment delivery for the streaming backend
    """

    def __init__(
        self,
        config: InferenceConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the inference client.

        Args:
            config: Optional inference configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport for the backend.
            sleep: Awaitable used for the retry delay.
        """
        self._config = config or get_inference_config()
        self._backend = create_backend(self._config, transport=transport)
        self._sleep = sleep

    @property
    def streaming(self) -> bool:
        """Whether the configured backend delivers fragments incrementally."""
        return self._config.backend == "stream"

    async def _with_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await retry_while_warming_up(
            operation,
            max_attempts=self._config.max_attempts,
            delay=self._config.retry_delay,
            sleep=self._sleep,
        )

    async def fetch_completion(self, prompt: str) -> ChatTurn:
        """Get the complete response for a prompt.

        Args:
            prompt: The user's message.

        Returns:
            Assistant turn carrying either the trimmed generated text or
            an error message.
        """
        try:
            text = await self._with_retry(lambda: self._backend.complete(prompt))
        except InferenceError as e:
            logger.warning(f"Inference failed ({type(e).__name__}): {e}")
            return ChatTurn.assistant(e.to_message())

        logger.debug(f"Received {len(text)} characters from {self._config.backend} backend")
        return ChatTurn.assistant(text.strip())

    async def stream_completion(
        self,
        prompt: str,
        on_fragment: Callable[[str], None],
    ) -> ChatTurn:
        """Stream a response, reporting each fragment as it arrives.

        Retries apply to opening the stream only. If the stream breaks
        after fragments arrived, the partial text is kept and an error
        marker is appended.

        Args:
            prompt: The user's message.
            on_fragment: Called with every received text fragment.

        Returns:
            Assistant turn with the accumulated text or an error message.
        """
        try:
            stream: FragmentStream = await self._with_retry(
                lambda: self._backend.open_stream(prompt)
            )
        except InferenceError as e:
            logger.warning(f"Could not open stream ({type(e).__name__}): {e}")
            return ChatTurn.assistant(e.to_message())

        accumulated = ""
        try:
            async for fragment in stream:
                accumulated += fragment
                on_fragment(fragment)
        except InferenceError as e:
            logger.warning(f"Stream interrupted after {len(accumulated)} characters: {e}")
            if not accumulated.strip():
                return ChatTurn.assistant(e.to_message())
            return ChatTurn.assistant(f"{accumulated.strip()}\n\n[Error: {e}]")

        return ChatTurn.assistant(accumulated.strip())

    async def complete(
        self,
        prompt: str,
        on_fragment: Callable[[str], None] | None = None,
    ) -> ChatTurn:
        """Dispatch to streaming or blocking mode based on the backend."""
        if self.streaming and on_fragment is not None:
            return await self.stream_completion(prompt, on_fragment)
        return await self.fetch_completion(prompt)
