"""HTTP backends for language-model inference.

Each backend speaks one wire protocol and translates every failure into
the taxonomy in ``material_chat.inference.errors``:

- ``HostedBackend``: hosted inference API, ``{inputs, parameters}`` in,
  ``[{"generated_text": ...}]`` out, bearer credential.
- ``LocalGenerateBackend``: local generation server, ``{model, prompt,
  format, stream: false}`` in, ``{"response": ...}`` out.
- ``StreamingChatBackend``: local chat runtime, ``{model, messages,
  stream: true}`` in, newline-delimited JSON fragments out.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack
from typing import Any, Protocol

import httpx

from material_chat.inference.config import InferenceConfig
from material_chat.inference.errors import (
    BackendReportedError,
    BackendWarmingUp,
    InferenceError,
    RequestSetupError,
    StreamInterruptedError,
    TransportError,
)

logger = logging.getLogger(__name__)

WARMING_UP_MARKERS = ("currently loading",)


def _is_warming_up(detail: str) -> bool:
    lowered = detail.lower()
    return any(marker in lowered for marker in WARMING_UP_MARKERS)


def _error_detail(response: httpx.Response) -> str:
    """Pull the backend's error text out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP {response.status_code}"


def _raise_for_backend_error(response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = _error_detail(response)
    if _is_warming_up(detail):
        raise BackendWarmingUp(detail)
    raise BackendReportedError(detail)


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise RequestSetupError(
            f"Unexpected response format: {field} is {type(value).__name__}, not str"
        )
    return value


def _translate_httpx_error(error: httpx.HTTPError) -> InferenceError:
    # UnsupportedProtocol subclasses TransportError but is a local mistake
    if isinstance(error, httpx.UnsupportedProtocol):
        return RequestSetupError(str(error))
    if isinstance(error, httpx.TransportError):
        return TransportError(str(error))
    return RequestSetupError(str(error))


class CompletionBackend(Protocol):
    async def complete(self, prompt: str) -> str: ...


class StreamingBackend(Protocol):
    async def open_stream(self, prompt: str) -> "FragmentStream": ...


class _HTTPBackend:
    """Shared request plumbing for the JSON-over-HTTP backends."""

    def __init__(
        self,
        config: InferenceConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            config: Inference configuration.
            transport: Optional httpx transport, used by tests.
        """
        self._config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport)

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _payload(self, prompt: str) -> dict[str, Any]:
        raise NotImplementedError

    def _extract_text(self, data: Any) -> str:
        raise NotImplementedError

    async def complete(self, prompt: str) -> str:
        """Send one blocking request and return the generated text.

        Raises:
            InferenceError: Any failure, classified by kind.
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    self._config.endpoint,
                    json=self._payload(prompt),
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            raise _translate_httpx_error(e) from e
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestSetupError(str(e)) from e

        _raise_for_backend_error(response)

        try:
            return self._extract_text(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RequestSetupError(f"Unexpected response format: {e}") from e


class HostedBackend(_HTTPBackend):
    """Hosted inference API with bearer authentication."""

    def _headers(self) -> dict[str, str]:
        return {
            **super()._headers(),
            "Authorization": f"Bearer {self._config.api_key}",
        }

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "inputs": prompt,
            "parameters": {"max_length": self._config.max_length},
        }

    def _extract_text(self, data: Any) -> str:
        return _require_text(data[0]["generated_text"], "generated_text")


class LocalGenerateBackend(_HTTPBackend):
    """Local generation endpoint returning the whole response at once."""

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._config.model_name,
            "prompt": prompt,
            "format": self._config.response_format,
            "stream": False,
        }

    def _extract_text(self, data: Any) -> str:
        return _require_text(data["response"], "response")


def _fragment_content(data: dict[str, Any]) -> str:
    """Return ``message.content`` of one stream object ("" when absent)."""
    message = data.get("message")
    if message is None:
        return ""
    if not isinstance(message, dict):
        raise StreamInterruptedError(
            f"Malformed stream data: message is {type(message).__name__}, not an object"
        )
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise StreamInterruptedError(
            f"Malformed stream data: content is {type(content).__name__}, not str"
        )
    return content


class FragmentStream:
    """A lazy, finite, single-use sequence of text fragments.

    Owns the open HTTP response. Iterating it yields ``message.content``
    fragments until the backend sends ``done``; the connection is closed
    when iteration ends, fails, or ``aclose`` is called.
    """

    def __init__(self, stack: AsyncExitStack, response: httpx.Response) -> None:
        self._stack = stack
        self._response = response
        self._consumed = False

    async def aclose(self) -> None:
        await self._stack.aclose()

    async def __aiter__(self) -> AsyncIterator[str]:
        if self._consumed:
            raise RuntimeError("FragmentStream can only be iterated once")
        self._consumed = True
        try:
            async for line in self._response.aiter_lines():
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except ValueError as e:
                    raise StreamInterruptedError(f"Malformed stream data: {e}") from e
                if not isinstance(data, dict):
                    raise StreamInterruptedError(
                        f"Malformed stream data: expected an object, got {type(data).__name__}"
                    )
                if data.get("error"):
                    raise StreamInterruptedError(str(data["error"]))
                content = _fragment_content(data)
                if content:
                    yield content
                if data.get("done"):
                    return
        except httpx.HTTPError as e:
            raise StreamInterruptedError(f"Connection lost: {e}") from e
        finally:
            await self.aclose()


class StreamingChatBackend(_HTTPBackend):
    """Local chat runtime streaming newline-delimited JSON fragments."""

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._config.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "stream": True,
        }

    async def complete(self, prompt: str) -> str:
        stream = await self.open_stream(prompt)
        return "".join([fragment async for fragment in stream])

    async def open_stream(self, prompt: str) -> FragmentStream:
        """Open the streaming channel.

        Only failures before the first fragment are raised here, so the
        caller can retry opening without ever replaying fragments.

        Raises:
            InferenceError: The stream could not be opened.
        """
        stack = AsyncExitStack()
        try:
            client = await stack.enter_async_context(self._client())
            response = await stack.enter_async_context(
                client.stream(
                    "POST",
                    self._config.endpoint,
                    json=self._payload(prompt),
                    headers=self._headers(),
                )
            )
            if not response.is_success:
                await response.aread()
                _raise_for_backend_error(response)
        except httpx.HTTPError as e:
            await stack.aclose()
            raise _translate_httpx_error(e) from e
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            await stack.aclose()
            raise RequestSetupError(str(e)) from e
        except InferenceError:
            await stack.aclose()
            raise

        logger.debug(f"Opened stream to {self._config.endpoint}")
        return FragmentStream(stack, response)


def create_backend(
    config: InferenceConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> _HTTPBackend:
    """Build the backend selected by ``config.backend``."""
    backends: dict[str, type[_HTTPBackend]] = {
        "hosted": HostedBackend,
        "local": LocalGenerateBackend,
        "stream": StreamingChatBackend,
    }
    return backends[config.backend](config, transport=transport)
