"""Pytest fixtures and shared test configuration.

Fixtures:
    - hosted_config / local_config / stream_config: backend configurations
    - sleep_recorder: fake retry sleep that records requested delays
    - async_client: HTTPX client for API testing
"""

import json
from collections.abc import AsyncGenerator, Iterable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from material_chat.api.app import create_app
from material_chat.inference.config import InferenceConfig

LOADING_ERROR = {"error": "Model microsoft/Phi-3-mini-4k-instruct is currently loading"}


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers every delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def sequence_transport(
    responses: Iterable[httpx.Response | Exception],
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Mock transport answering each request with the next response.

    Exceptions in ``responses`` are raised instead of answered.
    """
    pending = iter(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        outcome = next(pending)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return httpx.MockTransport(handler)


def ndjson(*objects: dict) -> bytes:
    return b"".join(json.dumps(obj).encode() + b"\n" for obj in objects)


def chat_chunk(content: str, done: bool = False) -> dict:
    return {"message": {"role": "assistant", "content": content}, "done": done}


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def hosted_config() -> InferenceConfig:
    return InferenceConfig(
        backend="hosted",
        endpoint="https://inference.test/models/phi",
        api_key="hf-test-token",
        retry_delay=2.0,
        max_attempts=3,
    )


@pytest.fixture
def local_config() -> InferenceConfig:
    return InferenceConfig(
        backend="local",
        endpoint="http://ollama.test/api/generate",
        api_key="",
        model_name="llama3",
        response_format="json",
        retry_delay=1.0,
        max_attempts=3,
    )


@pytest.fixture
def stream_config() -> InferenceConfig:
    return InferenceConfig(
        backend="stream",
        endpoint="http://ollama.test/api/chat",
        api_key="",
        model_name="llama3",
        retry_delay=1.0,
        max_attempts=3,
    )


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
