"""Test package for materiAl chat.

Structure:
    - unit/: Session store, inference client, backends, retry and config
    - integration/: FastAPI host exercised over ASGI

Backends are exercised against httpx.MockTransport; no network access.
Leverages pytest with pytest-check for soft assertions.
"""
