"""Integration tests for the FastAPI host with real HTTP requests over ASGI."""
