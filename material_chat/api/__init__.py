"""FastAPI host for the chat interface.

The NiceGUI page is mounted onto this application.

Endpoints:
    - GET /health: Service health status
"""
