"""materiAl chat - single-page chat interface for language-model backends.

Combines NiceGUI for the chat page, httpx for talking to inference
backends, tenacity for bounded retries, and Pydantic for data validation.

Components:
    - session: conversation sessions and the submission workflow
    - inference: backend clients, retry policy and error taxonomy
    - ui: web interface for chat interactions
    - api: FastAPI host the interface is mounted on
    - models: chat turn and session schemas
"""

__version__ = "0.1.0"
