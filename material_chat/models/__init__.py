"""Pydantic models for chat state.

Provides type safety and validation for the conversation data.

Models:
    - Sender: Who produced a turn (user or assistant)
    - ChatTurn: Individual immutable message in a conversation
    - Session: Independent conversation thread with its own history
"""

from material_chat.models.schemas import ChatTurn, Sender, Session

__all__ = ["ChatTurn", "Sender", "Session"]
