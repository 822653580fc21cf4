from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Sidebar titles longer than this are truncated
TITLE_MAX_LENGTH = 15
TITLE_PREVIEW_LENGTH = 20


class Sender(str, Enum):
    """Author of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """A single message in a conversation.

    Turns are frozen once created. Streaming output is accumulated
    elsewhere and committed as a new turn when the stream closes.

    Attributes:
        sender: Who produced the message.
        message: The message text.
    """

    model_config = ConfigDict(frozen=True)

    sender: Sender
    message: str

    @classmethod
    def user(cls, message: str) -> "ChatTurn":
        return cls(sender=Sender.USER, message=message)

    @classmethod
    def assistant(cls, message: str) -> "ChatTurn":
        return cls(sender=Sender.ASSISTANT, message=message)


class Session(BaseModel):
    """An independent conversation thread.

    Attributes:
        id: Unique, monotonically assigned identifier.
        queries: Submitted query strings, most recent first.
        turns: Chat turns in the order they were appended.
        first_query: The first query submitted to this session, or "".
        pending: Whether a submission is currently in flight.
    """

    id: int = Field(..., ge=1)
    queries: list[str] = Field(default_factory=list)
    turns: list[ChatTurn] = Field(default_factory=list)
    first_query: str = ""
    pending: bool = False

    @property
    def title(self) -> str:
        """Label shown for this session in the sidebar."""
        if not self.first_query:
            return f"Session {self.id}"
        if len(self.first_query) > TITLE_MAX_LENGTH:
            return f"{self.first_query[:TITLE_PREVIEW_LENGTH]}..."
        return self.first_query
