"""Chat session management.

Keeps independent conversation sessions, tracks the active one, and
runs each submission through the inference client.
"""

from material_chat.session.store import EmptyInputError, SessionBusyError, SessionStore

__all__ = ["EmptyInputError", "SessionBusyError", "SessionStore"]
