"""Session store: the chat state for one page and the submission workflow.

Owns every piece of mutable chat state (the sessions, the active
session id, the pending input and the partial streaming response) so
the UI only renders and forwards user actions.
"""

import itertools
import logging
from collections.abc import Callable

from material_chat.inference.client import InferenceClient
from material_chat.models.schemas import ChatTurn, Session

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class EmptyInputError(ValueError):
    """Raised when a blank query is submitted."""

    def __init__(self) -> None:
        super().__init__("Input cannot be empty")


class SessionBusyError(RuntimeError):
    """Raised when a session already has a submission in flight."""

    def __init__(self, session_id: int) -> None:
        super().__init__(f"Session {session_id} is still waiting for a response")
        self.session_id = session_id


class SessionStore:
    """Manages chat sessions for a single page.

    Responsibilities:
    - Create sessions and track which one is active
    - Submit queries through the inference client
    - Hold the pending input and the live streaming buffer
    - Notify listeners whenever state changes
    """

    def __init__(self, client: InferenceClient) -> None:
        """Initialize the store with one default, active session.

        Args:
            client: Inference client used for every submission.
        """
        self._client = client
        self._ids = itertools.count(1)
        self._sessions: dict[int, Session] = {}
        self._listeners: list[Listener] = []
        self._partials: dict[int, str] = {}
        self.pending_input: str = ""
        self.active_id: int = self.create_session()

    @property
    def sessions(self) -> list[Session]:
        """All sessions in creation order."""
        return list(self._sessions.values())

    @property
    def active_session(self) -> Session:
        return self._sessions[self.active_id]

    @property
    def partial_response(self) -> str:
        """Streamed text not yet committed for the active session."""
        return self._partials.get(self.active_id, "")

    def get_session(self, session_id: int) -> Session | None:
        return self._sessions.get(session_id)

    def subscribe(self, listener: Listener) -> None:
        """Register a callback run after every state change."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def create_session(self) -> int:
        """Create an empty session and make it active.

        Returns:
            The new session id, greater than every existing one.
        """
        session = Session(id=next(self._ids))
        self._sessions[session.id] = session
        self.active_id = session.id
        logger.info(f"Created session {session.id}")
        self._notify()
        return session.id

    def select_session(self, session_id: int) -> None:
        """Make ``session_id`` active. Unknown ids are ignored."""
        if session_id not in self._sessions:
            logger.debug(f"Ignoring selection of unknown session {session_id}")
            return
        self.active_id = session_id
        self._notify()

    def _append_fragment(self, session_id: int, fragment: str) -> None:
        self._partials[session_id] = self._partials.get(session_id, "") + fragment
        self._notify()

    async def submit_query(self, text: str) -> ChatTurn:
        """Send ``text`` to the backend from the active session.

        The user turn is appended immediately and the assistant turn once
        the client returns, both to the session that was active at
        submission time.

        Args:
            text: The user's query.

        Returns:
            The assistant turn appended to the session.

        Raises:
            EmptyInputError: If ``text`` is blank.
            SessionBusyError: If the session is still waiting on a response.
        """
        if not text.strip():
            raise EmptyInputError()

        session = self.active_session
        if session.pending:
            raise SessionBusyError(session.id)

        session.pending = True
        session.turns.append(ChatTurn.user(text))
        self._notify()

        try:
            reply = await self._client.complete(
                text, on_fragment=lambda fragment: self._append_fragment(session.id, fragment)
            )
        except Exception as e:
            # The user turn is already appended and must get its reply
            logger.exception(f"Unexpected failure answering session {session.id}")
            reply = ChatTurn.assistant(f"Error: {e}")
        finally:
            session.pending = False
            self._partials.pop(session.id, None)

        session.turns.append(reply)
        session.queries.insert(0, text)
        if not session.first_query:
            session.first_query = text
        self.pending_input = ""
        logger.info(f"Session {session.id} now has {len(session.turns)} turns")
        self._notify()
        return reply
