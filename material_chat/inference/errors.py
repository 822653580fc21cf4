"""Failure taxonomy for inference requests.

Every class here is converted into an assistant chat turn by the
inference client. None of them reach the session store or the UI.
"""

LOADING_MESSAGE = "Error: Model is currently loading. Please try again later."
NO_RESPONSE_MESSAGE = "Error: No response received from the server."


class InferenceError(Exception):
    """Base class for inference request failures."""

    def to_message(self) -> str:
        return f"Error: {self}"


class BackendWarmingUp(InferenceError):
    """Backend reported that the model is still loading. Retryable."""

    def to_message(self) -> str:
        return LOADING_MESSAGE


class BackendReportedError(InferenceError):
    """Backend answered with an error payload."""


class TransportError(InferenceError):
    """No response was received from the backend."""

    def to_message(self) -> str:
        return NO_RESPONSE_MESSAGE


class RequestSetupError(InferenceError):
    """The request could not be built or the response could not be read."""


class StreamInterruptedError(InferenceError):
    """A stream failed after it was opened."""
