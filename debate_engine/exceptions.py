"""Exceptions raised by the debate engine."""


class DebateError(Exception):
    """Base exception for debate engine errors."""


class InvalidStartError(DebateError):
    """Raised when a debate cannot be started (empty topic or already running)."""


class DurationLockedError(DebateError):
    """Raised when the duration is changed while a debate is running."""

    def __init__(self, message: str = "Duration can only be changed while no debate is running"):
        super().__init__(message)


class EmptyResponseError(DebateError):
    """Raised when a participant returns no usable text."""

    def __init__(self, participant: str):
        super().__init__(f"Participant {participant} returned an empty response")
        self.participant = participant


class TurnTimeoutError(DebateError):
    """Raised when a participant does not answer within the turn timeout."""

    def __init__(self, participant: str, timeout: float):
        super().__init__(f"Participant {participant} did not respond within {timeout:.1f}s")
        self.participant = participant
        self.timeout = timeout
