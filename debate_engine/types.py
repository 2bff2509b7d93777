"""Shared types and enums for the debate engine."""

from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any, TypeAlias, TypedDict


TIE = "tie"


class DebateStartedEventData(TypedDict):
    """Data structure for debate_started event callbacks."""

    session_id: str
    topic: str
    duration_seconds: int
    stances: dict[str, str]


class MessageEventData(TypedDict):
    """Data structure for new_message event callbacks."""

    participant: str
    stance: str | None
    content: str
    kind: str
    round_number: int
    timestamp: str
    score: int
    criteria: dict[str, int]
    counted: bool


class TurnFailedEventData(TypedDict):
    """Data structure for turn_failed event callbacks."""

    participant: str
    round_number: int
    exception_type: str
    exception_message: str


class TimeTickEventData(TypedDict):
    time_remaining_seconds: int


class DebateCompletedEventData(TypedDict):
    """Data structure for debate_completed event callbacks.

    ``winner`` is a participant id or ``TIE``. The web layer adds a
    ``transcript_id`` key before relaying it to clients.
    """

    session_id: str
    winner: str
    scores: dict[str, int]
    message_count: int
    feedback: str


EventData: TypeAlias = (
    DebateStartedEventData
    | MessageEventData
    | TurnFailedEventData
    | TimeTickEventData
    | DebateCompletedEventData
)
EventCallback: TypeAlias = Callable[[str, Mapping[str, Any]], Awaitable[None]]


class Stance(Enum):
    """Side a participant argues for the debate topic."""

    FAVOR = "favor"
    OPPOSE = "oppose"

    @property
    def opposite(self) -> "Stance":
        return Stance.OPPOSE if self is Stance.FAVOR else Stance.FAVOR


class MessageKind(Enum):
    """Origin of a message."""

    USER = "user"
    AI = "ai"


class EngineState(Enum):
    """Lifecycle state of the turn engine."""

    IDLE = "idle"
    RUNNING = "running"
