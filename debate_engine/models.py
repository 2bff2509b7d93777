"""Data models for the debate engine."""

from typing import Any
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from .types import MessageEventData, MessageKind, Stance


@dataclass(frozen=True)
class DebateMessage:
    """A single message in the debate."""

    participant: str
    content: str
    kind: MessageKind = MessageKind.AI
    stance: Stance | None = None
    round_number: int = 0
    score: int = 0
    criteria: dict[str, int] = field(default_factory=dict)
    counted: bool = True
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> MessageEventData:
        return {
            "participant": self.participant,
            "stance": self.stance.value if self.stance else None,
            "content": self.content,
            "kind": self.kind.value,
            "round_number": self.round_number,
            "timestamp": self.timestamp.isoformat(),
            "score": self.score,
            "criteria": dict(self.criteria),
            "counted": self.counted,
        }


@dataclass
class DebateSession:
    """Full state of one debate, owned and mutated by the engine only."""

    topic: str
    duration_seconds: int
    participants: tuple[str, ...]
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    time_remaining_seconds: int = -1
    is_active: bool = False
    stances: dict[str, Stance] = field(default_factory=dict)
    messages: list[DebateMessage] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)
    winner: str | None = None
    round_number: int = 0
    started_at: datetime | None = None
    ended_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.scores:
            self.scores = {participant: 0 for participant in self.participants}
        if self.time_remaining_seconds < 0:
            self.time_remaining_seconds = self.duration_seconds

    def messages_for(self, participant: str) -> list[DebateMessage]:
        """Messages produced by one participant, in conversation order."""
        return [msg for msg in self.messages if msg.participant == participant]

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "topic": self.topic,
            "duration_seconds": self.duration_seconds,
            "time_remaining_seconds": self.time_remaining_seconds,
            "is_active": self.is_active,
            "participants": list(self.participants),
            "stances": {pid: stance.value for pid, stance in self.stances.items()},
            "scores": dict(self.scores),
            "winner": self.winner,
            "round_number": self.round_number,
            "message_count": len(self.messages),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
        }
