from pydantic import BaseModel


class DebateResponse(BaseModel):
    """Response model for debate information."""

    id: str
    status: str
    topic: str | None = None
    participants: list[str]
    display_names: dict[str, str]
    stances: dict[str, str] = {}
    scores: dict[str, int] = {}
    winner: str | None = None
    duration_minutes: int
    time_remaining_seconds: int
    round_number: int = 0
    message_count: int = 0
    transcript_id: int | None = None
