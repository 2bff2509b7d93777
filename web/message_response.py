from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Response model for debate messages."""

    participant: str
    stance: str | None
    kind: str
    round_number: int
    content: str
    timestamp: str
    score: int
    criteria: dict[str, int]
    counted: bool
    word_count: int
