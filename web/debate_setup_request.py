from pydantic import BaseModel, Field, field_validator
from config.settings import ModelConfig


class DebateSetupRequest(BaseModel):
    """Request model for creating a new debate arena."""

    models: dict[str, ModelConfig] | None = None
    duration_minutes: int | None = None

    @field_validator("models")
    @classmethod
    def validate_models(cls, v):
        """Exactly two debaters, when overridden."""
        if v is None:
            return v
        if len(v) != 2:
            raise ValueError(f"Exactly two debating models are required, got {len(v)}")
        return v


class StartDebateRequest(BaseModel):
    """Request model for starting a debate in an existing arena."""

    topic: str = Field(min_length=1)
    duration_minutes: int | None = Field(default=None, gt=0)


class DurationRequest(BaseModel):
    """Request model for changing the arena's debate duration."""

    minutes: int
