"""Configuration settings and data models."""

import os
from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, Field, field_validator
import yaml
from pathlib import Path


VALID_PROVIDERS = {"gemini", "groq"}


class ModelConfig(BaseModel):
    """Configuration for a debating model."""

    name: str = Field(..., description="Model name (e.g., 'gemini-2.0-flash', 'llama-3.3-70b-versatile')")
    provider: str = Field(default="groq", description="Model provider (gemini, groq)")
    display_name: Optional[str] = Field(default=None, description="Name shown in prompts and transcripts")
    max_tokens: int = Field(default=1000, description="Maximum tokens per response")
    temperature: float = Field(default=0.7, description="Model temperature")
    top_p: float = Field(default=1.0, description="Nucleus sampling cutoff")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_PROVIDERS:
            raise ValueError(f"Provider must be one of: {VALID_PROVIDERS}")
        return v


class DebateConfig(BaseModel):
    """Debate timing and flow configuration."""

    topic: str = Field(default="", description="Default debate topic")
    duration_minutes: int = Field(default=2, description="Default time budget in minutes")
    duration_choices: List[int] = Field(
        default=[1, 2, 3, 5, 10], description="Durations a user may pick, in minutes"
    )
    warmup_delay: float = Field(default=1.0, description="Seconds before the first round")
    turn_delay: float = Field(default=3.0, description="Seconds between the two turns of a round")
    round_delay: float = Field(default=10.0, description="Seconds between rounds")
    tick_interval: float = Field(default=1.0, description="Wall-clock seconds per countdown tick")
    turn_timeout: float = Field(default=60.0, description="Seconds before a model call counts as failed")
    turn_retries: int = Field(default=0, description="Extra attempts for a failed model call")
    retry_backoff: float = Field(default=2.0, description="Seconds added to the wait after each failed attempt")

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("duration_minutes must be positive")
        return v

    @field_validator("turn_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("turn_retries cannot be negative")
        return v


class ProviderConfig(BaseModel):
    """Connection settings shared by the OpenAI-compatible providers."""

    api_key: Optional[str] = Field(default=None, description="API key (falls back to the provider env var)")
    base_url: str = Field(..., description="OpenAI-compatible API base URL")
    timeout: float = Field(default=60.0, description="API request timeout in seconds")
    max_retries: int = Field(default=2, description="Maximum number of client-level retries")


class GeminiConfig(ProviderConfig):
    """Gemini-specific configuration."""

    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="Gemini OpenAI-compatible endpoint",
    )

    def resolve_api_key(self) -> Optional[str]:
        return self.api_key or os.getenv("GEMINI_API_KEY")


class GroqConfig(ProviderConfig):
    """Groq-specific configuration."""

    base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Groq OpenAI-compatible endpoint"
    )

    def resolve_api_key(self) -> Optional[str]:
        return self.api_key or os.getenv("GROQ_API_KEY")


class SystemConfig(BaseModel):
    """System-wide configuration."""

    gemini: GeminiConfig = Field(default_factory=GeminiConfig, description="Gemini settings")
    groq: GroqConfig = Field(default_factory=GroqConfig, description="Groq settings")

    save_transcripts: bool = Field(
        default=True, description="Save finished debates to the transcript database"
    )
    transcript_dir: str = Field(
        default="transcripts", description="Directory holding the transcript database"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


class AppConfig(BaseModel):
    """Complete application configuration."""

    debate: DebateConfig
    models: Dict[str, ModelConfig]
    system: SystemConfig

    @field_validator("models")
    @classmethod
    def validate_models(cls, v: Dict[str, ModelConfig]) -> Dict[str, ModelConfig]:
        if len(v) != 2:
            raise ValueError(f"Exactly two debating models are required, got {len(v)}")
        return v

    @property
    def participant_ids(self) -> list[str]:
        """Participant IDs in speaking order; the first one opens every round."""
        return list(self.models.keys())

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        import json

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        required_sections = ["debate", "models", "system"]
        missing_sections = [
            section for section in required_sections if section not in data
        ]
        if missing_sections:
            raise ValueError(f"Missing required config sections: {missing_sections}")

        if not data.get("models"):
            raise ValueError("Config must include two models in 'models' section")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
            )


def get_default_config() -> AppConfig:
    """Load default configuration from debate_config.json, creating it if needed."""
    config_path = Path("debate_config.json")
    if not config_path.exists():
        example_path = Path("debate_config.example.json")
        if example_path.exists():
            import shutil
            shutil.copy2(example_path, config_path)
        else:
            template_config = get_template_config()
            import json
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(template_config.model_dump(exclude_unset=True), f, indent=2)
    return AppConfig.load_from_file(config_path)


def get_template_config() -> AppConfig:
    """Get template configuration for config file generation."""
    return AppConfig(
        debate=DebateConfig(
            topic="Should artificial intelligence be regulated by government oversight?",
            duration_minutes=2,
            duration_choices=[1, 2, 3, 5, 10],
            warmup_delay=1.0,
            turn_delay=3.0,
            round_delay=10.0,
            tick_interval=1.0,
            turn_timeout=60.0,
            turn_retries=0,
        ),
        models={
            "gemini": ModelConfig(
                name="gemini-2.0-flash",
                provider="gemini",
                display_name="Gemini",
                max_tokens=1000,
                temperature=0.7,
            ),
            "groq": ModelConfig(
                name="llama-3.3-70b-versatile",
                provider="groq",
                display_name="Groq",
                max_tokens=1000,
                temperature=0.7,
                top_p=1.0,
            ),
        },
        system=SystemConfig(
            gemini=GeminiConfig(
                api_key=None,  # or GEMINI_API_KEY
                timeout=60.0,
                max_retries=2,
            ),
            groq=GroqConfig(
                api_key=None,  # or GROQ_API_KEY
                timeout=60.0,
                max_retries=2,
            ),
            save_transcripts=True,
            transcript_dir="transcripts",
            log_level="INFO",
        ),
    )
