"""Groq provider using the OpenAI-compatible endpoint."""

from typing import TYPE_CHECKING, Any

from .base_model_provider import BaseModelProvider

if TYPE_CHECKING:
    from config.settings import GroqConfig, ModelConfig


class GroqProvider(BaseModelProvider):
    """Groq model provider."""

    @property
    def provider_name(self) -> str:
        return "groq"

    @property
    def provider_config(self) -> "GroqConfig":
        return self.system_config.groq

    def _resolve_api_key(self) -> str | None:
        return self.system_config.groq.resolve_api_key()

    def _build_params(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides: Any
    ) -> dict[str, Any]:
        params = super()._build_params(model_config, messages, **overrides)
        params["top_p"] = overrides.get("top_p", model_config.top_p)
        params["frequency_penalty"] = 0
        params["presence_penalty"] = 0
        params["n"] = 1
        return params
