"""Gemini provider using the OpenAI-compatible endpoint."""

from typing import TYPE_CHECKING

from .base_model_provider import BaseModelProvider

if TYPE_CHECKING:
    from config.settings import GeminiConfig


class GeminiProvider(BaseModelProvider):
    """Google Gemini model provider."""

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def provider_config(self) -> "GeminiConfig":
        return self.system_config.gemini

    def _resolve_api_key(self) -> str | None:
        return self.system_config.gemini.resolve_api_key()
