from typing import TYPE_CHECKING

from .base_model_provider import BaseModelProvider
from .gemini_provider import GeminiProvider
from .groq_provider import GroqProvider

if TYPE_CHECKING:
    from config.settings import SystemConfig


class ProviderFactory:
    """Builds chat providers from the names used in model configs."""

    _registry: dict[str, type[BaseModelProvider]] = {
        "gemini": GeminiProvider,
        "groq": GroqProvider,
    }

    @classmethod
    def create_provider(
        cls, provider_name: str, system_config: "SystemConfig"
    ) -> BaseModelProvider:
        provider_class = cls._registry.get(provider_name)
        if provider_class is None:
            known = ", ".join(cls.get_available_providers())
            raise ValueError(f"Unknown provider '{provider_name}' (known: {known})")
        return provider_class(system_config)

    @classmethod
    def get_available_providers(cls) -> list[str]:
        """Provider names in a stable, alphabetical order."""
        return sorted(cls._registry)
