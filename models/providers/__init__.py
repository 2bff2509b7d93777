"""Model providers package."""

from .providers import ProviderFactory
from .gemini_provider import GeminiProvider
from .groq_provider import GroqProvider
from .base_model_provider import BaseModelProvider
from .exceptions import ProviderConfigurationError, ProviderError, ProviderRateLimitError

__all__ = [
    "ProviderFactory",
    "GeminiProvider",
    "GroqProvider",
    "BaseModelProvider",
    "ProviderError",
    "ProviderConfigurationError",
    "ProviderRateLimitError",
]
