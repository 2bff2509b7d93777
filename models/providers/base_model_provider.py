import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import httpx
from openai import APIStatusError, AsyncOpenAI, RateLimitError

from .exceptions import ProviderConfigurationError, ProviderError, ProviderRateLimitError

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletion
    from config.settings import SystemConfig, ModelConfig, ProviderConfig

logger = logging.getLogger(__name__)


class BaseModelProvider(ABC):
    """Abstract base class for OpenAI-compatible chat providers."""

    def __init__(self, system_config: "SystemConfig", client: AsyncOpenAI | None = None):
        self.system_config = system_config
        self._http_transport: httpx.AsyncBaseTransport | None = None
        self._client: AsyncOpenAI | None = client
        if self._client is None:
            self._client = self._create_client()

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        pass

    @property
    @abstractmethod
    def provider_config(self) -> "ProviderConfig":
        """Connection settings for this provider."""
        pass

    @abstractmethod
    def _resolve_api_key(self) -> str | None:
        """API key from config or environment."""
        pass

    def _create_client(self) -> AsyncOpenAI | None:
        api_key = self._resolve_api_key()
        if not api_key:
            logger.warning(
                f"No {self.provider_name} API key found. Set it in system settings or the environment."
            )
            return None

        settings = self.provider_config
        return AsyncOpenAI(
            base_url=settings.base_url,
            api_key=api_key,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def is_running(self) -> bool:
        """Fast reachability check against the provider's model listing."""
        api_key = self._resolve_api_key()
        if not api_key:
            return False

        url = f"{self.provider_config.base_url.rstrip('/')}/models"
        try:
            async with httpx.AsyncClient(timeout=2.0, transport=self._http_transport) as client:
                response = await client.get(url, headers={"Authorization": f"Bearer {api_key}"})
                response.raise_for_status()
                return True
        except Exception as e:
            logger.debug(f"{self.provider_name} health check failed: {e}")
            return False

    def validate_model_config(self, model_config: "ModelConfig") -> bool:
        """Validate that a model configuration is compatible with this provider."""
        return model_config.provider == self.provider_name

    def _build_params(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides: Any
    ) -> dict[str, Any]:
        return {
            "model": model_config.name,
            "messages": messages,
            "max_tokens": overrides.get("max_tokens", model_config.max_tokens),
            "temperature": overrides.get("temperature", model_config.temperature),
        }

    async def generate_response(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides: Any
    ) -> str:
        """Generate a chat completion and return its text."""
        if not self._client:
            raise ProviderConfigurationError(
                self.provider_name, "client not initialized - check API key"
            )

        params = self._build_params(model_config, messages, **overrides)

        try:
            response: "ChatCompletion" = await self._client.chat.completions.create(**params)
        except RateLimitError as e:
            retry_after = 60
            header = e.response.headers.get("retry-after") if e.response is not None else None
            if header and header.isdigit():
                retry_after = int(header)
            logger.warning(f"{self.provider_name} rate limited {model_config.name}: {e}")
            raise ProviderRateLimitError(self.provider_name, str(e), retry_after=retry_after) from e
        except APIStatusError as e:
            logger.error(
                f"{self.provider_name} generation failed for {model_config.name}: HTTP {e.status_code}"
            )
            raise ProviderError(self.provider_name, f"HTTP {e.status_code}: {e.message}") from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        if not content.strip():
            logger.warning(f"{self.provider_name} model {model_config.name} returned empty content")
        else:
            logger.debug(
                f"Generated {len(content)} chars from {self.provider_name} model {model_config.name}"
            )
        return content.strip()
