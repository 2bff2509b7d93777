"""Routes debater turns to the chat provider backing each debater."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TypeAlias

from config.settings import ModelConfig, SystemConfig

from .providers.base_model_provider import BaseModelProvider
from .providers.providers import ProviderFactory

MessageDict: TypeAlias = dict[str, str]
MessageList: TypeAlias = list[MessageDict]

logger = logging.getLogger(__name__)


class ModelManager:
    """Maps debater ids to model configs and lazily built providers.

    Providers are shared between debaters that use the same backend, so
    one OpenAI client serves every model of a given provider.
    """

    def __init__(self, system_config: SystemConfig):
        self._system_config = system_config
        self._debaters: dict[str, ModelConfig] = {}
        self._provider_cache: dict[str, BaseModelProvider] = {}
        self._call_counts: dict[str, int] = {}

    def _provider_for(self, backend: str) -> BaseModelProvider:
        provider = self._provider_cache.get(backend)
        if provider is None:
            provider = ProviderFactory.create_provider(backend, self._system_config)
            self._provider_cache[backend] = provider
        return provider

    def set_provider(self, provider_name: str, provider: BaseModelProvider) -> None:
        """Use an already constructed provider for ``provider_name``."""
        self._provider_cache[provider_name] = provider

    def register_model(self, model_id: str, config: ModelConfig) -> None:
        provider = self._provider_for(config.provider)
        if not provider.validate_model_config(config):
            logger.error(
                "Cannot register %s: %s does not serve provider %s",
                model_id,
                provider.provider_name,
                config.provider,
            )
            raise ValueError(f"Invalid model config for provider {config.provider}")

        self._debaters[model_id] = config
        self._call_counts.setdefault(model_id, 0)
        logger.info("Debater %s backed by %s/%s", model_id, config.provider, config.name)

    def get_model_config(self, model_id: str) -> ModelConfig:
        try:
            return self._debaters[model_id]
        except KeyError:
            raise ValueError(f"Model {model_id} not registered") from None

    @property
    def registered_models(self) -> list[str]:
        return list(self._debaters)

    def call_count(self, model_id: str) -> int:
        """Number of completions requested for ``model_id`` so far."""
        return self._call_counts.get(model_id, 0)

    async def generate_response(
        self, model_id: str, messages: MessageList, **overrides: object
    ) -> str:
        """Ask the debater's model for one completion and return its text."""
        config = self.get_model_config(model_id)
        provider = self._provider_for(config.provider)

        self._call_counts[model_id] = self._call_counts.get(model_id, 0) + 1
        started = time.perf_counter()
        text = await provider.generate_response(config, messages, **overrides)
        logger.debug(
            "%s answered in %.2fs (%d chars)",
            model_id,
            time.perf_counter() - started,
            len(text),
        )
        return text

    @asynccontextmanager
    async def model_session(self, model_id: str) -> AsyncIterator[ModelManager]:
        """Scope a single turn for ``model_id``; fails fast for unknown debaters."""
        self.get_model_config(model_id)
        logger.debug("Turn session opened for %s", model_id)
        try:
            yield self
        finally:
            logger.debug("Turn session closed for %s", model_id)
