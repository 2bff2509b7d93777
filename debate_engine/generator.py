"""Argument generation: the collaborator the turn engine calls for each turn."""

import logging
from collections.abc import Sequence
from typing import Protocol

from config.settings import AppConfig
from models.manager import ModelManager
from .exceptions import EmptyResponseError
from .models import DebateMessage
from .prompt_builder import PromptBuilder
from .types import Stance

logger = logging.getLogger(__name__)


class ArgumentGenerator(Protocol):
    """Produces the next argument for a participant; may raise on failure."""

    async def __call__(
        self,
        participant: str,
        stance: Stance,
        topic: str,
        history: Sequence[DebateMessage],
    ) -> str: ...


class ModelArgumentGenerator:
    """Generates arguments by prompting the participant's registered model."""

    def __init__(self, model_manager: ModelManager, prompt_builder: PromptBuilder):
        self.model_manager = model_manager
        self.prompt_builder = prompt_builder

    async def __call__(
        self,
        participant: str,
        stance: Stance,
        topic: str,
        history: Sequence[DebateMessage],
    ) -> str:
        messages = self.prompt_builder.build_messages(participant, stance, topic, history)

        async with self.model_manager.model_session(participant):
            response = await self.model_manager.generate_response(participant, messages)

        text = response.strip()
        if not text:
            raise EmptyResponseError(participant)
        logger.debug(f"{participant} produced {len(text.split())} words")
        return text


def build_model_generator(config: AppConfig) -> ModelArgumentGenerator:
    """Register both debaters with a fresh ModelManager and wrap it as a generator."""
    model_manager = ModelManager(config.system)
    for model_id, model_config in config.models.items():
        model_manager.register_model(model_id, model_config)

    display_names = {
        model_id: model_config.display_name or model_id
        for model_id, model_config in config.models.items()
    }
    return ModelArgumentGenerator(model_manager, PromptBuilder(display_names))
