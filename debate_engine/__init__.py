"""Debate orchestration and flow management.

The turn engine lives in ``debate_engine.core`` and is imported from there;
it depends on ``judges``, which in turn builds on the models exported here.
"""

from .types import TIE, EngineState, MessageKind, Stance
from .models import DebateMessage, DebateSession
from .exceptions import (
    DebateError,
    DurationLockedError,
    EmptyResponseError,
    InvalidStartError,
    TurnTimeoutError,
)
from .stances import assign_stances
from .prompt_builder import PromptBuilder

__all__ = [
    "TIE",
    "EngineState",
    "MessageKind",
    "Stance",
    "DebateMessage",
    "DebateSession",
    "DebateError",
    "DurationLockedError",
    "EmptyResponseError",
    "InvalidStartError",
    "TurnTimeoutError",
    "assign_stances",
    "PromptBuilder",
]
