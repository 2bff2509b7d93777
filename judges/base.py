"""Base classes and interfaces for judging systems."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Dict, List, Any
from dataclasses import dataclass, field
from enum import Enum

from debate_engine.models import DebateMessage, DebateSession


MAX_CRITERION_SCORE = 10
MAX_MESSAGE_SCORE = 50


class ScoringCriterion(Enum):
    """Rubric criteria applied to every message."""
    CLARITY = "clarity"
    DEPTH = "depth"
    EVIDENCE = "evidence"
    RELEVANCE = "relevance"
    PERSUASIVENESS = "persuasiveness"


@dataclass(frozen=True)
class CriterionScore:
    """Score for a single judging criterion."""
    criterion: ScoringCriterion
    score: int  # 0 to 10


@dataclass(frozen=True)
class MessageScore:
    """Per-criterion breakdown and capped total for one message."""
    criterion_scores: List[CriterionScore]

    @property
    def total(self) -> int:
        return min(sum(s.score for s in self.criterion_scores), MAX_MESSAGE_SCORE)

    def as_dict(self) -> Dict[str, int]:
        return {s.criterion.value: s.score for s in self.criterion_scores}


@dataclass
class JudgeDecision:
    """Complete judge decision for a finished debate."""
    winner_id: str
    winner_margin: int
    totals: Dict[str, int]
    criterion_totals: Dict[str, Dict[str, int]]
    overall_feedback: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseJudge(ABC):
    """Abstract base class for all judges."""

    def __init__(self, criteria: Sequence[str] | None = None):
        if criteria is None:
            self.criteria = list(ScoringCriterion)
        else:
            self.criteria = [ScoringCriterion(c) for c in criteria]

    @abstractmethod
    def score_message(
        self,
        message: str,
        history: Sequence[DebateMessage],
        topic: str,
        owner: str,
    ) -> MessageScore:
        """Score a single message against the history that preceded it."""
        pass

    @abstractmethod
    def evaluate_debate(self, session: DebateSession) -> JudgeDecision:
        """Evaluate a finished debate and return a decision."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Judge name/identifier."""
        pass
