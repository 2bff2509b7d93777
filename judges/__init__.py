"""Judging system implementations."""

from .base import (
    BaseJudge,
    JudgeDecision,
    CriterionScore,
    MessageScore,
    ScoringCriterion,
)
from .heuristic import evaluate_message, score_message
from .heuristic_judge import HeuristicJudge
from .verdict import decide_winner

__all__ = [
    "BaseJudge",
    "JudgeDecision",
    "CriterionScore",
    "MessageScore",
    "ScoringCriterion",
    "HeuristicJudge",
    "evaluate_message",
    "score_message",
    "decide_winner",
]
