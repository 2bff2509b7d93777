"""Rubric-based judge built on the heuristic scorer."""

import logging
from collections.abc import Sequence
from typing import Dict

from debate_engine.models import DebateMessage, DebateSession
from debate_engine.types import TIE
from .base import BaseJudge, JudgeDecision, MessageScore, ScoringCriterion
from .heuristic import evaluate_message
from .verdict import decide_winner

logger = logging.getLogger(__name__)


class HeuristicJudge(BaseJudge):
    """Judge that scores each message with the heuristic rubric.

    By default all five criteria count; a ``criteria`` subset limits both the
    per-message totals and the criterion breakdown of the final decision.
    """

    @property
    def name(self) -> str:
        return "Heuristic Judge"

    def score_message(
        self,
        message: str,
        history: Sequence[DebateMessage],
        topic: str,
        owner: str,
    ) -> MessageScore:
        result = evaluate_message(message, history, topic, owner)
        if len(self.criteria) < len(ScoringCriterion):
            result = MessageScore(
                criterion_scores=[
                    score for score in result.criterion_scores if score.criterion in self.criteria
                ]
            )
        logger.debug(f"Scored {owner} message: {result.as_dict()} -> {result.total}")
        return result

    def evaluate_debate(self, session: DebateSession) -> JudgeDecision:
        """Summarize a finished debate from the scores recorded on its messages."""
        totals = dict(session.scores)
        winner = session.winner or decide_winner(totals)

        criterion_totals: Dict[str, Dict[str, int]] = {
            participant: {criterion.value: 0 for criterion in self.criteria}
            for participant in session.participants
        }
        for message in session.messages:
            if not message.counted:
                continue
            breakdown = criterion_totals.setdefault(message.participant, {})
            for criterion in self.criteria:
                breakdown[criterion.value] = breakdown.get(criterion.value, 0) + message.criteria.get(
                    criterion.value, 0
                )

        ordered = sorted(totals.values(), reverse=True)
        margin = ordered[0] - ordered[1] if len(ordered) > 1 else 0

        if winner == TIE:
            feedback = f"It's a tie! ({self._format_totals(totals)})"
        else:
            feedback = f"{winner} won the debate! ({self._format_totals(totals)})"

        return JudgeDecision(
            winner_id=winner,
            winner_margin=margin,
            totals=totals,
            criterion_totals=criterion_totals,
            overall_feedback=feedback,
            metadata={
                "judge": self.name,
                "message_count": len(session.messages),
                "rounds": session.round_number,
            },
        )

    @staticmethod
    def _format_totals(totals: Dict[str, int]) -> str:
        return " - ".join(str(total) for total in totals.values())
