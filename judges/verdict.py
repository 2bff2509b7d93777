"""Winner determination from cumulative scores."""

from collections.abc import Mapping

from debate_engine.types import TIE


def decide_winner(scores: Mapping[str, int]) -> str:
    """Return the participant with the strictly highest total, or ``"tie"``."""
    if not scores:
        return TIE

    best = max(scores.values())
    leaders = [participant for participant, total in scores.items() if total == best]
    if len(leaders) > 1:
        return TIE
    return leaders[0]
