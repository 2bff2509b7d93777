"""Deterministic pattern-matching rubric for debate messages.

Every criterion counts case-insensitive marker occurrences and is capped at
10 points; the five criteria together are capped at 50. The functions are
pure: the same message, history, topic and owner always give the same score.
"""

import re
from collections.abc import Sequence

from debate_engine.models import DebateMessage
from .base import (
    MAX_CRITERION_SCORE,
    CriterionScore,
    MessageScore,
    ScoringCriterion,
)


CLARITY_MARKERS = re.compile(
    r"first|second|third|finally|in conclusion|therefore|thus|as a result"
    r"|however|on the other hand|although",
    re.IGNORECASE,
)

DEPTH_MARKERS = re.compile(
    r"autonomy|moral|philosophy|belief|value|nuance|complex|context|principle"
    r"|assumption|framework|diversity",
    re.IGNORECASE,
)

CITATION_MARKERS = re.compile(
    r"research shows|studies indicate|according to|evidence suggests|data from"
    r"|statistically|survey|report|study",
    re.IGNORECASE,
)

EXAMPLE_MARKERS = re.compile(
    r"for example|such as|consider|case study|instance|take the case of",
    re.IGNORECASE,
)

REBUTTAL_KEYWORD = re.compile(r"\b\w{5,}\b")

# Score when there is no opposing message to rebut yet.
NEUTRAL_PERSUASIVENESS = 5

MIN_TOPIC_TOKEN_LENGTH = 4


def _capped(points: int) -> int:
    return min(points, MAX_CRITERION_SCORE)


def score_clarity(message: str) -> int:
    return _capped(len(CLARITY_MARKERS.findall(message)) * 2)


def score_depth(message: str) -> int:
    return _capped(len(DEPTH_MARKERS.findall(message)) * 2)


def score_evidence(message: str) -> int:
    citations = len(CITATION_MARKERS.findall(message))
    examples = len(EXAMPLE_MARKERS.findall(message))
    return _capped(citations * 3 + examples * 2)


def score_relevance(message: str, topic: str) -> int:
    """Two points per topic word (longer than 3 chars) found in the message."""
    lower_message = message.lower()
    matches = [
        word
        for word in topic.lower().split()
        if len(word) >= MIN_TOPIC_TOKEN_LENGTH and word in lower_message
    ]
    return _capped(len(matches) * 2)


def score_persuasiveness(
    message: str, history: Sequence[DebateMessage], owner: str
) -> int:
    """Rebuttal strength: overlap with the opponent's most recent message."""
    last_opponent = next(
        (msg for msg in reversed(history) if msg.participant != owner), None
    )
    if last_opponent is None:
        return NEUTRAL_PERSUASIVENESS

    lower_message = message.lower()
    keywords = REBUTTAL_KEYWORD.findall(last_opponent.content.lower())
    rebuttals = sum(1 for word in keywords if word in lower_message)

    if rebuttals >= 5:
        return 10
    if rebuttals >= 3:
        return 7
    if rebuttals >= 1:
        return 5
    return 3


def evaluate_message(
    message: str,
    history: Sequence[DebateMessage],
    topic: str,
    owner: str,
) -> MessageScore:
    """Score a message on all five criteria."""
    return MessageScore(
        criterion_scores=[
            CriterionScore(ScoringCriterion.CLARITY, score_clarity(message)),
            CriterionScore(ScoringCriterion.DEPTH, score_depth(message)),
            CriterionScore(ScoringCriterion.EVIDENCE, score_evidence(message)),
            CriterionScore(ScoringCriterion.RELEVANCE, score_relevance(message, topic)),
            CriterionScore(
                ScoringCriterion.PERSUASIVENESS,
                score_persuasiveness(message, history, owner),
            ),
        ]
    )


def score_message(
    message: str,
    history: Sequence[DebateMessage],
    topic: str,
    owner: str,
) -> int:
    """Total score for a message, in [0, 50]."""
    return evaluate_message(message, history, topic, owner).total
