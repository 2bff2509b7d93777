"""Randomized stance assignment for a new debate."""

import random
from collections.abc import Sequence

from .types import Stance


def assign_stances(
    participants: Sequence[str], rng: random.Random | None = None
) -> dict[str, Stance]:
    """Flip one fair coin to decide which participant argues in favor.

    The other participant always gets the complementary stance.
    """
    if len(participants) != 2:
        raise ValueError(
            f"Stance assignment needs exactly two participants, got {len(participants)}"
        )

    coin = (rng or random).random()
    favor_first = coin > 0.5
    first, second = participants
    first_stance = Stance.FAVOR if favor_first else Stance.OPPOSE
    return {first: first_stance, second: first_stance.opposite}
