"""Hand ranking boundary: a pure function from cards to a comparable rank."""

from collections.abc import Sequence
from typing import Any, Callable

from pokerkit import Card, StandardHighHand

# rank(hole_cards, community_cards) -> totally ordered value, higher wins
HandEvaluator = Callable[[Sequence[Card], Sequence[Card]], Any]


def pokerkit_rank(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> StandardHighHand:
    """Best standard high hand from hole and community cards."""
    return StandardHighHand.from_game(tuple(hole_cards), tuple(community_cards))
