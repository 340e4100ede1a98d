"""Shuffled 52-card deck built on pokerkit's card model."""

import random
from collections import deque
from collections.abc import Iterable

from pokerkit import Card
from pokerkit import Deck as StandardDeck

from holdem_table.engine.errors import DeckExhaustedError


def parse_cards(cards: str) -> list[Card]:
    """
    Parse a card string such as "AsKh" or "As Kh" into cards.

    Args:
        cards: Concatenated rank/suit pairs, separators allowed

    Returns:
        List of pokerkit Card objects in the given order
    """
    cards = cards.replace(" ", "").replace(",", "")
    if not cards:
        return []
    return list(Card.parse(cards))


def format_cards(cards: Iterable[Card]) -> str:
    """Format cards in short notation, e.g. "AsKh"."""
    return "".join(repr(card) for card in cards)


class Deck:
    """Ordered sequence of undealt cards; cards leave from the front."""

    def __init__(
        self,
        rng: random.Random | None = None,
        cards: Iterable[Card] | None = None,
    ):
        """
        Create a deck.

        Args:
            rng: Random source for shuffling the standard deck
            cards: Explicit card order (no shuffling); must not repeat a card
        """
        if cards is None:
            ordered = list(StandardDeck.STANDARD)
            (rng or random.Random()).shuffle(ordered)
        else:
            ordered = list(cards)
            if len(set(ordered)) != len(ordered):
                raise ValueError("Deck contains duplicate cards")

        self._cards: deque[Card] = deque(ordered)

    @classmethod
    def stacked(cls, cards: str) -> "Deck":
        """Deck that deals exactly the given cards, in order."""
        return cls(cards=parse_cards(cards))

    @property
    def remaining(self) -> int:
        return len(self._cards)

    def deal_card(self) -> Card:
        """Remove and return the front card."""
        if not self._cards:
            raise DeckExhaustedError("No cards left in the deck")
        return self._cards.popleft()

    def deal(self, count: int) -> list[Card]:
        """Deal several cards; nothing is dealt if the deck is too short."""
        self.require(count)
        return [self._cards.popleft() for _ in range(count)]

    def require(self, count: int) -> None:
        """Raise DeckExhaustedError unless at least ``count`` cards remain."""
        if count > len(self._cards):
            raise DeckExhaustedError(
                f"Need {count} cards but only {len(self._cards)} remain"
            )

    def __len__(self) -> int:
        return len(self._cards)
