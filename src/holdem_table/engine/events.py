"""Events emitted by the hand engine for displays and observers."""

from dataclasses import dataclass, field, fields
from typing import Protocol

from pokerkit import Card

from holdem_table.engine.actions import Action
from holdem_table.engine.deck import format_cards
from holdem_table.observability.logger import get_logger


@dataclass(frozen=True)
class Event:
    hand_number: int

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class HandStarted(Event):
    seats: tuple[int, ...]


@dataclass(frozen=True)
class ButtonMoved(Event):
    seat: int


@dataclass(frozen=True)
class StageChanged(Event):
    stage: str


@dataclass(frozen=True)
class BlindPosted(Event):
    seat: int
    blind: str  # "small" or "big"
    amount: int


@dataclass(frozen=True)
class HoleCardsDealt(Event):
    """Private to ``seat`` until the reveal."""
    seat: int
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class CommunityCardsDealt(Event):
    stage: str
    cards: tuple[Card, ...]
    board: tuple[Card, ...]


@dataclass(frozen=True)
class TurnChanged(Event):
    seat: int
    stage: str
    current_bet: int
    amount_to_call: int


@dataclass(frozen=True)
class ActionTaken(Event):
    seat: int
    stage: str
    action: Action
    paid: int
    pot: int
    defaulted: bool = False


@dataclass(frozen=True)
class ActionRejected(Event):
    seat: int
    action: object
    reason: str


@dataclass(frozen=True)
class HandDecided(Event):
    """Everyone else folded; ``seat`` takes the pot without a showdown."""
    seat: int


@dataclass(frozen=True)
class CardsRevealed(Event):
    """All hole cards, visible to every observer."""
    hole_cards: dict[int, tuple[Card, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class HandSettled(Event):
    payouts: dict[int, int] = field(default_factory=dict)
    winners: tuple[int, ...] = ()
    pot: int = 0


class EventSink(Protocol):
    def emit(self, event: Event) -> None:
        ...


class EventLog:
    """Sink that keeps every event, in order."""

    def __init__(self):
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[Event]) -> list[Event]:
        return [e for e in self.events if isinstance(e, event_type)]

    def stages(self) -> list[str]:
        return [e.stage for e in self.of_type(StageChanged)]


class LoggingEventSink:
    """Sink that writes each event as a structured log line."""

    def __init__(self, name: str = "events"):
        self.logger = get_logger(name)

    def emit(self, event: Event) -> None:
        details = {}
        for f in fields(event):
            value = getattr(event, f.name)
            if isinstance(event, HoleCardsDealt) and f.name == "cards":
                value = "hidden"
            elif isinstance(value, tuple) and value and isinstance(value[0], Card):
                value = format_cards(value)
            elif isinstance(value, dict):
                value = {
                    k: format_cards(v) if isinstance(v, tuple) else v
                    for k, v in value.items()
                }
            details[f.name] = value
        self.logger.info(event.kind, extra={"extra_fields": details})
