"""Player actions, their legality, and the context handed to decision providers."""

from dataclasses import dataclass, field
from enum import Enum

from pokerkit import Card

from holdem_table.engine.errors import IllegalActionError
from holdem_table.engine.registry import Player, PlayerStatus


class ActionType(str, Enum):
    FOLD = "fold"
    CALL = "call"  # a call of zero is a check
    BET = "bet"


@dataclass(frozen=True)
class Action:
    """One decision. ``amount`` is the number of chips added, for bets only."""
    action_type: ActionType
    amount: int | None = None

    @classmethod
    def fold(cls) -> "Action":
        return cls(ActionType.FOLD)

    @classmethod
    def call(cls) -> "Action":
        return cls(ActionType.CALL)

    @classmethod
    def bet(cls, amount: int) -> "Action":
        return cls(ActionType.BET, amount)

    def __str__(self) -> str:
        if self.action_type is ActionType.BET:
            return f"bet {self.amount}"
        return self.action_type.value


@dataclass(frozen=True)
class LegalAction:
    """A legal action a player can take."""
    action_type: ActionType
    amount: int | None = None  # chips a call costs
    min_amount: int | None = None  # for bets
    max_amount: int | None = None  # for bets (all-in)


@dataclass(frozen=True)
class SeatView:
    """Public view of another player at the table."""
    seat: int
    name: str
    stack: int
    round_contribution: int
    status: PlayerStatus


@dataclass(frozen=True)
class DecisionContext:
    """Everything a decision provider may look at when asked to act."""
    hand_number: int
    stage: str
    seat: int
    name: str
    stack: int
    hole_cards: tuple[Card, ...]
    round_contribution: int
    current_bet: int
    amount_to_call: int
    pot: int
    community_cards: tuple[Card, ...]
    legal_actions: tuple[LegalAction, ...]
    opponents: tuple[SeatView, ...] = field(default_factory=tuple)

    def can(self, action_type: ActionType) -> bool:
        return any(a.action_type is action_type for a in self.legal_actions)

    def legal(self, action_type: ActionType) -> LegalAction | None:
        for legal_action in self.legal_actions:
            if legal_action.action_type is action_type:
                return legal_action
        return None


def amount_to_call(player: Player, current_bet: int) -> int:
    """Chips the player must add to stay in, capped at their stack."""
    return min(max(0, current_bet - player.round_contribution), player.stack)


def legal_actions(player: Player, current_bet: int) -> list[LegalAction]:
    """
    List the actions open to a player facing ``current_bet``.

    Fold and call are always available. A bet needs a stack of at least
    the current threshold (and at least one chip).
    """
    actions = [
        LegalAction(ActionType.FOLD),
        LegalAction(ActionType.CALL, amount=amount_to_call(player, current_bet)),
    ]
    min_bet = max(current_bet, 1)
    if player.stack >= min_bet:
        actions.append(LegalAction(
            ActionType.BET,
            min_amount=min_bet,
            max_amount=player.stack,
        ))
    return actions


def validate_action(action: Action, player: Player, current_bet: int) -> None:
    """Raise IllegalActionError if ``action`` is not allowed for ``player``."""
    if not isinstance(action, Action):
        raise IllegalActionError(action, "not an Action")

    if action.action_type in (ActionType.FOLD, ActionType.CALL):
        return

    if action.action_type is not ActionType.BET:
        raise IllegalActionError(action, f"unknown action type {action.action_type!r}")

    amount = action.amount
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise IllegalActionError(action, "bet amount must be an integer")
    if amount <= 0:
        raise IllegalActionError(action, "bet amount must be positive")
    if amount < current_bet:
        raise IllegalActionError(action, f"bet {amount} is below the current bet {current_bet}")
    if amount > player.stack:
        raise IllegalActionError(action, f"bet {amount} exceeds stack {player.stack}")
