"""Hand engine: deck, ledger, turn order, state machine and settlement."""

from holdem_table.engine.actions import Action, ActionType, DecisionContext, LegalAction
from holdem_table.engine.deck import Deck, parse_cards
from holdem_table.engine.hand_machine import HandResult, HandStage, HandStateMachine
from holdem_table.engine.ledger import PotLedger
from holdem_table.engine.registry import Player, PlayerRegistry, PlayerStatus
from holdem_table.engine.sequencer import SeatRing, TurnSequencer

__all__ = [
    "Action",
    "ActionType",
    "DecisionContext",
    "Deck",
    "HandResult",
    "HandStage",
    "HandStateMachine",
    "LegalAction",
    "Player",
    "PlayerRegistry",
    "PlayerStatus",
    "PotLedger",
    "SeatRing",
    "TurnSequencer",
    "parse_cards",
]
