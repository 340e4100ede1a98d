"""Shared test helpers: stacked decks, a tie evaluator and decision contexts."""

import asyncio

from holdem_table.engine.actions import DecisionContext, amount_to_call, legal_actions
from holdem_table.engine.registry import Player

# Dealt in seat order, two passes, then flop/turn/river.
# Seat 0: As Ad, seat 1: Ks Kd, seat 2: 7c 2h; board Ac Kh 9s 5d 3c.
THREE_HANDED_DECK = "As Ks 7c Ad Kd 2h Ac Kh 9s 5d 3c"

# Seat 0: As Ad, seat 1: Ks Kd; board 2c 7h 9s Jd 4c.
HEADS_UP_DECK = "As Ks Ad Kd 2c 7h 9s Jd 4c"


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)


def tie_evaluator(hole_cards, community_cards):
    """Every hand ranks the same."""
    return 0


def make_context(stack=1000, round_contribution=0, current_bet=0):
    """Flop decision for seat 0 with the given betting state."""
    player = Player(seat=0, name="You", stack=stack, round_contribution=round_contribution)
    return DecisionContext(
        hand_number=1,
        stage="flop",
        seat=0,
        name="You",
        stack=stack,
        hole_cards=(),
        round_contribution=round_contribution,
        current_bet=current_bet,
        amount_to_call=amount_to_call(player, current_bet),
        pot=300,
        community_cards=(),
        legal_actions=tuple(legal_actions(player, current_bet)),
    )
