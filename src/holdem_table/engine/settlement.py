"""Award the pot at the end of a hand."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from pokerkit import Card

from holdem_table.engine.errors import LedgerInvariantError
from holdem_table.engine.evaluator import HandEvaluator
from holdem_table.engine.ledger import PotLedger
from holdem_table.engine.registry import Player, PlayerRegistry
from holdem_table.observability.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Pot:
    """A main or side pot and the players who can win it."""
    amount: int
    eligible: list[Player]


@dataclass
class Settlement:
    """Outcome of settling one hand."""
    pot: int
    payouts: dict[int, int]  # seat -> chips won
    winners: tuple[int, ...]
    pots: list[Pot] = field(default_factory=list)
    revealed: dict[int, tuple[Card, ...]] = field(default_factory=dict)
    decided_by_elimination: bool = False


def build_pots(players: Sequence[Player]) -> list[Pot]:
    """
    Split total contributions into a main pot and side pots.

    Each all-in level of a live player caps a layer; the chips in a layer
    can only be won by live players who put in at least that much. Folded
    players' chips stay in the layers they reached.

    Example:
        contributions {A: 25 (all-in), B: 100, C: 100 (folded)}
        -> Pot(75, [A, B]), Pot(150, [B])
    """
    live = [p for p in players if p.is_active]
    levels = sorted({p.total_contribution for p in live if p.total_contribution > 0})
    if not levels:
        total = sum(p.total_contribution for p in players)
        return [Pot(total, live)] if total else []

    pots = []
    floor = 0
    for i, level in enumerate(levels):
        # the top layer also takes anything above it
        cap = level if i < len(levels) - 1 else None
        amount = sum(
            _clip(p.total_contribution, cap) - _clip(p.total_contribution, floor)
            for p in players
        )
        eligible = [p for p in live if p.total_contribution >= level]
        if amount:
            pots.append(Pot(amount, eligible))
        floor = level
    return pots


def _clip(value: int, cap: int | None) -> int:
    return value if cap is None else min(value, cap)


def odd_chip_order(players: Sequence[Player], button_seat: int) -> list[Player]:
    """Seat order starting with the first seat left of the button."""
    return sorted(players, key=lambda p: (p.seat <= button_seat, p.seat))


def split_pot(amount: int, winners: Sequence[Player], button_seat: int) -> dict[int, int]:
    """
    Divide a pot evenly; leftover chips go one each to winners
    starting left of the button.
    """
    share, remainder = divmod(amount, len(winners))
    shares = {}
    for i, player in enumerate(odd_chip_order(winners, button_seat)):
        shares[player.seat] = share + (1 if i < remainder else 0)
    return shares


def settle_hand(
    registry: PlayerRegistry,
    ledger: PotLedger,
    community_cards: Sequence[Card],
    evaluator: HandEvaluator,
    button_seat: int,
) -> Settlement:
    """
    Pay out the pot, reveal every hand, and return folded players to the roster.

    With a single active player left, that player takes the whole pot and
    no hand is ranked. Otherwise every pot goes to its best-ranked eligible
    player(s).
    """
    dealt_in = registry.dealt_in
    live = list(registry.active)
    pot_total = ledger.total_pot()
    payouts: dict[int, int] = {}

    if len(live) == 1:
        pots = [Pot(pot_total, live)]
        payouts[live[0].seat] = pot_total
        decided = True
    else:
        pots = build_pots(dealt_in)
        ranks = {p.seat: evaluator(p.hole_cards, community_cards) for p in live}
        for pot in pots:
            best = max(ranks[p.seat] for p in pot.eligible)
            pot_winners = [p for p in pot.eligible if ranks[p.seat] == best]
            for seat, amount in split_pot(pot.amount, pot_winners, button_seat).items():
                payouts[seat] = payouts.get(seat, 0) + amount
        decided = False

    for seat, amount in payouts.items():
        ledger.payout(registry.get(seat), amount)
        logger.info("Pot awarded", extra={"extra_fields": {"seat": seat, "amount": amount}})
    ledger.check()
    if ledger.total_pot() != 0:
        raise LedgerInvariantError(f"{ledger.total_pot()} chips left in the pot after settlement")

    revealed = {p.seat: tuple(p.hole_cards) for p in dealt_in}
    registry.reinstate_folded()

    return Settlement(
        pot=pot_total,
        payouts=payouts,
        winners=tuple(sorted(seat for seat, amount in payouts.items() if amount > 0)),
        pots=pots,
        revealed=revealed,
        decided_by_elimination=decided,
    )
