"""Chip movements between player stacks and the pot."""

from collections.abc import Iterable

from holdem_table.engine.errors import LedgerInvariantError
from holdem_table.engine.registry import Player


class PotLedger:
    """
    Tracks the pot for one hand and every chip that moves in or out of it.

    Stacks only change through this class: blinds, calls and bets move
    chips into the pot, payouts move them back out. ``check()`` verifies
    that stacks plus pot still equal the amount at hand start.
    """

    def __init__(self):
        self._players: list[Player] = []
        self._pot = 0
        self._baseline = 0

    def begin_hand(self, players: Iterable[Player]) -> None:
        """Start a hand with an empty pot and record the chip total."""
        self._players = list(players)
        self._pot = 0
        for player in self._players:
            player.round_contribution = 0
            player.total_contribution = 0
        self._baseline = sum(p.stack for p in self._players)

    def total_pot(self) -> int:
        return self._pot

    def take_blind(self, player: Player, amount: int) -> int:
        """Post a forced bet, clamped to the player's stack. Returns the amount posted."""
        return self._move_to_pot(player, min(amount, player.stack))

    def call(self, player: Player, current_bet: int) -> int:
        """Match the current bet, or go all-in for less. Returns the amount paid."""
        owed = max(0, current_bet - player.round_contribution)
        return self._move_to_pot(player, min(owed, player.stack))

    def bet(self, player: Player, amount: int) -> int:
        """Put ``amount`` more chips in. The caller validates the amount."""
        if amount > player.stack:
            raise LedgerInvariantError(
                f"Seat {player.seat} cannot bet {amount} with stack {player.stack}"
            )
        return self._move_to_pot(player, amount)

    def reset_round_contributions(self) -> None:
        """Zero per-round contributions; the pot carries over."""
        for player in self._players:
            player.round_contribution = 0

    def payout(self, player: Player, amount: int) -> None:
        """Move chips from the pot to a winner."""
        if amount < 0 or amount > self._pot:
            raise LedgerInvariantError(
                f"Cannot pay {amount} from a pot of {self._pot}"
            )
        self._pot -= amount
        player.stack += amount

    def refund_all(self) -> int:
        """Return every player's contribution for an aborted hand. Returns the amount refunded."""
        refunded = 0
        for player in self._players:
            amount = player.total_contribution
            self.payout(player, amount)
            player.round_contribution = 0
            player.total_contribution = 0
            refunded += amount
        self.check()
        return refunded

    def check(self) -> None:
        """Raise LedgerInvariantError if chips were created or destroyed."""
        if self._pot < 0:
            raise LedgerInvariantError(f"Negative pot: {self._pot}")
        for player in self._players:
            if player.stack < 0:
                raise LedgerInvariantError(
                    f"Seat {player.seat} has negative stack {player.stack}"
                )
        total = sum(p.stack for p in self._players) + self._pot
        if total != self._baseline:
            raise LedgerInvariantError(
                f"Chip total {total} differs from hand start {self._baseline}"
            )

    def _move_to_pot(self, player: Player, amount: int) -> int:
        if amount < 0:
            raise LedgerInvariantError(f"Negative amount {amount} for seat {player.seat}")
        player.stack -= amount
        player.round_contribution += amount
        player.total_contribution += amount
        self._pot += amount
        return amount
