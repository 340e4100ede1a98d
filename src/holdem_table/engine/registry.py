"""Seated players and the active/folded rosters of the current hand."""

import bisect
from dataclasses import dataclass, field
from enum import Enum

from pokerkit import Card

from holdem_table.engine.errors import SeatError


class PlayerStatus(str, Enum):
    ACTIVE = "active"
    FOLDED = "folded"
    SITTING_OUT = "sitting_out"  # no chips at hand start


@dataclass(eq=False)
class Player:
    """A seated player. Stack persists across hands; the rest is per hand."""
    seat: int
    name: str
    stack: int
    hole_cards: list[Card] = field(default_factory=list)
    round_contribution: int = 0
    total_contribution: int = 0
    status: PlayerStatus = PlayerStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is PlayerStatus.ACTIVE

    @property
    def is_all_in(self) -> bool:
        """Active with nothing left to bet."""
        return self.is_active and self.stack == 0

    def receive_card(self, card: Card) -> None:
        if len(self.hole_cards) >= 2:
            raise ValueError(f"Seat {self.seat} already holds two cards")
        self.hole_cards.append(card)

    def reset_for_hand(self) -> None:
        self.hole_cards = []
        self.round_contribution = 0
        self.total_contribution = 0
        self.status = PlayerStatus.ACTIVE if self.stack > 0 else PlayerStatus.SITTING_OUT

    def __repr__(self) -> str:
        return f"Player(seat={self.seat}, name={self.name!r}, stack={self.stack})"


class PlayerRegistry:
    """
    Owns the seated players.

    During a hand, dealt-in players are split between ``active`` (seat order)
    and ``folded``. Seats are looked up through an explicit seat-to-player
    mapping, so seat numbers never have to match list positions.
    """

    def __init__(self, max_seats: int = 10):
        self.max_seats = max_seats
        self._seats: dict[int, Player] = {}
        self.active: list[Player] = []
        self.folded: list[Player] = []
        self.hand_in_progress = False

    def join(self, name: str, stack: int) -> Player:
        """Seat a new player at the lowest free seat."""
        if self.hand_in_progress:
            raise SeatError("Cannot join while a hand is in progress")
        if stack < 0:
            raise SeatError(f"Stack cannot be negative: {stack}")

        free = [s for s in range(self.max_seats) if s not in self._seats]
        if not free:
            raise SeatError(f"Table is full ({self.max_seats} seats)")

        player = Player(seat=free[0], name=name, stack=stack)
        self._seats[player.seat] = player
        return player

    def leave(self, seat: int) -> Player:
        if self.hand_in_progress:
            raise SeatError("Cannot leave while a hand is in progress")
        if seat not in self._seats:
            raise SeatError(f"No player in seat {seat}")
        return self._seats.pop(seat)

    def get(self, seat: int) -> Player:
        try:
            return self._seats[seat]
        except KeyError:
            raise SeatError(f"No player in seat {seat}") from None

    @property
    def seated(self) -> list[Player]:
        return [self._seats[s] for s in sorted(self._seats)]

    def with_chips(self) -> list[Player]:
        return [p for p in self.seated if p.stack > 0]

    @property
    def dealt_in(self) -> list[Player]:
        """Players holding cards this hand, in seat order."""
        return sorted(self.active + self.folded, key=lambda p: p.seat)

    def begin_hand(self) -> list[Player]:
        """Reset per-hand state and deal in every player with chips."""
        for player in self.seated:
            player.reset_for_hand()
        self.active = [p for p in self.seated if p.is_active]
        self.folded = []
        self.hand_in_progress = True
        return list(self.active)

    def fold(self, player: Player) -> None:
        if player not in self.active:
            raise SeatError(f"Seat {player.seat} is not active")
        self.active.remove(player)
        self.folded.append(player)
        player.status = PlayerStatus.FOLDED

    def reinstate_folded(self) -> None:
        """Return folded players to the active roster at their seat positions."""
        seats = [p.seat for p in self.active]
        for player in sorted(self.folded, key=lambda p: p.seat):
            index = bisect.bisect_left(seats, player.seat)
            seats.insert(index, player.seat)
            self.active.insert(index, player)
            player.status = PlayerStatus.ACTIVE
        self.folded = []

    def end_hand(self) -> None:
        """Clear per-hand state once the table has seen the revealed cards."""
        for player in self.seated:
            player.hole_cards = []
            player.round_contribution = 0
            player.total_contribution = 0
        self.hand_in_progress = False
