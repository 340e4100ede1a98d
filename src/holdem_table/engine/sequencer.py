"""Turn order and betting-round closure."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from holdem_table.engine.errors import StaleCursorError
from holdem_table.engine.registry import Player


class SeatRing:
    """
    Circular ordering of players by seat number.

    ``next``/``previous`` are resolved by seat number rather than list index,
    so they stay valid for a player who has just been removed.
    """

    def __init__(self, players: Iterable[Player]):
        self._players = sorted(players, key=lambda p: p.seat)

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __contains__(self, player: Player) -> bool:
        return player in self._players

    def after_seat(self, seat: int) -> Player:
        """First player clockwise of ``seat`` (the seat itself excluded)."""
        self._require_members()
        for player in self._players:
            if player.seat > seat:
                return player
        return self._players[0]

    def before_seat(self, seat: int) -> Player:
        """First player counter-clockwise of ``seat``."""
        self._require_members()
        for player in reversed(self._players):
            if player.seat < seat:
                return player
        return self._players[-1]

    def next(self, player: Player) -> Player:
        return self.after_seat(player.seat)

    def previous(self, player: Player) -> Player:
        return self.before_seat(player.seat)

    def remove(self, player: Player) -> None:
        self._players.remove(player)

    def _require_members(self) -> None:
        if not self._players:
            raise StaleCursorError("Seat ring is empty")


@dataclass
class BettingRound:
    """State of the betting round in progress."""
    stage: str
    current_bet: int
    closing_player: Player
    last_aggressor: Player | None = None


class TurnSequencer:
    """
    Decides whose turn it is and when a betting round is over.

    The round closes when the closing player acts without anyone having
    bet since the round began. A bet moves the closing reference to the
    bettor's predecessor, giving everyone else one more turn.
    """

    def __init__(self, players: Iterable[Player]):
        self.ring = SeatRing(players)
        self.current: Player | None = None
        self.round: BettingRound | None = None

    def begin_round(
        self,
        stage: str,
        first_to_act: Player,
        closing_player: Player,
        current_bet: int = 0,
    ) -> None:
        self.current = first_to_act
        self.round = BettingRound(
            stage=stage,
            current_bet=current_bet,
            closing_player=closing_player,
        )
        self.check_cursor()

    @property
    def current_bet(self) -> int:
        return self.round.current_bet if self.round else 0

    def closing_player(self) -> Player:
        return self.round.closing_player

    def advance(self) -> Player:
        """Move the cursor to the next active player."""
        self.current = self.ring.next(self.current)
        self.check_cursor()
        return self.current

    def is_round_closed(self, acting_player: Player) -> bool:
        return acting_player is self.round.closing_player

    def is_decided(self) -> bool:
        """True once folds have left a single active player."""
        return len(self.ring) == 1

    def record_bet(self, bettor: Player, threshold: int) -> None:
        """Raise the threshold and reopen action for everyone but the bettor."""
        self.round.current_bet = threshold
        self.round.last_aggressor = bettor
        self.round.closing_player = self.ring.previous(bettor)

    def remove(self, player: Player) -> None:
        """
        Drop a folded player, re-pointing the cursor and closing reference.

        Both move to the removed player's predecessor, so the next
        ``advance()`` lands on the player after the one who left.
        """
        predecessor = self.ring.previous(player)
        self.ring.remove(player)
        if self.current is player:
            self.current = predecessor
        if self.round and self.round.closing_player is player:
            self.round.closing_player = predecessor

    def check_cursor(self) -> None:
        if self.current is None or self.current not in self.ring:
            raise StaleCursorError(f"Cursor points at {self.current!r}, who is not active")
        if not self.current.is_active:
            raise StaleCursorError(f"Cursor points at {self.current!r} with status {self.current.status}")
