"""Tests for turn order and round closure."""

import pytest

from holdem_table.engine.errors import StaleCursorError
from holdem_table.engine.registry import PlayerRegistry
from holdem_table.engine.sequencer import SeatRing, TurnSequencer


@pytest.fixture
def four_players():
    registry = PlayerRegistry()
    for name in "ABCD":
        registry.join(name, 1000)
    return registry, registry.begin_hand()


class TestSeatRing:
    """Tests for SeatRing."""

    def test_next_and_previous_wrap(self, four_players):
        _, (a, b, c, d) = four_players
        ring = SeatRing([a, b, c, d])

        assert ring.next(d) is a
        assert ring.previous(a) is d
        assert ring.next(b) is c

    def test_next_of_removed_player(self, four_players):
        _, (a, b, c, d) = four_players
        ring = SeatRing([a, b, c, d])

        ring.remove(b)

        assert ring.next(b) is c
        assert ring.previous(b) is a
        assert b not in ring

    def test_after_seat_uses_seat_numbers(self, four_players):
        _, (a, b, c, d) = four_players
        ring = SeatRing([a, c])

        assert ring.after_seat(1) is c
        assert ring.after_seat(3) is a
        assert ring.before_seat(1) is a

    def test_empty_ring_raises(self, four_players):
        _, (a, *_) = four_players
        ring = SeatRing([])

        with pytest.raises(StaleCursorError):
            ring.next(a)


class TestTurnSequencer:
    """Tests for TurnSequencer."""

    def test_advance_visits_every_player_in_order(self, four_players):
        _, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("flop", first_to_act=b, closing_player=a)

        order = [seq.current] + [seq.advance() for _ in range(4)]

        assert order == [b, c, d, a, b]

    def test_round_closes_on_closing_player(self, four_players):
        _, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("preflop", first_to_act=d, closing_player=c, current_bet=50)

        assert not seq.is_round_closed(d)
        assert not seq.is_round_closed(a)
        assert seq.is_round_closed(c)

    def test_bet_moves_closing_reference_to_bettor_predecessor(self, four_players):
        _, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("flop", first_to_act=b, closing_player=a)

        seq.record_bet(c, 100)

        assert seq.current_bet == 100
        assert seq.closing_player() is b
        assert seq.round.last_aggressor is c

    def test_fold_renormalizes_cursor(self, four_players):
        registry, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("flop", first_to_act=b, closing_player=a)

        registry.fold(b)
        seq.remove(b)

        assert seq.current is a
        assert seq.advance() is c
        seq.check_cursor()

    def test_removing_closing_player_rederives_reference(self, four_players):
        registry, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("flop", first_to_act=b, closing_player=d)
        seq.advance()  # c to act

        registry.fold(d)
        seq.remove(d)

        assert seq.closing_player() is c

    def test_decided_when_one_player_left(self, four_players):
        registry, players = four_players
        seq = TurnSequencer(players)
        seq.begin_round("flop", first_to_act=players[1], closing_player=players[0])

        for player in players[1:]:
            registry.fold(player)
            seq.remove(player)

        assert seq.is_decided()

    def test_stale_cursor_detected(self, four_players):
        registry, (a, b, c, d) = four_players
        seq = TurnSequencer([a, b, c, d])
        seq.begin_round("flop", first_to_act=b, closing_player=a)

        registry.fold(b)  # folded but never removed from the ring

        with pytest.raises(StaleCursorError):
            seq.check_cursor()
