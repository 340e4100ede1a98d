"""Tests for the player registry."""

import pytest

from holdem_table.engine.errors import SeatError
from holdem_table.engine.registry import PlayerRegistry, PlayerStatus


class TestSeating:
    """Tests for joining and leaving."""

    def test_seats_are_assigned_in_order(self):
        registry = PlayerRegistry()

        seats = [registry.join(name, 1000).seat for name in ("A", "B", "C")]

        assert seats == [0, 1, 2]

    def test_lowest_free_seat_is_reused(self):
        registry = PlayerRegistry()
        for name in ("A", "B", "C"):
            registry.join(name, 1000)
        registry.leave(1)

        player = registry.join("D", 1000)

        assert player.seat == 1
        assert [p.name for p in registry.seated] == ["A", "D", "C"]

    def test_full_table_rejects_join(self):
        registry = PlayerRegistry(max_seats=2)
        registry.join("A", 1000)
        registry.join("B", 1000)

        with pytest.raises(SeatError):
            registry.join("C", 1000)

    def test_no_joining_mid_hand(self):
        registry = PlayerRegistry()
        registry.join("A", 1000)
        registry.join("B", 1000)
        registry.begin_hand()

        with pytest.raises(SeatError):
            registry.join("C", 1000)
        with pytest.raises(SeatError):
            registry.leave(0)

    def test_unknown_seat(self):
        registry = PlayerRegistry()

        with pytest.raises(SeatError):
            registry.get(4)


class TestHandRoster:
    """Tests for the active and folded rosters."""

    def test_broke_players_sit_out(self):
        registry = PlayerRegistry()
        registry.join("A", 1000)
        broke = registry.join("B", 0)
        registry.join("C", 1000)

        active = registry.begin_hand()

        assert [p.seat for p in active] == [0, 2]
        assert broke.status is PlayerStatus.SITTING_OUT

    def test_fold_moves_player_to_folded(self):
        registry = PlayerRegistry()
        a = registry.join("A", 1000)
        registry.join("B", 1000)
        registry.begin_hand()

        registry.fold(a)

        assert a not in registry.active
        assert registry.folded == [a]
        assert a.status is PlayerStatus.FOLDED

    def test_reinstate_uses_seat_numbers(self):
        registry = PlayerRegistry(max_seats=10)
        players = [registry.join(name, 1000) for name in "ABCDEF"]
        # leave gaps so seat numbers no longer match list positions
        registry.leave(1)
        registry.leave(3)
        registry.begin_hand()
        a, c, e, f = players[0], players[2], players[4], players[5]

        registry.fold(f)
        registry.fold(a)
        registry.fold(e)
        registry.reinstate_folded()

        assert [p.seat for p in registry.active] == [0, 2, 4, 5]
        assert registry.active == [a, c, e, f]
        assert registry.folded == []
        assert all(p.status is PlayerStatus.ACTIVE for p in registry.active)

    def test_end_hand_clears_cards(self, cards):
        registry = PlayerRegistry()
        a = registry.join("A", 1000)
        registry.join("B", 1000)
        registry.begin_hand()
        for card in cards("AsKh"):
            a.receive_card(card)

        registry.end_hand()

        assert a.hole_cards == []
        assert not registry.hand_in_progress

    def test_third_hole_card_rejected(self, cards):
        registry = PlayerRegistry()
        a = registry.join("A", 1000)
        for card in cards("AsKh"):
            a.receive_card(card)

        with pytest.raises(ValueError):
            a.receive_card(cards("2c")[0])
