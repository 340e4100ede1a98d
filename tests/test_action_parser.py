"""Tests for action parser."""

import pytest

from holdem_table.agents.action_parser import ActionParser
from holdem_table.engine.actions import ActionType

from helpers import make_context


class TestActionParser:
    """Tests for ActionParser."""

    @pytest.fixture
    def free_check(self):
        """Nobody has bet this round."""
        return make_context()

    @pytest.fixture
    def facing_bet(self):
        """Facing a bet of 100 with 50 already in."""
        return make_context(stack=950, round_contribution=50, current_bet=100)

    def test_parse_fold(self, facing_bet):
        """Test parsing FOLD action."""
        result = ActionParser.parse("I will FOLD this hand.", facing_bet)

        assert result.success
        assert result.action.action_type is ActionType.FOLD

    def test_parse_check(self, free_check):
        """Test parsing CHECK action."""
        result = ActionParser.parse("Let me CHECK here.", free_check)

        assert result.success
        assert result.action.action_type is ActionType.CALL

    def test_check_facing_bet_fails(self, facing_bet):
        """Checking is not allowed while chips are owed."""
        result = ActionParser.parse("check", facing_bet)

        assert not result.success
        assert result.action is None
        assert "50 to call" in result.error

    def test_parse_call(self, facing_bet):
        """Test parsing CALL action."""
        result = ActionParser.parse("I CALL the bet.", facing_bet)

        assert result.success
        assert result.action.action_type is ActionType.CALL

    def test_parse_bet_with_amount(self, free_check):
        """Test parsing BET with amount."""
        result = ActionParser.parse("bet 200", free_check)

        assert result.success
        assert result.action.action_type is ActionType.BET
        assert result.action.amount == 200

    def test_parse_amount_with_commas(self, free_check):
        """Thousands separators are accepted."""
        result = ActionParser.parse("raise 1,000", free_check)

        assert result.success
        assert result.action.amount == 1000

    def test_parse_raise_to(self, facing_bet):
        """RAISE TO is converted to the chips still to add."""
        result = ActionParser.parse("RAISE TO 300", facing_bet)

        assert result.success
        assert result.action.action_type is ActionType.BET
        assert result.action.amount == 250

    def test_amount_not_clamped(self, free_check):
        """Oversized bets are passed through for the table to reject."""
        result = ActionParser.parse("bet 5000", free_check)

        assert result.success
        assert result.action.amount == 5000

    def test_parse_all_in(self, facing_bet):
        """Test parsing ALL IN."""
        result = ActionParser.parse("I'm going ALL IN!", facing_bet)

        assert result.success
        assert result.action.action_type is ActionType.BET
        assert result.action.amount == 950

    def test_all_in_short_stack_is_a_call(self):
        """All-in for no more than the call amount is a call."""
        context = make_context(stack=40, current_bet=100)

        result = ActionParser.parse("shove", context)

        assert result.success
        assert result.action.action_type is ActionType.CALL

    @pytest.mark.parametrize("text,expected", [
        ("f", ActionType.FOLD),
        ("c", ActionType.CALL),
        ("x", ActionType.CALL),
    ])
    def test_shortcuts(self, free_check, text, expected):
        """Single-letter shortcuts."""
        result = ActionParser.parse(text, free_check)

        assert result.success
        assert result.action.action_type is expected

    def test_parse_empty(self, free_check):
        """Test parsing empty input."""
        result = ActionParser.parse("", free_check)

        assert not result.success
        assert result.error == "Empty input"

    def test_parse_garbage(self, free_check):
        """Test parsing unrecognized text."""
        result = ActionParser.parse("I'm not sure what to do", free_check)

        assert not result.success
        assert "Could not parse" in result.error

    def test_default_action_check(self, free_check):
        """Test default action when check is free."""
        result = ActionParser.get_default_action(free_check)

        assert result.action.action_type is ActionType.CALL
        assert "CHECK" in result.error

    def test_default_action_fold(self, facing_bet):
        """Test default action when facing a bet."""
        result = ActionParser.get_default_action(facing_bet)

        assert result.action.action_type is ActionType.FOLD
        assert "FOLD" in result.error
