"""Pytest configuration and fixtures."""

import random

import pytest

from holdem_table.config import TableConfig
from holdem_table.engine.deck import Deck, parse_cards
from holdem_table.engine.events import EventLog
from holdem_table.engine.evaluator import pokerkit_rank
from holdem_table.engine.hand_machine import HandStateMachine


@pytest.fixture
def table_config():
    """1000 buy-in, 25/50 blinds, no reveal pause."""
    return TableConfig(buy_in=1000, small_blind=25, big_blind=50, reveal_delay=0)


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def make_table(table_config, event_log):
    """Factory for a hand machine with seated providers."""

    def _make(providers, stacks=None, deck=None, evaluator=pokerkit_rank, config=None):
        machine = HandStateMachine(
            config or table_config,
            evaluator=evaluator,
            deck_factory=(lambda: Deck.stacked(deck)) if deck else None,
            sinks=[event_log],
            rng=random.Random(7),
        )
        for i, provider in enumerate(providers):
            machine.seat_player(f"P{i}", provider, stack=stacks[i] if stacks else None)
        return machine

    return _make


@pytest.fixture
def cards():
    """Card parser shortcut."""
    return parse_cards
