"""Table session runner: plays hands back to back at one table."""

import asyncio
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable

from rich.console import Console
from rich.table import Table

from holdem_table.config import TableConfig
from holdem_table.engine.errors import InsufficientPlayersError
from holdem_table.engine.evaluator import HandEvaluator, pokerkit_rank
from holdem_table.engine.events import EventSink
from holdem_table.engine.hand_machine import DecisionProvider, HandResult, HandStateMachine
from holdem_table.observability.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SessionResult:
    """Result of a table session."""
    hands_played: int
    names: dict[int, str]
    starting_stacks: dict[int, int]
    final_stacks: dict[int, int]
    stopped_reason: str
    hand_results: list[HandResult] = field(default_factory=list)

    @property
    def profits(self) -> dict[int, int]:
        return {
            seat: self.final_stacks[seat] - self.starting_stacks[seat]
            for seat in self.starting_stacks
        }

    @property
    def leader(self) -> int | None:
        """Seat with the biggest stack, or None if tied."""
        ranked = sorted(self.final_stacks.items(), key=lambda kv: kv[1], reverse=True)
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return None
        return ranked[0][0] if ranked else None


class TableSession:
    """Seats players at one table and plays up to ``num_hands`` hands."""

    def __init__(
        self,
        config: TableConfig,
        seats: Iterable[tuple[str, DecisionProvider]],
        num_hands: int = 100,
        evaluator: HandEvaluator = pokerkit_rank,
        seed: int | None = None,
        sinks: Iterable[EventSink] | None = None,
        on_hand_complete: Callable[[HandResult], None] | None = None,
        console: Console | None = None,
    ):
        """
        Initialize the session.

        Args:
            config: Table configuration
            seats: (name, decision provider) for each player, in seat order
            num_hands: Maximum number of hands to play
            evaluator: Hand ranking function
            seed: Seed for the shuffles, for reproducible sessions
            sinks: Event observers passed to the hand machine
            on_hand_complete: Callback after each hand's reveal
            console: Rich console for progress output
        """
        self.config = config
        self.num_hands = num_hands
        self.on_hand_complete = on_hand_complete
        self.console = console or Console()

        self.machine = HandStateMachine(
            config,
            evaluator=evaluator,
            sinks=sinks,
            rng=random.Random(seed),
        )
        for name, provider in seats:
            self.machine.seat_player(name, provider)

        self.hand_results: list[HandResult] = []

    async def run(self) -> SessionResult:
        """
        Play hands until the hand limit or until fewer than two players have chips.

        Returns:
            SessionResult with final stacks
        """
        players = self.machine.players
        names = {p.seat: p.name for p in players}
        starting = {p.seat: p.stack for p in players}
        stopped_reason = "hand limit reached"

        self.console.print(f"\n[bold]Starting session[/bold]: {len(players)} players, "
                           f"blinds {self.config.small_blind}/{self.config.big_blind}")

        for hand_num in range(1, self.num_hands + 1):
            try:
                result = await self.machine.play_hand()
            except InsufficientPlayersError as e:
                self.console.print(f"\n[bold red]Session over after {hand_num - 1} hands:[/bold red] {e}")
                stopped_reason = "insufficient players"
                break

            self.hand_results.append(result)
            await self._reveal_pause()
            self.machine.acknowledge_reveal()

            if self.on_hand_complete:
                self.on_hand_complete(result)

            if hand_num % 10 == 0:
                self._print_progress(hand_num)

        return SessionResult(
            hands_played=len(self.hand_results),
            names=names,
            starting_stacks=starting,
            final_stacks={p.seat: p.stack for p in self.machine.players},
            stopped_reason=stopped_reason,
            hand_results=self.hand_results,
        )

    async def _reveal_pause(self) -> None:
        """Give observers time to see the revealed cards before the next hand."""
        if self.config.reveal_delay > 0:
            await asyncio.sleep(self.config.reveal_delay)

    def _print_progress(self, hand_num: int) -> None:
        stacks = " | ".join(f"{p.name}: {p.stack:,}" for p in self.machine.players)
        self.console.print(f"  Hand {hand_num}/{self.num_hands}: {stacks}")

    def print_result(self, result: SessionResult) -> None:
        """Print the session standings."""
        self.console.print("\n[bold]Session Complete![/bold]")

        table = Table(title="Final Stacks")
        table.add_column("Seat", justify="center")
        table.add_column("Player", style="cyan")
        table.add_column("Final Stack", justify="right")
        table.add_column("Profit/Loss", justify="right")

        for seat, stack in sorted(result.final_stacks.items(), key=lambda kv: kv[1], reverse=True):
            profit = result.profits[seat]
            color = "green" if profit >= 0 else "red"
            table.add_row(
                str(seat),
                result.names[seat],
                f"{stack:,}",
                f"[{color}]{profit:+,}[/{color}]",
            )

        self.console.print(table)
        self.console.print(f"\nHands played: {result.hands_played} ({result.stopped_reason})")
