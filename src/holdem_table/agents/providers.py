"""Decision providers: the seats' side of the turn loop."""

import asyncio
import random
from collections import deque
from collections.abc import Iterable

from rich.console import Console
from rich.prompt import Prompt

from holdem_table.agents.action_parser import ActionParser
from holdem_table.engine.actions import Action, ActionType, DecisionContext
from holdem_table.engine.deck import format_cards
from holdem_table.observability.logger import get_logger

logger = get_logger(__name__)


class CallingStation:
    """Calls (or checks) every time."""

    def decide(self, context: DecisionContext) -> Action:
        return Action.call()


class RandomProvider:
    """Picks uniformly among the legal action types; bet sizes are uniform too."""

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        self.rng = rng or random.Random(seed)

    def decide(self, context: DecisionContext) -> Action:
        choice = self.rng.choice(context.legal_actions)
        if choice.action_type is ActionType.BET:
            return Action.bet(self.rng.randint(choice.min_amount, choice.max_amount))
        return Action(choice.action_type)


class ScriptedProvider:
    """
    Replays a fixed sequence of actions.

    Once the script runs out, ``fallback`` is returned; with no fallback
    an exhausted script raises IndexError.
    """

    def __init__(self, actions: Iterable[Action], fallback: Action | None = None):
        self.script = deque(actions)
        self.fallback = fallback
        self.seen: list[DecisionContext] = []

    def decide(self, context: DecisionContext) -> Action:
        self.seen.append(context)
        if self.script:
            return self.script.popleft()
        if self.fallback is None:
            raise IndexError(f"Script exhausted for seat {context.seat}")
        return self.fallback


def describe_context(context: DecisionContext) -> str:
    """Build a short text description of the decision for a human player."""
    lines = [
        f"Hand #{context.hand_number} - {context.stage.upper()}",
        f"Your cards: {format_cards(context.hole_cards)}",
        f"Board: {format_cards(context.community_cards) or '(none)'}",
        f"Pot: {context.pot:,} | Stack: {context.stack:,} | To call: {context.amount_to_call:,}",
    ]
    for opponent in context.opponents:
        lines.append(
            f"  Seat {opponent.seat} {opponent.name}: stack {opponent.stack:,}, "
            f"in {opponent.round_contribution:,} ({opponent.status.value})"
        )

    options = []
    for legal in context.legal_actions:
        if legal.action_type is ActionType.CALL:
            options.append("check" if legal.amount == 0 else f"call {legal.amount:,}")
        elif legal.action_type is ActionType.BET:
            options.append(f"bet {legal.min_amount:,}-{legal.max_amount:,}")
        else:
            options.append(legal.action_type.value)
    lines.append("Options: " + ", ".join(options))
    return "\n".join(lines)


class ConsoleProvider:
    """Asks a human at the terminal; input is read off the event loop thread."""

    def __init__(self, console: Console | None = None, max_attempts: int = 3):
        self.console = console or Console()
        self.max_attempts = max_attempts

    async def decide(self, context: DecisionContext) -> Action:
        self.console.print(f"\n[bold]{describe_context(context)}[/bold]")

        for _ in range(self.max_attempts):
            text = await asyncio.to_thread(Prompt.ask, "Your action", console=self.console)
            parsed = ActionParser.parse(text, context)
            if parsed.success:
                return parsed.action
            self.console.print(f"[red]{parsed.error}[/red]")

        parsed = ActionParser.get_default_action(context)
        logger.warning(parsed.error, extra={"extra_fields": {"seat": context.seat}})
        return parsed.action
