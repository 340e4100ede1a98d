"""CLI interface for the Hold'em table."""

import asyncio
import random
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from holdem_table.agents.providers import CallingStation, ConsoleProvider, RandomProvider
from holdem_table.config import TableConfig, settings
from holdem_table.observability.logger import setup_logging
from holdem_table.table.session import TableSession

app = typer.Typer(
    name="holdem",
    help="Texas Hold'em table - play hands against simple bots",
    add_completion=False,
)
console = Console()

BOT_STYLES = ("random", "caller")


def bot_style_callback(value: str) -> str:
    """Validate bot style."""
    if value not in BOT_STYLES:
        raise typer.BadParameter(f"Bot style must be one of {', '.join(BOT_STYLES)}, got: {value}")
    return value


@app.command()
def play(
    players: int = typer.Option(
        3,
        "--players", "-p",
        help="Number of players at the table (including you with --human)",
    ),
    hands: int = typer.Option(
        10,
        "--hands", "-n",
        help="Maximum number of hands to play",
    ),
    stack: Optional[int] = typer.Option(
        None,
        "--stack", "-s",
        help="Buy-in for each player",
    ),
    small_blind: Optional[int] = typer.Option(
        None,
        "--sb",
        help="Small blind amount",
    ),
    big_blind: Optional[int] = typer.Option(
        None,
        "--bb",
        help="Big blind amount",
    ),
    reveal_delay: Optional[float] = typer.Option(
        None,
        "--reveal-delay",
        help="Seconds to show revealed cards between hands",
    ),
    bots: str = typer.Option(
        "random",
        "--bots", "-b",
        help="Bot style: random or caller",
        callback=bot_style_callback,
    ),
    human: bool = typer.Option(
        False,
        "--human",
        help="Take seat 0 yourself",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for shuffles and bots",
    ),
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        help="Log level for engine events",
    ),
):
    """Play hands at a single table."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        config = TableConfig.from_settings(
            buy_in=stack,
            small_blind=small_blind,
            big_blind=big_blind,
            reveal_delay=reveal_delay,
        )
    except ValueError as e:
        console.print(f"[red]Invalid table configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not 2 <= players <= config.max_seats:
        console.print(f"[red]Players must be between 2 and {config.max_seats}[/red]")
        raise typer.Exit(1)

    rng = random.Random(seed)
    seats = []
    for i in range(players):
        if human and i == 0:
            seats.append(("You", ConsoleProvider(console)))
        elif bots == "caller":
            seats.append((f"Bot{i}", CallingStation()))
        else:
            seats.append((f"Bot{i}", RandomProvider(rng=random.Random(rng.random()))))

    async def run():
        session = TableSession(
            config=config,
            seats=seats,
            num_hands=hands,
            seed=seed,
            on_hand_complete=_print_hand,
            console=console,
        )
        result = await session.run()
        session.print_result(result)

    asyncio.run(run())


def _print_hand(result) -> None:
    winners = ", ".join(f"seat {s} (+{result.payouts[s]:,})" for s in result.winners)
    how = "uncontested" if result.decided_by_elimination else "showdown"
    console.print(
        f"  Hand #{result.hand_number}: board {result.board_cards or '-'} | "
        f"pot {result.pot:,} | {winners} [{how}]"
    )


@app.command()
def config():
    """Show current configuration."""
    console.print("\n[bold]Current Configuration[/bold]")

    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Buy-in", f"{settings.buy_in:,}")
    table.add_row("Small Blind", f"{settings.small_blind:,}")
    table.add_row("Big Blind", f"{settings.big_blind:,}")
    table.add_row("Max Seats", str(settings.max_seats))
    table.add_row("Reveal Delay", f"{settings.reveal_delay}s")
    table.add_row("Decision Retries", str(settings.decision_retries))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
