"""Typer entry-point wiring for the Card 51 CLI."""

from __future__ import annotations

from typing import List

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .. import candidates, encoding, melds, simulation, state
from ..logging_utils import LOG_LEVEL, setup_logging
from .render import describe_action, format_card, format_cards, render_state

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()

MAX_EVENT_LOG = 12


def _parse_hand(codes: List[str]) -> list[int]:
    try:
        card_ids = encoding.parse_codes(codes)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    seen: set[int] = set()
    for code, card_id in zip(codes, card_ids):
        if card_id in seen:
            raise typer.BadParameter(f"card '{code}' given more than once")
        seen.add(card_id)
    return card_ids


@app.callback()
def configure(
    log_level: str = typer.Option(LOG_LEVEL, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)."),
) -> None:
    """Card 51 rules engine tools."""

    setup_logging(log_level)


@app.command("simulate")
def simulate_cli(
    players: int = typer.Option(2, min=2, max=4, help="Number of seated bots."),
    seed: int | None = typer.Option(None, help="Random seed for reproducible hands (omit for randomness)."),
    turn_limit: int = typer.Option(simulation.DEFAULT_TURN_LIMIT, min=1, help="Stop after this many turns."),
    open_points: int = typer.Option(51, min=1, help="Points needed to open."),
    show_events: bool = typer.Option(
        True,
        "--events/--no-events",
        help="Print the last applied actions of the hand.",
    ),
) -> None:
    """Play one bot-only hand and print the final table."""

    config = state.Card51Config(num_players=players, open_points=open_points)
    report = simulation.play_hand(config, seed=seed, turn_limit=turn_limit)

    if show_events and report.history:
        for action in report.history[-MAX_EVENT_LOG:]:
            console.print(describe_action(action))

    roles = ["Bot"] * players
    console.print(render_state(report.state, roles, reveal_players=range(players)))

    if report.winner is not None:
        console.print(f"[bold green]P{report.winner} went out after {report.turns} turn(s).[/bold green]")
    else:
        console.print(f"[yellow]No winner: {report.stop_reason.value} after {report.turns} turn(s).[/yellow]")

    if not state.check_conservation(report.state):  # pragma: no cover - ledger corruption
        raise typer.Exit(code=1)


@app.command("validate")
def validate_cli(
    codes: List[str] = typer.Argument(..., help="Card codes such as 8C 10H#1 JK#0."),
) -> None:
    """Check whether the given cards form a valid set or run."""

    card_ids = _parse_hand(codes)
    result = melds.validate_meld([encoding.decode_id(card_id) for card_id in card_ids])
    if not result.ok:
        console.print(f"[red]Invalid:[/red] {result.error}")
        raise typer.Exit(code=1)

    label = result.kind.value.title()
    if result.ace_mode is not None:
        label += f" (ace {result.ace_mode.value.lower()})"
    console.print(f"[green]Valid {label}[/green]: {format_cards(result.ordered_ids)}")
    for joker, represented in sorted(result.joker_map.items()):
        console.print(f"  {format_card(joker)} stands for {represented.rank.value}{represented.suit.value}")
    points = melds.group_points([encoding.decode_id(card_id) for card_id in card_ids])
    console.print(f"[cyan]Points[/cyan]: {points}")


@app.command("melds")
def melds_cli(
    codes: List[str] = typer.Argument(..., help="Hand as card codes such as 8C 10H#1 JK#0."),
    threshold: int | None = typer.Option(None, help="Only list candidates worth at least this many points."),
) -> None:
    """List every valid meld that can be formed from a hand."""

    card_ids = _parse_hand(codes)
    if threshold is None:
        found = candidates.find_valid_melds(card_ids)
    else:
        found = candidates.opening_candidates(card_ids, threshold)

    if not found:
        console.print("[yellow]No melds available.[/yellow]")
        return

    table = Table(title="Meld Candidates", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right")
    table.add_column("Kind", justify="left")
    table.add_column("Cards", justify="left")
    table.add_column("Points", justify="right")
    for idx, candidate in enumerate(found, start=1):
        label = candidate.kind.value.title()
        if candidate.ace_mode is not None:
            label += f" ({candidate.ace_mode.value.lower()})"
        table.add_row(str(idx), label, format_cards(candidate.ordered_ids), str(candidate.points))
    console.print(table)


def main() -> None:
    """Entry-point for ``python -m card51.cli.main``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
