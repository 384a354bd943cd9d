"""Composable view primitives for the Card 51 CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence, Set

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import CardId
from ..state import GameState, Phase


@dataclass(slots=True)
class StateSummaryView:
    """Renderable summarising the current table state."""

    state: GameState
    roles: Sequence[str]
    reveal_players: Set[int]
    card_formatter: Callable[[CardId], str]

    def _hand_markup(self, cards: Sequence[CardId], visible: bool) -> str:
        if not visible:
            return f"{len(cards)} cards"
        if not cards:
            return "—"
        return " ".join(self.card_formatter(card) for card in cards)

    def _metadata_panel(self) -> Panel:
        state = self.state
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Phase[/cyan]: {state.phase.value}")
        grid.add_row(f"[cyan]Deck[/cyan]: {state.draw_count} card(s)")
        top = state.discard_top()
        if top is not None:
            grid.add_row(
                f"[cyan]Discard[/cyan]: {self.card_formatter(top)} ({len(state.discard_pile)} card(s))"
            )
        else:
            grid.add_row("[cyan]Discard[/cyan]: —")
        grid.add_row(f"[cyan]Open at[/cyan]: {state.config.open_points}+")
        return Panel(grid, title="Table State", box=box.SQUARE, border_style="blue")

    def _meld_panel(self) -> Panel:
        meld_table = Table(box=box.MINIMAL, expand=True)
        meld_table.add_column("Meld", justify="left", style="bold")
        meld_table.add_column("Owner", justify="left")
        meld_table.add_column("Kind", justify="left")
        meld_table.add_column("Cards", justify="left")
        meld_table.add_column("Jokers", justify="left")

        for meld in self.state.table:
            kind_label = meld.kind.value.title()
            if meld.ace_mode is not None:
                kind_label += f" (ace {meld.ace_mode.value.lower()})"
            cards_display = " ".join(self.card_formatter(card) for card in meld.card_ids)
            jokers = ", ".join(f"{rep.rank.value}{rep.suit.value}" for _, rep in sorted(meld.joker_map.items()))
            meld_table.add_row(meld.id, f"P{meld.owner}", kind_label, cards_display, jokers)

        return Panel(meld_table, title="Table Melds", box=box.SQUARE, border_style="green")

    def render(self) -> RenderableType:
        state = self.state
        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Player", justify="left", style="bold")
        table.add_column("Role", justify="left")
        table.add_column("Hand", justify="left")
        table.add_column("Status", justify="left")

        for idx, player in enumerate(state.players):
            role = self.roles[idx] if idx < len(self.roles) else "Bot"
            hand_display = self._hand_markup(state.hands[idx], idx in self.reveal_players)

            status_text = "Opened" if player.opened else "Closed"
            if state.winner == idx:
                status_text = "[bold green]Winner[/bold green]"

            name = f"P{idx}"
            if idx == state.current_turn and state.phase != Phase.GAME_OVER:
                name = f"[bold yellow]{name}[/bold yellow]"

            table.add_row(name, role, hand_display, status_text)

        components: list[RenderableType] = [table, self._metadata_panel()]
        if state.table:
            components.append(self._meld_panel())
        return Group(*components)
