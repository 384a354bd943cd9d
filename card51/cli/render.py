"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import RenderableType
from rich.panel import Panel

from .. import actions as act
from .. import encoding
from ..actions import Action
from ..cards import CardId, Suit
from ..state import GameState
from .views import StateSummaryView

_SUIT_SYMBOLS = {
    Suit.CLUBS: ("♣", "green"),
    Suit.DIAMONDS: ("♦", "magenta"),
    Suit.HEARTS: ("♥", "red"),
    Suit.SPADES: ("♠", "cyan"),
}


def format_card(card_id: CardId) -> str:
    """Return a Rich-rendered label for ``card_id``."""

    card = encoding.decode_id(card_id)
    if card.is_joker:
        return "[bold magenta]🃏[/bold magenta]"
    symbol, color = _SUIT_SYMBOLS[card.suit]
    suffix = "′" if encoding.copy_index(card_id) == 1 else ""
    return f"[{color}]{card.rank.value}{symbol}{suffix}[/{color}]"


def format_cards(card_ids: Iterable[CardId]) -> str:
    return " ".join(format_card(card_id) for card_id in card_ids)


def describe_action(action: Action) -> str:
    """Return a one-line markup description of an applied action."""

    actor = f"[cyan]P{action.player}[/cyan]"
    if isinstance(action, act.DrawDeck):
        return f"{actor} draws from the deck"
    if isinstance(action, act.DrawDiscard):
        return f"{actor} takes the discard"
    if isinstance(action, act.OpenGroup):
        return f"{actor} opens with {format_cards(action.card_ids)}"
    if isinstance(action, act.OpenMulti):
        groups = " | ".join(format_cards(group) for group in action.groups)
        return f"{actor} opens with {groups}"
    if isinstance(action, act.LayMeld):
        return f"{actor} lays {format_cards(action.card_ids)}"
    if isinstance(action, act.AddToMeld):
        return f"{actor} adds {format_cards(action.card_ids)} to {action.meld_id}"
    if isinstance(action, act.SwapJoker):
        return f"{actor} swaps {format_card(action.replace_with_id)} for the joker in {action.meld_id}"
    if isinstance(action, act.Discard):
        return f"{actor} discards {format_card(action.card_id)}"
    return f"{actor} passes"


def render_state(
    state: GameState,
    roles: Sequence[str],
    *,
    reveal_players: Iterable[int] | None = None,
    title: str = "Card 51",
) -> RenderableType:
    """Return a Rich panel describing the current table state."""

    view = StateSummaryView(
        state=state,
        roles=roles,
        reveal_players=set(reveal_players or set()),
        card_formatter=format_card,
    )
    return Panel(view.render(), title=title, padding=(0, 1), border_style="cyan")
