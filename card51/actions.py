"""Action types accepted by the Card 51 reducer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .cards import CardId
from .state import DrawSource, GameState, Phase

__all__ = [
    "ActionKind",
    "DrawDeck",
    "DrawDiscard",
    "OpenGroup",
    "OpenMulti",
    "LayMeld",
    "AddToMeld",
    "SwapJoker",
    "Discard",
    "PassAction",
    "Action",
    "ActionResult",
    "legal_draw_actions",
]


class ActionKind(str, Enum):
    DRAW_DECK = "DRAW_DECK"
    DRAW_DISCARD = "DRAW_DISCARD"
    OPEN_GROUP = "OPEN_GROUP"
    OPEN_MULTI = "OPEN_MULTI"
    LAY_MELD = "LAY_MELD"
    ADD_TO_MELD = "ADD_TO_MELD"
    SWAP_JOKER = "SWAP_JOKER"
    DISCARD = "DISCARD"
    PASS_ACTION = "PASS_ACTION"


@dataclass(frozen=True)
class DrawDeck:
    """Take the top card of the draw pile."""

    player: int
    kind = ActionKind.DRAW_DECK


@dataclass(frozen=True)
class DrawDiscard:
    """Take the top card of the discard pile (opened players only)."""

    player: int
    kind = ActionKind.DRAW_DISCARD


@dataclass(frozen=True)
class OpenGroup:
    """Open with a single meld worth at least the opening threshold."""

    player: int
    card_ids: tuple[CardId, ...]
    kind = ActionKind.OPEN_GROUP


@dataclass(frozen=True)
class OpenMulti:
    """Open with several melds whose combined value reaches the threshold."""

    player: int
    groups: tuple[tuple[CardId, ...], ...]
    kind = ActionKind.OPEN_MULTI


@dataclass(frozen=True)
class LayMeld:
    player: int
    card_ids: tuple[CardId, ...]
    kind = ActionKind.LAY_MELD


@dataclass(frozen=True)
class AddToMeld:
    player: int
    meld_id: str
    card_ids: tuple[CardId, ...]
    kind = ActionKind.ADD_TO_MELD


@dataclass(frozen=True)
class SwapJoker:
    """Replace ``joker_id`` in a table meld with the card it stands for."""

    player: int
    meld_id: str
    joker_id: CardId
    replace_with_id: CardId
    kind = ActionKind.SWAP_JOKER


@dataclass(frozen=True)
class Discard:
    player: int
    card_id: CardId
    kind = ActionKind.DISCARD


@dataclass(frozen=True)
class PassAction:
    player: int
    kind = ActionKind.PASS_ACTION


Action = Union[DrawDeck, DrawDiscard, OpenGroup, OpenMulti, LayMeld, AddToMeld, SwapJoker, Discard, PassAction]
ACTION_TYPES = (DrawDeck, DrawDiscard, OpenGroup, OpenMulti, LayMeld, AddToMeld, SwapJoker, Discard, PassAction)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of :func:`card51.rules.apply_action`."""

    ok: bool
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


def legal_draw_actions(state: GameState, player_index: int) -> list[DrawSource]:
    """Return the draw sources that would actually be used by ``player_index`` now.

    An unopened player, or any player facing an empty discard pile, only
    ever draws from the deck even when asking for the discard pile.
    """

    if state.phase != Phase.DRAW or state.current_turn != player_index:
        return []

    sources: list[DrawSource] = []
    if state.draw_pile:
        sources.append(DrawSource.DECK)
    if state.players[player_index].opened and state.discard_pile:
        sources.append(DrawSource.DISCARD)
    return sources
