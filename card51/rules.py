"""Rule enforcement for Card 51: the ``apply_action`` reducer."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from . import actions as act
from .actions import Action, ActionResult
from .cards import CardId
from .melds import MeldValidation, group_points, validate_meld
from .state import DrawSource, GameState, Phase, TableMeld

__all__ = [
    "IllegalAction",
    "IllegalDraw",
    "IllegalMeld",
    "IllegalDiscard",
    "apply_action",
    "draw_from_deck",
    "draw_from_discard",
    "open_melds",
    "lay_meld",
    "add_to_meld",
    "swap_joker",
    "pass_action",
    "discard_card",
]

logger = logging.getLogger(__name__)


class IllegalAction(RuntimeError):
    """Raised when an action breaks a rule; the message is shown to the actor."""


class IllegalDraw(IllegalAction):
    """Raised when a player attempts to draw illegally."""


class IllegalMeld(IllegalAction):
    """Raised when an opening, meld, extension or joker swap is illegal."""


class IllegalDiscard(IllegalAction):
    """Raised when a player attempts to discard illegally."""


def _ensure_player(state: GameState, player_index: int) -> None:
    if state.phase == Phase.GAME_OVER:
        raise IllegalAction("Game is over.")
    if player_index != state.current_turn:
        raise IllegalAction("Not your turn.")


def _ensure_phase(state: GameState, phase: Phase, error: type[IllegalAction] = IllegalAction) -> None:
    if state.phase != phase:
        raise error(f"Not in {phase.value} phase.")


def _ensure_in_hand(state: GameState, player_index: int, card_ids: Iterable[CardId]) -> None:
    hand = Counter(state.hands[player_index])
    needed = Counter(card_ids)
    if any(hand[card_id] < count for card_id, count in needed.items()):
        raise IllegalMeld("Card not in hand.")


def _ensure_distinct(card_ids: Sequence[CardId]) -> None:
    if len(set(card_ids)) != len(card_ids):
        raise IllegalMeld("Duplicate card across groups.")


def _ensure_keeps_card(state: GameState, player_index: int, removed: int) -> None:
    if len(state.hands[player_index]) - removed < 1:
        raise IllegalMeld("Must keep one card to discard.")


def _validate(state: GameState, card_ids: Sequence[CardId]) -> MeldValidation:
    return validate_meld([state.cards_by_id[card_id] for card_id in card_ids])


def _remove_from_hand(state: GameState, player_index: int, card_ids: Iterable[CardId]) -> None:
    hand = state.hands[player_index]
    for card_id in card_ids:
        hand.remove(card_id)
    state.sync_hand_count(player_index)


def _apply_validation(meld: TableMeld, result: MeldValidation) -> None:
    if result.kind is None:  # pragma: no cover - guarded by callers
        raise IllegalMeld(result.error or "Not a valid set or run.")
    meld.card_ids = list(result.ordered_ids)
    meld.kind = result.kind
    meld.ace_mode = result.ace_mode
    meld.joker_map = dict(result.joker_map)


def _new_meld(state: GameState, player_index: int, result: MeldValidation) -> TableMeld:
    if result.kind is None:  # pragma: no cover - guarded by callers
        raise IllegalMeld(result.error or "Not a valid set or run.")
    return TableMeld(
        id=state.next_meld_id(),
        owner=player_index,
        card_ids=list(result.ordered_ids),
        kind=result.kind,
        ace_mode=result.ace_mode,
        joker_map=dict(result.joker_map),
    )


def draw_from_deck(state: GameState, player_index: int) -> CardId:
    """Move the top of the draw pile into ``player_index``'s hand."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.DRAW, IllegalDraw)
    if not state.draw_pile:
        raise IllegalDraw("Deck empty.")

    card_id = state.draw_pile.pop()
    state.hands[player_index].append(card_id)
    state.sync_hand_count(player_index)
    state.last_drawn_card_id = card_id
    state.last_draw_source = DrawSource.DECK
    state.phase = Phase.ACTION
    return card_id


def draw_from_discard(state: GameState, player_index: int) -> CardId:
    """Take the discard pile's top card, or fall back to the deck.

    Only opened players may take the discard; everyone else, and anyone
    facing an empty discard pile, silently draws from the deck instead.
    """

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.DRAW, IllegalDraw)
    if not state.players[player_index].opened or not state.discard_pile:
        return draw_from_deck(state, player_index)

    card_id = state.discard_pile.pop()
    state.hands[player_index].append(card_id)
    state.sync_hand_count(player_index)
    state.last_drawn_card_id = card_id
    state.last_draw_source = DrawSource.DISCARD
    state.phase = Phase.ACTION
    return card_id


def open_melds(state: GameState, player_index: int, groups: Sequence[Sequence[CardId]]) -> list[TableMeld]:
    """Open ``player_index`` with one or more melds worth the opening threshold."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.ACTION, IllegalMeld)
    if state.players[player_index].opened:
        raise IllegalMeld("Already opened.")

    groups = [list(group) for group in groups]
    if not groups or any(not group for group in groups):
        raise IllegalMeld("No groups proposed.")

    all_ids = [card_id for group in groups for card_id in group]
    _ensure_distinct(all_ids)
    _ensure_in_hand(state, player_index, all_ids)

    if state.last_draw_source == DrawSource.DISCARD and state.last_drawn_card_id not in all_ids:
        raise IllegalMeld("Opening must include the discard-drawn card.")

    _ensure_keeps_card(state, player_index, len(all_ids))

    points = group_points([state.cards_by_id[card_id] for card_id in all_ids])
    threshold = state.config.open_points
    if points < threshold:
        raise IllegalMeld(f"Need {threshold}+ points to open.")

    results = [_validate(state, group) for group in groups]
    for result in results:
        if not result.ok:
            raise IllegalMeld(result.error or "Not a valid set or run.")

    _remove_from_hand(state, player_index, all_ids)
    created = [_new_meld(state, player_index, result) for result in results]
    state.table.extend(created)
    state.players[player_index].opened = True
    state.phase = Phase.DISCARD
    logger.info("player %d opened with %d meld(s) worth %d points", player_index, len(created), points)
    return created


def lay_meld(state: GameState, player_index: int, card_ids: Sequence[CardId]) -> TableMeld:
    """Lay a new meld for an already opened player."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.ACTION, IllegalMeld)
    if not state.players[player_index].opened:
        raise IllegalMeld("Must open first.")

    card_ids = list(card_ids)
    if not card_ids:
        raise IllegalMeld("No groups proposed.")
    _ensure_distinct(card_ids)
    _ensure_in_hand(state, player_index, card_ids)
    _ensure_keeps_card(state, player_index, len(card_ids))

    result = _validate(state, card_ids)
    if not result.ok:
        raise IllegalMeld(result.error or "Not a valid set or run.")

    _remove_from_hand(state, player_index, card_ids)
    meld = _new_meld(state, player_index, result)
    state.table.append(meld)
    state.phase = Phase.DISCARD
    return meld


def add_to_meld(state: GameState, player_index: int, meld_id: str, card_ids: Sequence[CardId]) -> TableMeld:
    """Extend a table meld with cards from hand, rolling back when the result is invalid."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.ACTION, IllegalMeld)
    if not state.players[player_index].opened:
        raise IllegalMeld("Must open first.")

    meld = state.find_meld(meld_id)
    if meld is None:
        raise IllegalMeld("Meld not found.")

    card_ids = list(card_ids)
    if not card_ids:
        raise IllegalMeld("No cards to add.")
    _ensure_distinct(card_ids)
    _ensure_in_hand(state, player_index, card_ids)
    _ensure_keeps_card(state, player_index, len(card_ids))

    hand_before = list(state.hands[player_index])
    _remove_from_hand(state, player_index, card_ids)

    result = _validate(state, meld.card_ids + card_ids)
    if not result.ok:
        state.hands[player_index][:] = hand_before
        state.sync_hand_count(player_index)
        raise IllegalMeld(result.error or "Not a valid set or run.")

    _apply_validation(meld, result)
    state.phase = Phase.DISCARD
    return meld


def swap_joker(
    state: GameState,
    player_index: int,
    meld_id: str,
    joker_id: CardId,
    replace_with_id: CardId,
) -> TableMeld:
    """Trade the card a joker stands for against that joker.

    The replacement must match the joker's recorded substitution exactly.
    The joker goes back to the actor's hand and the turn stays in ACTION.
    """

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.ACTION, IllegalMeld)
    if not state.players[player_index].opened:
        raise IllegalMeld("Must open first.")

    meld = state.find_meld(meld_id)
    if meld is None:
        raise IllegalMeld("Meld not found.")
    if joker_id not in meld.card_ids:
        raise IllegalMeld("Joker not in meld.")
    represented = meld.joker_map.get(joker_id)
    if represented is None:
        raise IllegalMeld("No joker substitution recorded.")

    _ensure_in_hand(state, player_index, [replace_with_id])
    replacement = state.cards_by_id[replace_with_id]
    if replacement.suit != represented.suit or replacement.rank != represented.rank:
        raise IllegalMeld("Replacement does not match the joker.")

    hand = state.hands[player_index]
    hand_before = list(hand)
    meld_before = meld.copy()

    position = meld.card_ids.index(joker_id)
    hand.remove(replace_with_id)
    meld.card_ids[position] = replace_with_id
    hand.append(joker_id)
    state.sync_hand_count(player_index)

    result = _validate(state, meld.card_ids)
    if not result.ok:
        hand[:] = hand_before
        meld.card_ids = meld_before.card_ids
        state.sync_hand_count(player_index)
        raise IllegalMeld(result.error or "Not a valid set or run.")

    _apply_validation(meld, result)
    return meld


def pass_action(state: GameState, player_index: int) -> None:
    """Skip the meld step and move to the discard."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.ACTION)
    state.phase = Phase.DISCARD


def discard_card(state: GameState, player_index: int, card_id: CardId) -> None:
    """Discard ``card_id``; an emptied hand wins, otherwise the turn passes on."""

    _ensure_player(state, player_index)
    _ensure_phase(state, Phase.DISCARD, IllegalDiscard)
    hand = state.hands[player_index]
    if card_id not in hand:
        raise IllegalDiscard("Card not in hand.")

    hand.remove(card_id)
    state.sync_hand_count(player_index)
    state.discard_pile.append(card_id)

    if not hand:
        state.winner = player_index
        state.phase = Phase.GAME_OVER
        logger.info("player %d went out and wins the hand", player_index)
        return

    state.current_turn = (state.current_turn + 1) % state.num_players
    state.phase = Phase.DRAW
    state.last_drawn_card_id = None
    state.last_draw_source = None


def _dispatch(state: GameState, action: Action) -> None:
    player = action.player
    if isinstance(action, act.DrawDeck):
        draw_from_deck(state, player)
    elif isinstance(action, act.DrawDiscard):
        draw_from_discard(state, player)
    elif isinstance(action, act.OpenGroup):
        open_melds(state, player, [action.card_ids])
    elif isinstance(action, act.OpenMulti):
        open_melds(state, player, action.groups)
    elif isinstance(action, act.LayMeld):
        lay_meld(state, player, action.card_ids)
    elif isinstance(action, act.AddToMeld):
        add_to_meld(state, player, action.meld_id, action.card_ids)
    elif isinstance(action, act.SwapJoker):
        swap_joker(state, player, action.meld_id, action.joker_id, action.replace_with_id)
    elif isinstance(action, act.PassAction):
        pass_action(state, player)
    elif isinstance(action, act.Discard):
        discard_card(state, player, action.card_id)
    else:  # pragma: no cover - guarded by apply_action
        raise IllegalAction("Unknown action.")


def apply_action(state: GameState, action: Action) -> ActionResult:
    """Validate and apply ``action`` to ``state`` in place.

    Rejections are returned as ``ActionResult(ok=False, error=...)`` and
    leave ``state`` exactly as it was.
    """

    if not isinstance(action, act.ACTION_TYPES):
        return ActionResult(ok=False, error="Unknown action.")

    try:
        _dispatch(state, action)
    except IllegalAction as exc:
        logger.debug("player %s %s rejected: %s", action.player, action.kind.value, exc)
        return ActionResult(ok=False, error=str(exc))

    logger.debug("player %d %s -> %s", action.player, action.kind.value, state.phase.value)
    return ActionResult(ok=True)
