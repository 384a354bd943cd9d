"""Scripted heuristic player that drives the reducer like any other client."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import List, Sequence

from . import actions as act
from .actions import Action, ActionResult
from .candidates import MeldCandidate, find_valid_melds
from .cards import Card, CardId, RANK_ORDER
from .melds import validate_meld
from .rules import apply_action
from .state import DrawSource, GameState, Phase

__all__ = ["choose_action", "bot_step"]

logger = logging.getLogger(__name__)


def _top_discard_helps(state: GameState, player_index: int) -> bool:
    """Return ``True`` if the discard top would complete a meld or extend the table."""

    top = state.discard_top()
    if top is None:
        return False
    top_card = state.card(top)
    hand = state.hand_cards(player_index)
    for first, second in combinations(hand, 2):
        if validate_meld([first, second, top_card]).ok:
            return True
    for meld in state.table:
        if validate_meld([state.card(card_id) for card_id in meld.card_ids] + [top_card]).ok:
            return True
    return False


def _choose_draw(state: GameState, player_index: int) -> Action:
    if DrawSource.DISCARD in act.legal_draw_actions(state, player_index) and _top_discard_helps(
        state, player_index
    ):
        return act.DrawDiscard(player_index)
    return act.DrawDeck(player_index)


def _choose_opening(
    candidates: Sequence[MeldCandidate],
    hand_size: int,
    threshold: int,
    required_card: CardId | None,
) -> list[MeldCandidate] | None:
    """Greedily pick disjoint melds worth ``threshold`` that leave one card in hand."""

    ranked = sorted(candidates, key=lambda candidate: (candidate.points, len(candidate)), reverse=True)
    seeds = [c for c in ranked if required_card is None or required_card in c]
    for seed in seeds:
        chosen = [seed]
        used = set(seed.card_ids)
        points = seed.points
        for candidate in ranked:
            if points >= threshold:
                break
            if used.intersection(candidate.card_ids):
                continue
            if len(used) + len(candidate) >= hand_size:
                continue
            chosen.append(candidate)
            used.update(candidate.card_ids)
            points += candidate.points
        if points >= threshold and len(used) < hand_size:
            return chosen
    return None


def _find_joker_swap(state: GameState, player_index: int) -> Action | None:
    hand = state.hands[player_index]
    for meld in state.table:
        for joker_id, represented in sorted(meld.joker_map.items()):
            for card_id in hand:
                card = state.card(card_id)
                if card.suit == represented.suit and card.rank == represented.rank:
                    return act.SwapJoker(player_index, meld.id, joker_id, card_id)
    return None


def _find_extension(state: GameState, player_index: int) -> Action | None:
    hand = state.hands[player_index]
    if len(hand) < 2:
        return None
    for card_id in sorted(hand, key=lambda cid: state.card(cid).is_joker):
        card = state.card(card_id)
        for meld in state.table:
            cards = [state.card(existing) for existing in meld.card_ids] + [card]
            if validate_meld(cards).ok:
                return act.AddToMeld(player_index, meld.id, (card_id,))
    return None


def _choose_play(state: GameState, player_index: int) -> Action:
    hand = state.hands[player_index]
    candidates = [c for c in find_valid_melds(hand, state.cards_by_id) if len(c) < len(hand)]

    if not state.players[player_index].opened:
        required = state.last_drawn_card_id if state.last_draw_source == DrawSource.DISCARD else None
        chosen = _choose_opening(candidates, len(hand), state.config.open_points, required)
        if chosen is None:
            return act.PassAction(player_index)
        if len(chosen) == 1:
            return act.OpenGroup(player_index, chosen[0].card_ids)
        return act.OpenMulti(player_index, tuple(candidate.card_ids for candidate in chosen))

    swap = _find_joker_swap(state, player_index)
    if swap is not None:
        return swap
    if candidates:
        best = max(candidates, key=lambda candidate: (len(candidate), candidate.points))
        return act.LayMeld(player_index, best.card_ids)
    extension = _find_extension(state, player_index)
    if extension is not None:
        return extension
    return act.PassAction(player_index)


def _discard_score(card: Card, hand: Sequence[Card]) -> tuple[float, int]:
    """Higher scores are discarded first: heavy cards without partners."""

    if card.is_joker:
        return (-100.0, card.id)
    same_rank = sum(1 for other in hand if other.id != card.id and other.rank == card.rank)
    rank_pos = RANK_ORDER.index(card.rank)
    neighbours = sum(
        1
        for other in hand
        if not other.is_joker
        and other.suit == card.suit
        and abs(RANK_ORDER.index(other.rank) - rank_pos) == 1
    )
    return (card.points - same_rank * 1.5 - neighbours * 3.0, card.id)


def _choose_discard(state: GameState, player_index: int) -> Action:
    hand = state.hand_cards(player_index)
    best = max(hand, key=lambda card: _discard_score(card, hand))
    return act.Discard(player_index, best.id)


def choose_action(state: GameState, player_index: int) -> Action:
    """Return the action the bot would submit for ``player_index`` right now."""

    if state.phase == Phase.DRAW:
        return _choose_draw(state, player_index)
    if state.phase == Phase.ACTION:
        return _choose_play(state, player_index)
    return _choose_discard(state, player_index)


def bot_step(state: GameState, player_index: int, history: List[Action] | None = None) -> ActionResult:
    """Choose and apply one action for ``player_index``.

    A rejected meld choice falls back to passing so the turn can still
    reach its discard. Applied actions are appended to ``history``.
    """

    if state.phase == Phase.GAME_OVER:
        return ActionResult(ok=False, error="Game is over.")
    if state.current_turn != player_index:
        return ActionResult(ok=False, error="Not your turn.")

    action = choose_action(state, player_index)
    result = apply_action(state, action)
    if not result.ok and state.phase == Phase.ACTION:
        logger.warning("bot %d choice %s rejected (%s); passing", player_index, action.kind.value, result.error)
        action = act.PassAction(player_index)
        result = apply_action(state, action)
    if result.ok and history is not None:
        history.append(action)
    return result
