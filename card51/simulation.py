"""Bot-only hand driver used by the CLI and the conservation tests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

from .actions import Action
from .bot import bot_step
from .state import Card51Config, GameState, Phase, check_conservation, new_game

__all__ = ["StopReason", "HandReport", "play_hand"]

logger = logging.getLogger(__name__)

DEFAULT_TURN_LIMIT = 400


class StopReason(str, Enum):
    WON = "won"
    DECK_EXHAUSTED = "deck_exhausted"
    TURN_LIMIT = "turn_limit"


@dataclass(slots=True)
class HandReport:
    """Outcome of a simulated hand."""

    state: GameState
    stop_reason: StopReason
    turns: int
    history: List[Action] = field(default_factory=list)

    @property
    def winner(self) -> int | None:
        return self.state.winner


def play_hand(
    config: Card51Config,
    *,
    seed: int | None = None,
    turn_limit: int = DEFAULT_TURN_LIMIT,
    state: GameState | None = None,
    on_step: Callable[[GameState], None] | None = None,
) -> HandReport:
    """Let bots play one hand until someone goes out or play cannot continue.

    The draw pile is never rebuilt from the discard pile, so a hand that
    exhausts the deck stops with ``StopReason.DECK_EXHAUSTED``.
    ``on_step`` is called after every applied action.
    """

    if turn_limit <= 0:
        raise ValueError("turn_limit must be positive")

    game_state = state if state is not None else new_game(config, seed)
    history: list[Action] = []
    turns = 0

    while game_state.phase != Phase.GAME_OVER:
        if turns >= turn_limit:
            logger.info("hand stopped after %d turns without a winner", turns)
            return HandReport(game_state, StopReason.TURN_LIMIT, turns, history)

        current = game_state.current_turn
        result = bot_step(game_state, current, history)
        if not result.ok:
            if game_state.phase == Phase.DRAW and not game_state.draw_pile:
                logger.info("draw pile exhausted after %d turns", turns)
                return HandReport(game_state, StopReason.DECK_EXHAUSTED, turns, history)
            raise RuntimeError(f"bot {current} could not act: {result.error}")

        if not check_conservation(game_state):  # pragma: no cover - ledger corruption
            raise RuntimeError("card ledger violated during simulation")
        if on_step is not None:
            on_step(game_state)
        if game_state.current_turn != current or game_state.phase == Phase.GAME_OVER:
            turns += 1

    return HandReport(game_state, StopReason.WON, turns, history)
