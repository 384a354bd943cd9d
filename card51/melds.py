"""Set and run validation with canonical joker assignment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from .cards import SUIT_ORDER, AceMode, Card, CardId, Rank, Suit, index_to_rank, rank_index, total_points

__all__ = [
    "MeldKind",
    "JokerRep",
    "MeldValidation",
    "validate_set",
    "validate_run",
    "validate_meld",
    "group_points",
]

SET_SIZES = (3, 4)
MIN_RUN_SIZE = 3


class MeldKind(str, Enum):
    """The two meld shapes recognised by the validator."""

    SET = "SET"
    RUN = "RUN"


@dataclass(frozen=True, slots=True)
class JokerRep:
    """The suit and rank a joker stands for inside a meld."""

    suit: Suit
    rank: Rank


@dataclass(frozen=True, slots=True)
class MeldValidation:
    """Outcome of validating a group of cards.

    On success ``kind``, ``ordered_ids`` and ``joker_map`` describe the
    canonical meld (``ace_mode`` is only set for runs). On failure only
    ``error`` is meaningful.
    """

    ok: bool
    kind: MeldKind | None = None
    ace_mode: AceMode | None = None
    ordered_ids: tuple[CardId, ...] = ()
    joker_map: Mapping[CardId, JokerRep] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> "MeldValidation":
        return cls(ok=False, error=error)


def _split(cards: Sequence[Card]) -> tuple[list[Card], list[Card]]:
    jokers = [card for card in cards if card.is_joker]
    non_jokers = [card for card in cards if not card.is_joker]
    return jokers, non_jokers


def validate_set(cards: Sequence[Card]) -> MeldValidation:
    """Validate ``cards`` as a same-rank, distinct-suit set of three or four."""

    if len(cards) not in SET_SIZES:
        return MeldValidation.failure("Set must be size 3 or 4.")

    jokers, non_jokers = _split(cards)
    if not non_jokers:
        return MeldValidation.failure("Set must have at least one non-joker card.")

    rank = non_jokers[0].rank
    if any(card.rank is not rank for card in non_jokers):
        return MeldValidation.failure("Set ranks must match.")

    suits: set[Suit] = set()
    for card in non_jokers:
        if card.suit in suits:
            return MeldValidation.failure("Duplicate suit in set.")
        suits.add(card.suit)

    if len(suits) + len(jokers) != len(cards):
        return MeldValidation.failure("Invalid set size.")

    missing = [suit for suit in SUIT_ORDER if suit not in suits]
    joker_ids = sorted(card.id for card in jokers)
    if len(joker_ids) > len(missing):
        return MeldValidation.failure("Too many jokers for set.")
    joker_map = {joker: JokerRep(suit, rank) for joker, suit in zip(joker_ids, missing)}

    ordered_non = sorted(non_jokers, key=lambda card: SUIT_ORDER.index(card.suit))
    ordered_ids = tuple(card.id for card in ordered_non) + tuple(joker_ids)
    return MeldValidation(ok=True, kind=MeldKind.SET, ordered_ids=ordered_ids, joker_map=joker_map)


def _run_bounds(ace_mode: AceMode) -> tuple[int, int]:
    if ace_mode is AceMode.HIGH:
        return 2, 14
    return 1, 13


def validate_run(cards: Sequence[Card], ace_mode: AceMode) -> MeldValidation:
    """Validate ``cards`` as a same-suit consecutive run under ``ace_mode``.

    The run occupies the lowest contiguous window that holds every real
    card; jokers fill the window's gaps in ascending identifier order.
    """

    if len(cards) < MIN_RUN_SIZE:
        return MeldValidation.failure("Run must be at least 3 cards.")

    jokers, non_jokers = _split(cards)
    if not non_jokers:
        return MeldValidation.failure("Run cannot be all jokers.")

    suit = non_jokers[0].suit
    if any(card.suit is not suit for card in non_jokers):
        return MeldValidation.failure("Run suit must match.")

    by_index: dict[int, CardId] = {}
    for card in non_jokers:
        idx = rank_index(card.rank, ace_mode)
        if idx in by_index:
            return MeldValidation.failure("Duplicate rank in run.")
        by_index[idx] = card.id

    size = len(cards)
    low, high = min(by_index), max(by_index)
    min_rank, max_rank = _run_bounds(ace_mode)

    start: int | None = None
    for candidate in range(min_rank, max_rank - size + 2):
        end = candidate + size - 1
        if low < candidate or high > end:
            continue
        if size - len(by_index) <= len(jokers):
            start = candidate
            break
    if start is None:
        return MeldValidation.failure("Run cannot be completed with jokers.")

    window = range(start, start + size)
    gaps = [idx for idx in window if idx not in by_index]
    joker_ids = sorted(card.id for card in jokers)
    if len(joker_ids) > len(gaps):
        return MeldValidation.failure("Too many jokers for chosen run window.")
    joker_map = {joker: JokerRep(suit, index_to_rank(gap)) for joker, gap in zip(joker_ids, gaps)}

    pending = iter(joker_ids)
    ordered_ids = tuple(by_index[idx] if idx in by_index else next(pending) for idx in window)
    return MeldValidation(
        ok=True,
        kind=MeldKind.RUN,
        ace_mode=ace_mode,
        ordered_ids=ordered_ids,
        joker_map=joker_map,
    )


def validate_meld(cards: Sequence[Card]) -> MeldValidation:
    """Return the first successful reading of ``cards``: set, low run, high run."""

    result = validate_set(cards)
    if result.ok:
        return result
    for ace_mode in (AceMode.LOW, AceMode.HIGH):
        result = validate_run(cards, ace_mode)
        if result.ok:
            return result
    return MeldValidation.failure("Not a valid set or run.")


def group_points(cards: Sequence[Card]) -> int:
    """Return the point value of ``cards``; jokers count as zero."""

    return total_points(cards)
