"""Enumeration of every valid meld contained in a hand.

The search is a subset walk in ascending index order, exponential in hand
size; branches that can no longer form a set or run are cut early. Hands stay
around fourteen to twenty cards, which keeps it usable for advisory
callers (bots, the CLI). The reducer never calls into this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Sequence

from .cards import AceMode, Card, CardId, rank_index
from .melds import MeldKind, MeldValidation, group_points, validate_meld, validate_run, validate_set

__all__ = [
    "MeldCandidate",
    "find_valid_melds",
    "find_sets",
    "find_runs",
    "opening_candidates",
]


@dataclass(frozen=True, slots=True)
class MeldCandidate:
    """A subset of a hand that forms a legal meld."""

    card_ids: tuple[CardId, ...]
    kind: MeldKind
    ace_mode: AceMode | None
    ordered_ids: tuple[CardId, ...]
    points: int

    def __len__(self) -> int:
        return len(self.card_ids)

    def __contains__(self, card_identifier: object) -> bool:
        return card_identifier in self.card_ids


def _resolve(hand: Sequence[Card | CardId], cards_by_id: Mapping[CardId, Card] | None) -> list[Card]:
    if cards_by_id is None:
        from .encoding import decode_id  # Local import to avoid cycles

        return [item if isinstance(item, Card) else decode_id(item) for item in hand]
    return [item if isinstance(item, Card) else cards_by_id[item] for item in hand]


def _viable(partial: Sequence[Card], size: int) -> bool:
    """Return ``False`` only when no ``size``-card superset of ``partial`` can be a meld."""

    non_jokers = [card for card in partial if not card.is_joker]
    if len(non_jokers) <= 1:
        return True

    ranks = {card.rank for card in non_jokers}
    suits = {card.suit for card in non_jokers}
    if size <= 4 and len(ranks) == 1 and len(suits) == len(non_jokers):
        return True
    if len(suits) != 1 or len(ranks) != len(non_jokers):
        return False
    for ace_mode in (AceMode.LOW, AceMode.HIGH):
        indices = [rank_index(rank, ace_mode) for rank in ranks]
        if max(indices) - min(indices) < size:
            return True
    return False


def _combine(
    cards: Sequence[Card],
    size: int,
    start: int,
    temp: list[Card],
    validator: Callable[[Sequence[Card]], MeldValidation],
) -> Iterator[MeldCandidate]:
    if len(temp) == size:
        result = validator(temp)
        if result.ok and result.kind is not None:
            yield MeldCandidate(
                card_ids=tuple(card.id for card in temp),
                kind=result.kind,
                ace_mode=result.ace_mode,
                ordered_ids=result.ordered_ids,
                points=group_points(temp),
            )
        return

    for idx in range(start, len(cards) - (size - len(temp)) + 1):
        temp.append(cards[idx])
        if _viable(temp, size):
            yield from _combine(cards, size, idx + 1, temp, validator)
        temp.pop()


def _search(
    cards: Sequence[Card],
    sizes: range | Sequence[int],
    validator: Callable[[Sequence[Card]], MeldValidation],
) -> Iterator[MeldCandidate]:
    """Walk subsets size by size in ascending index order, pruning dead branches."""

    for size in sizes:
        yield from _combine(cards, size, 0, [], validator)


def find_valid_melds(
    hand: Sequence[Card | CardId],
    cards_by_id: Mapping[CardId, Card] | None = None,
) -> list[MeldCandidate]:
    """Return every subset of ``hand`` (size three and up) that validates as a meld.

    ``hand`` may hold cards or identifiers; identifiers are resolved via
    ``cards_by_id`` when given and the standard encoding otherwise.
    """

    cards = _resolve(hand, cards_by_id)
    return list(_search(cards, range(3, len(cards) + 1), validate_meld))


def find_sets(
    hand: Sequence[Card | CardId],
    cards_by_id: Mapping[CardId, Card] | None = None,
) -> list[MeldCandidate]:
    """Return every three- or four-card set in ``hand``."""

    cards = _resolve(hand, cards_by_id)
    return list(_search(cards, (3, 4), validate_set))


def find_runs(
    hand: Sequence[Card | CardId],
    ace_mode: AceMode,
    cards_by_id: Mapping[CardId, Card] | None = None,
) -> list[MeldCandidate]:
    """Return every run in ``hand`` under ``ace_mode``."""

    cards = _resolve(hand, cards_by_id)
    return list(_search(cards, range(3, len(cards) + 1), lambda subset: validate_run(subset, ace_mode)))


def opening_candidates(
    hand: Sequence[Card | CardId],
    threshold: int,
    *,
    required_card: CardId | None = None,
    cards_by_id: Mapping[CardId, Card] | None = None,
) -> list[MeldCandidate]:
    """Return single melds worth at least ``threshold`` that leave a card to discard.

    When ``required_card`` is given only melds containing it qualify.
    Results are sorted by points, highest first.
    """

    hand_size = len(hand)
    out = [
        candidate
        for candidate in find_valid_melds(hand, cards_by_id)
        if candidate.points >= threshold
        and len(candidate) < hand_size
        and (required_card is None or required_card in candidate)
    ]
    out.sort(key=lambda candidate: candidate.points, reverse=True)
    return out
