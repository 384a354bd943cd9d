"""Card identifier encoding utilities for Card 51."""

from __future__ import annotations

from typing import Final, Iterable

from .cards import DECK_CARD_COUNT, NUM_DECKS, NUM_JOKERS, RANK_ORDER, SUIT_ORDER, Card, CardId, Rank, Suit

STANDARD_CARD_COUNT: Final[int] = NUM_DECKS * len(SUIT_ORDER) * len(RANK_ORDER)
JOKER_IDS: Final[tuple[CardId, ...]] = tuple(STANDARD_CARD_COUNT + copy for copy in range(NUM_JOKERS))
RANK_TO_IDX: Final[dict[str, int]] = {rank.value: idx for idx, rank in enumerate(RANK_ORDER)}
SUIT_TO_IDX: Final[dict[str, int]] = {suit.value: idx for idx, suit in enumerate(SUIT_ORDER)}


def card_id(suit_idx: int, rank_idx: int, copy: int) -> CardId:
    """Encode a suit, rank, and copy index into a card identifier."""

    if not 0 <= suit_idx < len(SUIT_ORDER):
        raise ValueError("suit_idx out of range")
    if not 0 <= rank_idx < len(RANK_ORDER):
        raise ValueError("rank_idx out of range")
    if not 0 <= copy < NUM_DECKS:
        raise ValueError(f"copy must be below {NUM_DECKS}")
    return copy * len(SUIT_ORDER) * len(RANK_ORDER) + suit_idx * len(RANK_ORDER) + rank_idx


def joker_id(copy: int) -> CardId:
    """Encode the ``copy``-th joker into a card identifier."""

    if not 0 <= copy < NUM_JOKERS:
        raise ValueError(f"joker copy must be below {NUM_JOKERS}")
    return JOKER_IDS[copy]


def _validate_card_identifier(card_identifier: CardId) -> None:
    if card_identifier < 0 or card_identifier >= DECK_CARD_COUNT:
        raise ValueError(f"card identifier {card_identifier} out of range")


def decode_id(card_identifier: CardId) -> Card:
    """Decode a card identifier into its card record."""

    _validate_card_identifier(card_identifier)
    if card_identifier in JOKER_IDS:
        return Card(card_identifier, Suit.JOKER, Rank.JOKER)
    base = card_identifier % (len(SUIT_ORDER) * len(RANK_ORDER))
    suit_idx, rank_idx = divmod(base, len(RANK_ORDER))
    return Card(card_identifier, SUIT_ORDER[suit_idx], RANK_ORDER[rank_idx])


def copy_index(card_identifier: CardId) -> int:
    """Return which physical copy ``card_identifier`` is (0 or 1)."""

    _validate_card_identifier(card_identifier)
    if card_identifier in JOKER_IDS:
        return JOKER_IDS.index(card_identifier)
    return card_identifier // (len(SUIT_ORDER) * len(RANK_ORDER))


def parse_code(code: str) -> CardId:
    """Return the identifier for a text code such as ``8C``, ``10H#1`` or ``JK#0``."""

    face, _, copy_str = code.strip().upper().partition("#")
    try:
        copy = int(copy_str) if copy_str else 0
    except ValueError:
        raise ValueError(f"invalid card code '{code}'") from None
    if face == Rank.JOKER.value:
        return joker_id(copy)
    rank, suit = face[:-1], face[-1:]
    if rank not in RANK_TO_IDX or suit not in SUIT_TO_IDX:
        raise ValueError(f"invalid card code '{code}'")
    return card_id(SUIT_TO_IDX[suit], RANK_TO_IDX[rank], copy)


def parse_codes(codes: Iterable[str]) -> list[CardId]:
    return [parse_code(code) for code in codes]


def format_code(card_identifier: CardId) -> str:
    """Inverse of :func:`parse_code`, always including the copy suffix."""

    card = decode_id(card_identifier)
    return f"{card.label()}#{copy_index(card_identifier)}"
