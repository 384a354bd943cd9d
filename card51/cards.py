"""Card abstractions and deck helpers for Card 51."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterable, Iterator

import numpy as np

CardId = int


class Suit(str, Enum):
    """Enumeration of the suits, including the joker pseudo-suit."""

    CLUBS = "C"
    DIAMONDS = "D"
    HEARTS = "H"
    SPADES = "S"
    JOKER = "X"


class Rank(str, Enum):
    """Enumeration of ranks, TWO through ACE plus the joker rank."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    JOKER = "JK"


class AceMode(str, Enum):
    """Whether an ace sits below TWO or above KING inside a run."""

    LOW = "LOW"
    HIGH = "HIGH"


SUIT_ORDER: Final[tuple[Suit, ...]] = (Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES)
RANK_ORDER: Final[tuple[Rank, ...]] = (
    Rank.TWO,
    Rank.THREE,
    Rank.FOUR,
    Rank.FIVE,
    Rank.SIX,
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
    Rank.ACE,
)

_HIGH_INDEX: Final[dict[Rank, int]] = {rank: idx + 2 for idx, rank in enumerate(RANK_ORDER)}
_INDEX_TO_RANK: Final[dict[int, Rank]] = {1: Rank.ACE, **{idx: rank for rank, idx in _HIGH_INDEX.items()}}

POINTS: Final[dict[Rank, int]] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 10,
    Rank.ACE: 10,
    Rank.JOKER: 0,
}

NUM_DECKS: Final[int] = 2
NUM_JOKERS: Final[int] = 2
DECK_CARD_COUNT: Final[int] = NUM_DECKS * len(SUIT_ORDER) * len(RANK_ORDER) + NUM_JOKERS


def rank_index(rank: Rank, ace_mode: AceMode) -> int:
    """Return the run position of ``rank``; ACE is 1 under LOW and 14 under HIGH.

    Jokers have no position and map to 0.
    """

    if rank is Rank.JOKER:
        return 0
    if rank is Rank.ACE and ace_mode is AceMode.LOW:
        return 1
    return _HIGH_INDEX[rank]


def index_to_rank(index: int) -> Rank:
    """Return the rank sitting at run position ``index`` (1 and 14 are both ACE)."""

    try:
        return _INDEX_TO_RANK[index]
    except KeyError:
        raise ValueError(f"rank index {index} out of range") from None


def point_value(rank: Rank) -> int:
    """Return the point value of ``rank``."""

    return POINTS[rank]


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing one physical card of the 106-card population."""

    id: CardId
    suit: Suit
    rank: Rank

    @property
    def is_joker(self) -> bool:
        """Return ``True`` when the card represents a Joker."""

        return self.rank is Rank.JOKER

    @property
    def points(self) -> int:
        return POINTS[self.rank]

    def label(self) -> str:
        """Create a short display label such as ``10H`` or ``JK``."""

        if self.is_joker:
            return Rank.JOKER.value
        return f"{self.rank.value}{self.suit.value}"


def iter_full_deck() -> Iterator[Card]:
    """Yield every card of the population in identifier order."""

    from . import encoding  # Local import to avoid cycles

    for copy in range(NUM_DECKS):
        for suit_idx, suit in enumerate(SUIT_ORDER):
            for rank_idx, rank in enumerate(RANK_ORDER):
                yield Card(encoding.card_id(suit_idx, rank_idx, copy), suit, rank)
    for copy in range(NUM_JOKERS):
        yield Card(encoding.joker_id(copy), Suit.JOKER, Rank.JOKER)


def build_deck(seed: int | None = None) -> list[Card]:
    """Return the full population in a shuffled order.

    The last element is the top of the deck.
    """

    cards = list(iter_full_deck())
    rng = np.random.default_rng(seed)
    order = rng.permutation(len(cards))
    return [cards[int(idx)] for idx in order]


def total_points(cards: Iterable[Card]) -> int:
    return sum(card.points for card in cards)
