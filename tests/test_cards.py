from __future__ import annotations

import pytest

from card51 import cards
from card51.cards import AceMode, Rank, Suit


def test_full_deck_has_unique_population() -> None:
    deck = list(cards.iter_full_deck())

    assert len(deck) == cards.DECK_CARD_COUNT == 106
    assert sorted(card.id for card in deck) == list(range(106))
    assert sum(1 for card in deck if card.is_joker) == 2
    assert sum(1 for card in deck if card.rank is Rank.EIGHT and card.suit is Suit.CLUBS) == 2


def test_build_deck_is_reproducible_per_seed() -> None:
    first = [card.id for card in cards.build_deck(seed=11)]
    second = [card.id for card in cards.build_deck(seed=11)]
    other = [card.id for card in cards.build_deck(seed=12)]

    assert first == second
    assert first != other
    assert sorted(first) == list(range(106))


@pytest.mark.parametrize(
    ("rank", "ace_mode", "expected"),
    [
        (Rank.ACE, AceMode.LOW, 1),
        (Rank.ACE, AceMode.HIGH, 14),
        (Rank.TWO, AceMode.LOW, 2),
        (Rank.TEN, AceMode.HIGH, 10),
        (Rank.KING, AceMode.LOW, 13),
        (Rank.JOKER, AceMode.LOW, 0),
    ],
)
def test_rank_index(rank: Rank, ace_mode: AceMode, expected: int) -> None:
    assert cards.rank_index(rank, ace_mode) == expected


def test_index_to_rank_maps_both_ace_positions() -> None:
    assert cards.index_to_rank(1) is Rank.ACE
    assert cards.index_to_rank(14) is Rank.ACE
    assert cards.index_to_rank(11) is Rank.JACK

    with pytest.raises(ValueError):
        cards.index_to_rank(15)


@pytest.mark.parametrize(
    ("rank", "points"),
    [(Rank.TWO, 2), (Rank.NINE, 9), (Rank.TEN, 10), (Rank.QUEEN, 10), (Rank.ACE, 10), (Rank.JOKER, 0)],
)
def test_point_values(rank: Rank, points: int) -> None:
    assert cards.point_value(rank) == points


def test_card_label_and_total_points() -> None:
    ten = cards.Card(8, Suit.CLUBS, Rank.TEN)
    joker = cards.Card(104, Suit.JOKER, Rank.JOKER)

    assert ten.label() == "10C"
    assert joker.label() == "JK"
    assert cards.total_points([ten, joker]) == 10
