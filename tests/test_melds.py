"""Tests covering set and run validation."""

from __future__ import annotations

import pytest

from card51 import encoding
from card51.cards import AceMode, Card, Rank, Suit
from card51.melds import JokerRep, MeldKind, group_points, validate_meld, validate_run, validate_set


def _cards(*codes: str) -> list[Card]:
    return [encoding.decode_id(encoding.parse_code(code)) for code in codes]


def _ids(*codes: str) -> tuple[int, ...]:
    return tuple(encoding.parse_code(code) for code in codes)


def test_set_with_joker_fills_first_missing_suit() -> None:
    result = validate_meld(_cards("8C", "8D", "JK#0"))

    assert result.ok
    assert result.kind is MeldKind.SET
    assert result.ace_mode is None
    assert result.ordered_ids == _ids("8C", "8D", "JK#0")
    assert result.joker_map == {104: JokerRep(Suit.HEARTS, Rank.EIGHT)}


def test_set_orders_suits_and_assigns_jokers_by_id() -> None:
    result = validate_set(_cards("JK#1", "8S", "JK#0"))

    assert result.ok
    assert result.ordered_ids == _ids("8S", "JK#0", "JK#1")
    assert result.joker_map == {
        104: JokerRep(Suit.CLUBS, Rank.EIGHT),
        105: JokerRep(Suit.DIAMONDS, Rank.EIGHT),
    }


@pytest.mark.parametrize(
    ("codes", "error"),
    [
        (("8C", "8D"), "Set must be size 3 or 4."),
        (("8C", "8D", "8H", "8S", "JK#0"), "Set must be size 3 or 4."),
        (("JK#0", "JK#1", "JK#0"), "Set must have at least one non-joker card."),
        (("8C", "9D", "8H"), "Set ranks must match."),
        (("8C", "8C#1", "8H"), "Duplicate suit in set."),
    ],
)
def test_set_errors(codes: tuple[str, ...], error: str) -> None:
    result = validate_set(_cards(*codes))

    assert not result.ok
    assert result.error == error


def test_low_ace_run() -> None:
    cards = _cards("3S", "AS", "2S")

    low = validate_run(cards, AceMode.LOW)
    high = validate_run(cards, AceMode.HIGH)

    assert low.ok
    assert low.kind is MeldKind.RUN
    assert low.ace_mode is AceMode.LOW
    assert low.ordered_ids == _ids("AS", "2S", "3S")
    assert not high.ok
    assert high.error == "Run cannot be completed with jokers."


def test_high_ace_run_is_found_by_meld_validation() -> None:
    result = validate_meld(_cards("AS", "QS", "KS"))

    assert result.ok
    assert result.ace_mode is AceMode.HIGH
    assert result.ordered_ids == _ids("QS", "KS", "AS")


def test_run_joker_fills_interior_gap() -> None:
    result = validate_meld(_cards("7H", "5H", "JK#0"))

    assert result.ok
    assert result.kind is MeldKind.RUN
    assert result.ordered_ids == _ids("5H", "JK#0", "7H")
    assert result.joker_map == {104: JokerRep(Suit.HEARTS, Rank.SIX)}


def test_run_prefers_lowest_window() -> None:
    result = validate_meld(_cards("5H", "6H", "JK#0"))

    assert result.ok
    assert result.ordered_ids == _ids("JK#0", "5H", "6H")
    assert result.joker_map == {104: JokerRep(Suit.HEARTS, Rank.FOUR)}


def test_run_window_shifts_up_at_the_ace() -> None:
    # Under LOW the ace cannot sit above the king; HIGH pushes the joker below the queen.
    result = validate_meld(_cards("KS", "AS", "JK#0"))

    assert result.ok
    assert result.ace_mode is AceMode.HIGH
    assert result.ordered_ids == _ids("JK#0", "KS", "AS")
    assert result.joker_map == {104: JokerRep(Suit.SPADES, Rank.QUEEN)}


@pytest.mark.parametrize(
    ("codes", "error"),
    [
        (("5H", "6H"), "Run must be at least 3 cards."),
        (("JK#0", "JK#1", "JK#0"), "Run cannot be all jokers."),
        (("5H", "6D", "7H"), "Run suit must match."),
        (("5H", "5H#1", "6H"), "Duplicate rank in run."),
        (("5H", "9H", "JK#0"), "Run cannot be completed with jokers."),
    ],
)
def test_run_errors(codes: tuple[str, ...], error: str) -> None:
    result = validate_run(_cards(*codes), AceMode.LOW)

    assert not result.ok
    assert result.error == error


def test_meld_failure_uses_generic_error() -> None:
    result = validate_meld(_cards("5H", "9D", "KS"))

    assert not result.ok
    assert result.error == "Not a valid set or run."
    assert result.kind is None


@pytest.mark.parametrize(
    "codes",
    [
        ("8C", "8D", "JK#0"),
        ("QS", "AS", "KS", "JK#1"),
        ("2D", "JK#0", "4D", "JK#1", "6D"),
        ("9C", "9H", "9S", "9D"),
    ],
)
def test_validation_is_sound_and_idempotent(codes: tuple[str, ...]) -> None:
    cards = _cards(*codes)
    result = validate_meld(cards)
    assert result.ok
    assert sorted(result.ordered_ids) == sorted(card.id for card in cards)
    assert set(result.joker_map) == {card.id for card in cards if card.is_joker}

    again = validate_meld([encoding.decode_id(card_id) for card_id in result.ordered_ids])
    assert again.ordered_ids == result.ordered_ids
    assert again.joker_map == result.joker_map
    assert again.kind is result.kind


def test_group_points_counts_jokers_as_zero() -> None:
    assert group_points(_cards("8C", "8D", "JK#0")) == 16
    assert group_points(_cards("10S", "JS", "QS", "KS", "AS")) == 50
