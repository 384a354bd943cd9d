from __future__ import annotations

import pytest

from card51 import encoding
from card51.cards import Rank, Suit


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("2C", 0),
        ("8C", 6),
        ("AC", 12),
        ("8D", 19),
        ("AS", 51),
        ("10H#1", 86),
        ("jk#0", 104),
        ("JK#1", 105),
    ],
)
def test_parse_code(code: str, expected: int) -> None:
    assert encoding.parse_code(code) == expected


@pytest.mark.parametrize("code", ["", "1C", "8X", "8C#2", "8C#x", "JK#2", "KING"])
def test_parse_code_rejects_bad_input(code: str) -> None:
    with pytest.raises(ValueError):
        encoding.parse_code(code)


def test_decode_id_and_copy_index() -> None:
    card = encoding.decode_id(86)

    assert card.suit is Suit.HEARTS
    assert card.rank is Rank.TEN
    assert encoding.copy_index(86) == 1
    assert encoding.copy_index(encoding.joker_id(1)) == 1
    assert encoding.decode_id(104).is_joker

    with pytest.raises(ValueError):
        encoding.decode_id(106)


def test_format_code_includes_copy_suffix() -> None:
    assert encoding.format_code(86) == "10H#1"
    assert encoding.format_code(6) == "8C#0"
    assert encoding.format_code(105) == "JK#1"


def test_card_id_range_checks() -> None:
    assert encoding.card_id(3, 12, 1) == 103

    with pytest.raises(ValueError):
        encoding.card_id(4, 0, 0)
    with pytest.raises(ValueError):
        encoding.card_id(0, 13, 0)
    with pytest.raises(ValueError):
        encoding.joker_id(2)
