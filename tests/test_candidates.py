from __future__ import annotations

from itertools import combinations

from card51 import encoding
from card51.candidates import find_runs, find_sets, find_valid_melds, opening_candidates
from card51.cards import AceMode
from card51.melds import MeldKind, validate_meld


def _hand(codes: str) -> list[int]:
    return encoding.parse_codes(codes.split())


def test_find_valid_melds_lists_sets_and_runs_in_search_order() -> None:
    hand = _hand("8C 8D 8H 9H 10H 2C")

    found = find_valid_melds(hand)

    assert [candidate.card_ids for candidate in found] == [
        tuple(_hand("8C 8D 8H")),
        tuple(_hand("8H 9H 10H")),
    ]
    assert found[0].kind is MeldKind.SET
    assert found[1].kind is MeldKind.RUN
    assert found[1].points == 27


def test_find_sets_and_runs_are_filtered_views() -> None:
    hand = _hand("8C 8D 8H 9H 10H 2C")

    assert [c.card_ids for c in find_sets(hand)] == [tuple(_hand("8C 8D 8H"))]
    assert [c.card_ids for c in find_runs(hand, AceMode.LOW)] == [tuple(_hand("8H 9H 10H"))]


def test_find_runs_respects_ace_mode() -> None:
    hand = _hand("AS 2S 3S QS KS")

    low = find_runs(hand, AceMode.LOW)
    high = find_runs(hand, AceMode.HIGH)

    assert [c.card_ids for c in low] == [tuple(_hand("AS 2S 3S"))]
    assert [c.card_ids for c in high] == [tuple(_hand("AS QS KS"))]
    assert high[0].ordered_ids == tuple(_hand("QS KS AS"))


def test_search_matches_exhaustive_enumeration() -> None:
    hand = _hand("5H 6H 7H 8H 5C 5D JK#0 JK#1 KS AS QS")
    cards = [encoding.decode_id(card_id) for card_id in hand]

    expected = [
        tuple(card.id for card in subset)
        for size in range(3, len(cards) + 1)
        for subset in combinations(cards, size)
        if validate_meld(subset).ok
    ]

    assert [candidate.card_ids for candidate in find_valid_melds(hand)] == expected


def test_find_valid_melds_accepts_card_registry() -> None:
    hand = _hand("8C 8D JK#0")
    registry = {card_id: encoding.decode_id(card_id) for card_id in hand}

    found = find_valid_melds(hand, registry)

    assert len(found) == 1
    assert 104 in found[0]
    assert len(found[0]) == 3


def test_opening_candidates_threshold_and_spare_card() -> None:
    hand = _hand("9S 10S JS QS KS AS 3C")

    found = opening_candidates(hand, 51)

    assert [c.card_ids for c in found] == [tuple(_hand("9S 10S JS QS KS AS"))]
    assert found[0].points == 59
    assert opening_candidates(hand, 51, required_card=encoding.parse_code("3C")) == []
    assert opening_candidates(_hand("9S 10S JS QS KS AS"), 51) == []


def test_opening_candidates_sorted_by_points() -> None:
    hand = _hand("9S 10S JS QS KS AS 3C")

    found = opening_candidates(hand, 30)
    points = [candidate.points for candidate in found]

    assert points == sorted(points, reverse=True)
    assert found[0].points == 59
