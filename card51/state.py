"""Core game state data structures for Card 51."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence

from .cards import DECK_CARD_COUNT, AceMode, Card, CardId, build_deck
from .melds import JokerRep, MeldKind


class Phase(str, Enum):
    """Phases of a single player turn."""

    DRAW = "DRAW"
    ACTION = "ACTION"
    DISCARD = "DISCARD"
    GAME_OVER = "GAME_OVER"


class DrawSource(str, Enum):
    """Where the current turn's card was drawn from."""

    DECK = "DECK"
    DISCARD = "DISCARD"


@dataclass(slots=True)
class Card51Config:
    """Runtime configuration for a single hand."""

    num_players: int
    hand_size: int = 14
    open_points: int = 51
    first_player: int = 0

    def __post_init__(self) -> None:
        if not 2 <= self.num_players <= 4:
            raise ValueError("num_players must be between 2 and 4")
        if self.hand_size <= 0:
            raise ValueError("hand_size must be positive")
        if self.num_players * self.hand_size >= DECK_CARD_COUNT:
            raise ValueError("insufficient cards in deck for requested hand size")
        if not 0 <= self.first_player < self.num_players:
            raise ValueError("first_player out of range")


@dataclass(slots=True)
class PlayerPublic:
    """Public information tracked for each player."""

    opened: bool = False
    hand_count: int = 0

    def copy(self) -> "PlayerPublic":
        return PlayerPublic(opened=self.opened, hand_count=self.hand_count)


@dataclass(slots=True)
class TableMeld:
    """A validated meld lying face up on the table."""

    id: str
    owner: int
    card_ids: List[CardId]
    kind: MeldKind
    ace_mode: AceMode | None = None
    joker_map: Dict[CardId, JokerRep] = field(default_factory=dict)

    def copy(self) -> "TableMeld":
        return TableMeld(
            id=self.id,
            owner=self.owner,
            card_ids=list(self.card_ids),
            kind=self.kind,
            ace_mode=self.ace_mode,
            joker_map=dict(self.joker_map),
        )


@dataclass(slots=True)
class GameState:
    """Authoritative, mutable ledger for one hand of Card 51.

    ``draw_pile`` and ``discard_pile`` both treat their last element as
    the top card. ``hands`` holds every player's private hand.
    """

    config: Card51Config
    cards_by_id: Dict[CardId, Card]
    draw_pile: List[CardId]
    hands: List[List[CardId]]
    players: List[PlayerPublic]
    discard_pile: List[CardId] = field(default_factory=list)
    table: List[TableMeld] = field(default_factory=list)
    current_turn: int = 0
    phase: Phase = Phase.DRAW
    winner: int | None = None
    last_drawn_card_id: CardId | None = None
    last_draw_source: DrawSource | None = None
    meld_counter: int = 0

    @property
    def num_players(self) -> int:
        return self.config.num_players

    @property
    def draw_count(self) -> int:
        return len(self.draw_pile)

    def discard_top(self) -> CardId | None:
        return self.discard_pile[-1] if self.discard_pile else None

    def card(self, card_identifier: CardId) -> Card:
        return self.cards_by_id[card_identifier]

    def hand_cards(self, player_index: int) -> list[Card]:
        return [self.cards_by_id[card_id] for card_id in self.hands[player_index]]

    def find_meld(self, meld_id: str) -> TableMeld | None:
        for meld in self.table:
            if meld.id == meld_id:
                return meld
        return None

    def next_meld_id(self) -> str:
        self.meld_counter += 1
        return f"m{self.meld_counter}"

    def sync_hand_count(self, player_index: int) -> None:
        self.players[player_index].hand_count = len(self.hands[player_index])

    def clone_shallow(self) -> "GameState":
        """Return a copy whose zones can be mutated independently.

        ``config`` and the card registry are immutable in practice and shared.
        """

        return GameState(
            config=self.config,
            cards_by_id=self.cards_by_id,
            draw_pile=list(self.draw_pile),
            hands=[list(hand) for hand in self.hands],
            players=[player.copy() for player in self.players],
            discard_pile=list(self.discard_pile),
            table=[meld.copy() for meld in self.table],
            current_turn=self.current_turn,
            phase=self.phase,
            winner=self.winner,
            last_drawn_card_id=self.last_drawn_card_id,
            last_draw_source=self.last_draw_source,
            meld_counter=self.meld_counter,
        )

    def view_for(self, viewer: int) -> "PlayerView":
        """Project the state down to what ``viewer`` is allowed to see."""

        if not 0 <= viewer < self.num_players:
            raise ValueError("viewer index out of range")
        return PlayerView(
            viewer=viewer,
            hand=tuple(self.hands[viewer]),
            players=tuple(player.copy() for player in self.players),
            discard_pile=tuple(self.discard_pile),
            draw_count=len(self.draw_pile),
            table=tuple(meld.copy() for meld in self.table),
            current_turn=self.current_turn,
            phase=self.phase,
            winner=self.winner,
        )


@dataclass(frozen=True, slots=True)
class PlayerView:
    """Redacted read model: public table state plus one player's own hand."""

    viewer: int
    hand: tuple[CardId, ...]
    players: tuple[PlayerPublic, ...]
    discard_pile: tuple[CardId, ...]
    draw_count: int
    table: tuple[TableMeld, ...]
    current_turn: int
    phase: Phase
    winner: int | None


def ledger(state: GameState) -> Counter[CardId]:
    """Return how many times each identifier appears across every zone."""

    counts: Counter[CardId] = Counter()
    for hand in state.hands:
        counts.update(hand)
    counts.update(state.draw_pile)
    counts.update(state.discard_pile)
    for meld in state.table:
        counts.update(meld.card_ids)
    return counts


def check_conservation(state: GameState) -> bool:
    """Return ``True`` when every card of the population sits in exactly one place."""

    if len(state.cards_by_id) != DECK_CARD_COUNT:
        return False
    counts = ledger(state)
    return set(counts) == set(state.cards_by_id) and all(count == 1 for count in counts.values())


def deal_new_game(config: Card51Config, deck_cards: Sequence[Card]) -> GameState:
    """Deal a fresh hand from ``deck_cards``, whose last element is the top."""

    cards_by_id = {card.id: card for card in deck_cards}
    if len(cards_by_id) != len(deck_cards):
        raise ValueError("deck contains duplicate card identifiers")
    if len(cards_by_id) != DECK_CARD_COUNT:
        raise ValueError(f"deck must hold all {DECK_CARD_COUNT} cards")

    draw_pile = [card.id for card in deck_cards]
    hands: list[list[CardId]] = [[] for _ in range(config.num_players)]
    for hand in hands:
        for _ in range(config.hand_size):
            if not draw_pile:
                raise ValueError("insufficient cards in deck for requested hand size")
            hand.append(draw_pile.pop())

    return GameState(
        config=config,
        cards_by_id=cards_by_id,
        draw_pile=draw_pile,
        hands=hands,
        players=[PlayerPublic(opened=False, hand_count=len(hand)) for hand in hands],
        current_turn=config.first_player,
        phase=Phase.DRAW,
    )


def new_game(config: Card51Config, seed: int | None = None) -> GameState:
    """Shuffle a full deck with ``seed`` and deal it."""

    return deal_new_game(config, build_deck(seed))
