"""Top-level package for the Card 51 rules engine."""

from . import actions, candidates, cards, encoding, melds, rules, state

__all__ = [
    "actions",
    "candidates",
    "cards",
    "encoding",
    "melds",
    "rules",
    "state",
]
