"""Sanity tests ensuring the package imports correctly."""

from __future__ import annotations

import importlib

import pytest


@pytest.mark.parametrize(
    "module_name",
    [
        "card51",
        "card51.cards",
        "card51.encoding",
        "card51.melds",
        "card51.candidates",
        "card51.state",
        "card51.actions",
        "card51.rules",
        "card51.bot",
        "card51.simulation",
        "card51.cli.main",
    ],
)
def test_modules_import(module_name: str) -> None:
    """Ensure all foundational modules can be imported."""

    assert importlib.import_module(module_name)
