from __future__ import annotations

from typer.testing import CliRunner

from card51 import actions as act
from card51 import encoding
from card51.cli.main import app
from card51.cli.render import describe_action, format_card

runner = CliRunner()


def test_validate_reports_set_with_joker() -> None:
    result = runner.invoke(app, ["validate", "8C", "8D", "JK#0"])

    assert result.exit_code == 0
    assert "Valid Set" in result.stdout
    assert "stands for 8H" in result.stdout
    assert "Points" in result.stdout


def test_validate_reports_errors() -> None:
    result = runner.invoke(app, ["validate", "8C", "9D", "2S"])

    assert result.exit_code == 1
    assert "Not a valid set or run." in result.stdout


def test_validate_rejects_bad_codes() -> None:
    result = runner.invoke(app, ["validate", "8C", "ZZ"])

    assert result.exit_code == 2


def test_melds_lists_candidates() -> None:
    result = runner.invoke(app, ["melds", "8C", "8D", "8H", "9H", "10H", "2C"])

    assert result.exit_code == 0
    assert "Meld Candidates" in result.stdout
    assert "Run (low)" in result.stdout


def test_melds_threshold_without_candidates() -> None:
    result = runner.invoke(app, ["melds", "--threshold", "51", "8C", "8D", "8H", "2C"])

    assert result.exit_code == 0
    assert "No melds available." in result.stdout


def test_simulate_prints_final_table() -> None:
    result = runner.invoke(app, ["--log-level", "WARNING", "simulate", "--seed", "3", "--no-events"])

    assert result.exit_code == 0
    assert "Table State" in result.stdout
    assert "turn(s)" in result.stdout


def test_format_card_marks_second_copy() -> None:
    assert format_card(encoding.parse_code("10H#1")) == "[red]10♥′[/red]"
    assert format_card(encoding.parse_code("8C")) == "[green]8♣[/green]"
    assert "🃏" in format_card(104)


def test_describe_action() -> None:
    assert describe_action(act.DrawDeck(1)) == "[cyan]P1[/cyan] draws from the deck"
    assert describe_action(act.PassAction(0)) == "[cyan]P0[/cyan] passes"


def test_repeated_codes_are_rejected() -> None:
    result = runner.invoke(app, ["melds", "8C", "8C#0", "8D", "8H"])

    assert result.exit_code == 2
