import json
from typing import Tuple

import pytest
from click.testing import CliRunner

from auto_battle import cli
from auto_battle.components import Combatant
from auto_battle.errors import NetworkError

MANUAL = ["--name-a", "Hulk", "--vitality-a", "9000", "--name-b", "Thor", "--vitality-b", "8000"]


class StubProvider:
    """Replaces ``CharacterProvider`` inside the CLI module."""

    pair: Tuple[Combatant, Combatant] = (
        Combatant("Storm", 6000, source_id=638),
        Combatant("Cyclops", 5500, source_id=196),
    )
    error = None

    def __init__(self, config, seed=None):
        self.config = config
        self.seed = seed

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def fetch_two_combatants(self):
        if self.error is not None:
            raise self.error
        return self.pair


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_manual_battle_json_is_deterministic(runner: CliRunner) -> None:
    args = MANUAL + ["--seed", "7", "--json"]
    first = runner.invoke(cli.main, args, env={})
    second = runner.invoke(cli.main, args, env={})
    assert first.exit_code == 0, first.output
    payload = json.loads(first.output)
    assert payload == json.loads(second.output)
    assert payload["combatant_a"]["name"] == "Hulk"
    assert payload["outcome"] in ("a_wins", "b_wins", "draw")
    assert len(payload["rounds"]) >= 1


def test_manual_battle_text_report(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.main, ["--name-a", "A", "--vitality-a", "0", "--name-b", "B", "--vitality-b", "5", "-q"]
    )
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["A (0) vs B (5)", "Winner: B after 0 rounds"]


def test_max_damage_option_bounds_rolls(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, MANUAL + ["--seed", "1", "--max-damage", "3", "--json"])
    assert result.exit_code == 0, result.output
    rounds = json.loads(result.output)["rounds"]
    assert all(r["damage_a"] < 3 and r["damage_b"] < 3 for r in rounds)


def test_env_config_is_used(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.main,
        ["--name-a", "A", "--vitality-a", "100", "--name-b", "B", "--vitality-b", "100", "--json"],
        env={"AUTO_BATTLE_MAX_DAMAGE": "1"},
    )
    assert result.exit_code == 3
    assert "Battle failed" in result.output


def test_round_cap_divergence_exit_code(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.main,
        ["--name-a", "A", "--vitality-a", "100", "--name-b", "B", "--vitality-b", "100",
         "--max-damage", "1", "--round-cap", "5", "-q"],
    )
    assert result.exit_code == 3
    assert "5 rounds" in result.output


def test_negative_vitality_exit_code(runner: CliRunner) -> None:
    result = runner.invoke(
        cli.main, ["--name-a", "A", "--vitality-a=-5", "--name-b", "B", "--vitality-b", "5", "-q"]
    )
    assert result.exit_code == 3
    assert "negative vitality" in result.output


def test_partial_manual_combatants_is_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["--name-a", "A", "--vitality-a", "5"])
    assert result.exit_code == 2
    assert "must be given together" in result.output


def test_bad_env_is_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, MANUAL, env={"AUTO_BATTLE_ROUND_CAP": "never"})
    assert result.exit_code == 2
    assert "AUTO_BATTLE_ROUND_CAP" in result.output


def test_fetched_battle(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "CharacterProvider", StubProvider)
    result = runner.invoke(cli.main, ["--seed", "3", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["combatant_a"] == {"name": "Storm", "vitality": 6000, "source_id": 638}
    assert payload["combatant_b"]["name"] == "Cyclops"


def test_fetch_failure_exit_code(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "CharacterProvider", StubProvider)
    monkeypatch.setattr(StubProvider, "error", NetworkError("connection refused"))
    result = runner.invoke(cli.main, ["-q"])
    assert result.exit_code == 1
    assert "Could not fetch combatants: connection refused" in result.output


@pytest.mark.parametrize(
    "env, expected",
    [
        ({"AUTO_BATTLE_MAX_DAMAGE": "0"}, "AUTO_BATTLE_MAX_DAMAGE"),
        ({"AUTO_BATTLE_ROUND_CAP": "-3"}, "AUTO_BATTLE_ROUND_CAP"),
        ({"AUTO_BATTLE_MAX_ATTEMPTS": "0"}, "AUTO_BATTLE_MAX_ATTEMPTS"),
    ],
)
def test_out_of_range_env_is_usage_error(runner: CliRunner, env: dict, expected: str) -> None:
    result = runner.invoke(cli.main, MANUAL + ["-q"], env=env)
    assert result.exit_code == 2
    assert expected in result.output


def test_out_of_range_option_is_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, MANUAL + ["--max-damage", "0", "-q"])
    assert result.exit_code == 2
    assert "AUTO_BATTLE_MAX_DAMAGE" in result.output
