"""``auto-battle`` command line entry point.

Fetches two random characters (or takes two from the command line), resolves
the battle and prints the report.

Exit codes: 0 battle finished, 1 character fetch failed, 2 usage error,
3 battle could not be resolved.
"""

import json
import sys
from typing import Optional, Tuple

import click

from auto_battle.components import Combatant
from auto_battle.config import BattleConfig, ProviderConfig
from auto_battle.errors import (
    ConfigError,
    InvalidInputError,
    ProviderError,
    SimulationDivergedError,
)
from auto_battle.provider import CharacterProvider
from auto_battle.report import format_result, result_to_dict
from auto_battle.resolver import BattleResolver
from auto_battle.utils.log import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_PROVIDER_ERROR = 1
EXIT_BATTLE_ERROR = 3


def _manual_combatants(
    name_a: Optional[str],
    vitality_a: Optional[int],
    name_b: Optional[str],
    vitality_b: Optional[int],
) -> Optional[Tuple[Combatant, Combatant]]:
    given = [name_a, vitality_a, name_b, vitality_b]
    if all(v is None for v in given):
        return None
    if any(v is None for v in given):
        raise click.UsageError(
            "--name-a, --vitality-a, --name-b and --vitality-b must be given together"
        )
    assert name_a is not None and vitality_a is not None
    assert name_b is not None and vitality_b is not None
    return Combatant(name_a, vitality_a), Combatant(name_b, vitality_b)


@click.command()
@click.option("--seed", type=int, default=None, help="Seed for damage rolls and character ids")
@click.option("--max-damage", type=int, default=None, help="Exclusive upper bound of one roll")
@click.option("--round-cap", type=int, default=None, help="Rounds before giving up")
@click.option("--name-a", default=None, help="Name of a hand-built first combatant")
@click.option("--vitality-a", type=int, default=None, help="Vitality of the first combatant")
@click.option("--name-b", default=None, help="Name of a hand-built second combatant")
@click.option("--vitality-b", type=int, default=None, help="Vitality of the second combatant")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--quiet", "-q", is_flag=True, help="Only print the verdict")
@click.option("--verbose", "-v", is_flag=True, help="Log fetch attempts")
def main(
    seed: Optional[int],
    max_damage: Optional[int],
    round_cap: Optional[int],
    name_a: Optional[str],
    vitality_a: Optional[int],
    name_b: Optional[str],
    vitality_b: Optional[int],
    as_json: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Pit two characters against each other until one falls."""
    configure_logging(verbose=verbose, quiet=quiet or as_json)

    overrides = {
        key: value
        for key, value in (("seed", seed), ("max_damage", max_damage), ("round_cap", round_cap))
        if value is not None
    }
    try:
        battle_config = BattleConfig.from_env().with_overrides(**overrides)
        provider_config = ProviderConfig.from_env()
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    combatants = _manual_combatants(name_a, vitality_a, name_b, vitality_b)
    if combatants is None:
        try:
            with CharacterProvider(provider_config, seed=battle_config.seed) as provider:
                combatants = provider.fetch_two_combatants()
        except ProviderError as exc:
            click.echo(f"Could not fetch combatants: {exc}", err=True)
            sys.exit(EXIT_PROVIDER_ERROR)

    combatant_a, combatant_b = combatants
    logger.info(
        "battle_started",
        a=combatant_a.name,
        vitality_a=combatant_a.vitality,
        b=combatant_b.name,
        vitality_b=combatant_b.vitality,
    )
    try:
        resolver = BattleResolver.from_config(battle_config)
        result = resolver.resolve(combatant_a, combatant_b)
    except (InvalidInputError, SimulationDivergedError) as exc:
        click.echo(f"Battle failed: {exc}", err=True)
        sys.exit(EXIT_BATTLE_ERROR)
    logger.info("battle_finished", outcome=result.outcome.value, rounds=result.round_count)

    if as_json:
        click.echo(json.dumps(result_to_dict(result), indent=2))
    else:
        click.echo(format_result(result, show_rounds=not quiet))


if __name__ == "__main__":
    main()
