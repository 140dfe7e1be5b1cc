"""Battle resolution reducer and driver.

A battle is a fold of rounds over an immutable :class:`BattleState`:

1. Inputs are validated up front; nothing is drawn from the random source for
   a battle that cannot start.
2. While both combatants stand, each round draws A's roll then B's roll (this
   order is part of the determinism contract) and :func:`play_round` applies
   both against the *pre-round* vitalities.
3. A combatant starting at zero vitality never gets a round: the loop does
   not run and the verdict falls out of :func:`outcome_of` directly.
4. The round cap bounds the loop. A source that keeps rolling zeros raises
   :class:`SimulationDivergedError` instead of spinning forever.

:func:`resolve` is the functional entry point; :class:`BattleResolver` binds
the source and limits from a :class:`auto_battle.config.BattleConfig` for
callers that run several battles with the same settings.
"""

from dataclasses import replace
from typing import Optional

from auto_battle.components import Combatant
from auto_battle.config import BattleConfig
from auto_battle.errors import InvalidInputError, SimulationDivergedError
from auto_battle.records import BattleResult, RoundRecord
from auto_battle.rng import seeded_source
from auto_battle.state import BattleState
from auto_battle.types import (
    DEFAULT_MAX_DAMAGE,
    DEFAULT_ROUND_CAP,
    Outcome,
    RandomSource,
)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_combatant(combatant: Combatant, label: str) -> None:
    """Raise ``InvalidInputError`` unless ``combatant`` can enter a battle."""
    if not isinstance(combatant.name, str) or not combatant.name.strip():
        raise InvalidInputError(f"Combatant {label} has an empty name")
    if not _is_int(combatant.vitality):
        raise InvalidInputError(
            f"Combatant {combatant.name!r} has non-integer vitality: "
            f"{combatant.vitality!r}"
        )
    if combatant.vitality < 0:
        raise InvalidInputError(
            f"Combatant {combatant.name!r} has negative vitality: {combatant.vitality}"
        )


def validate_limits(max_damage: int, round_cap: int) -> None:
    """Raise ``InvalidInputError`` unless both limits are positive integers."""
    if not _is_int(max_damage) or max_damage <= 0:
        raise InvalidInputError(f"max_damage must be a positive integer: {max_damage!r}")
    if not _is_int(round_cap) or round_cap <= 0:
        raise InvalidInputError(f"round_cap must be a positive integer: {round_cap!r}")


def draw_damage(random_source: RandomSource, max_damage: int) -> int:
    """Draw one damage roll and check it lies in ``[0, max_damage)``."""
    damage = random_source(max_damage)
    if not _is_int(damage) or not 0 <= damage < max_damage:
        raise InvalidInputError(
            f"Random source produced {damage!r}, outside [0, {max_damage})"
        )
    return damage


def play_round(state: BattleState, damage_a: int, damage_b: int) -> BattleState:
    """Apply one simultaneous exchange and log it.

    Args:
        state (BattleState): Snapshot before the round.
        damage_a (int): Damage dealt by A (subtracted from B).
        damage_b (int): Damage dealt by B (subtracted from A).

    Returns:
        BattleState: New snapshot with both reductions applied and one more
            :class:`RoundRecord` in the log.
    """
    vitality_a = state.vitality_a - damage_b
    vitality_b = state.vitality_b - damage_a
    record = RoundRecord(
        index=state.round_count + 1,
        damage_a=damage_a,
        damage_b=damage_b,
        vitality_a=vitality_a,
        vitality_b=vitality_b,
    )
    return replace(
        state,
        vitality_a=vitality_a,
        vitality_b=vitality_b,
        rounds=state.rounds.append(record),
    )


def outcome_of(state: BattleState) -> Optional[Outcome]:
    """Return the verdict for a finished state, ``None`` while both stand."""
    a_standing = state.vitality_a > 0
    b_standing = state.vitality_b > 0
    if a_standing and b_standing:
        return None
    if a_standing:
        return Outcome.A_WINS
    if b_standing:
        return Outcome.B_WINS
    return Outcome.DRAW


def resolve(
    combatant_a: Combatant,
    combatant_b: Combatant,
    random_source: RandomSource,
    max_damage: int = DEFAULT_MAX_DAMAGE,
    round_cap: int = DEFAULT_ROUND_CAP,
) -> BattleResult:
    """Run a battle to completion.

    Args:
        combatant_a (Combatant): First combatant.
        combatant_b (Combatant): Second combatant.
        random_source (RandomSource): Supplies every damage roll.
        max_damage (int): Exclusive upper bound of a single roll.
        round_cap (int): Maximum number of rounds before giving up.

    Returns:
        BattleResult: Verdict, final vitalities and the full round log.

    Raises:
        InvalidInputError: Empty name, negative vitality, non-positive limits
            or a roll outside ``[0, max_damage)``.
        SimulationDivergedError: Both combatants still stand after
            ``round_cap`` rounds.
    """
    validate_combatant(combatant_a, "A")
    validate_combatant(combatant_b, "B")
    validate_limits(max_damage, round_cap)

    state = BattleState(vitality_a=combatant_a.vitality, vitality_b=combatant_b.vitality)

    while state.both_standing:
        if state.round_count >= round_cap:
            raise SimulationDivergedError(round_cap, state.vitality_a, state.vitality_b)
        damage_a = draw_damage(random_source, max_damage)
        damage_b = draw_damage(random_source, max_damage)
        state = play_round(state, damage_a, damage_b)

    outcome = outcome_of(state)
    assert outcome is not None

    return BattleResult(
        outcome=outcome,
        combatant_a=combatant_a,
        combatant_b=combatant_b,
        final_vitality_a=state.vitality_a,
        final_vitality_b=state.vitality_b,
        rounds=state.rounds,
    )


class BattleResolver:
    """Resolver bound to one random source and one set of limits.

    Holds no per-battle state; every :meth:`resolve` call starts fresh.
    """

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        max_damage: int = DEFAULT_MAX_DAMAGE,
        round_cap: int = DEFAULT_ROUND_CAP,
    ) -> None:
        validate_limits(max_damage, round_cap)
        self.random_source = random_source if random_source is not None else seeded_source()
        self.max_damage = max_damage
        self.round_cap = round_cap

    @classmethod
    def from_config(
        cls, config: BattleConfig, random_source: Optional[RandomSource] = None
    ) -> "BattleResolver":
        """Build a resolver from ``config``, seeding a source if none is given."""
        if random_source is None:
            random_source = seeded_source(config.seed)
        return cls(random_source, max_damage=config.max_damage, round_cap=config.round_cap)

    def resolve(self, combatant_a: Combatant, combatant_b: Combatant) -> BattleResult:
        return resolve(
            combatant_a,
            combatant_b,
            self.random_source,
            max_damage=self.max_damage,
            round_cap=self.round_cap,
        )
