"""Battle log and result records.

A battle produces one :class:`RoundRecord` per simultaneous exchange and ends
in a single :class:`BattleResult`. Both are frozen; the round log is a
persistent vector, so a result handed to the caller can be shared freely and
never changes after the resolver returns it.
"""

from dataclasses import dataclass
from typing import Optional

from pyrsistent import pvector
from pyrsistent.typing import PVector

from auto_battle.components import Combatant
from auto_battle.types import Outcome, Vitality


@dataclass(frozen=True)
class RoundRecord:
    """One round of simultaneous damage.

    Attributes:
        index (int): 1-based round number.
        damage_a (int): Damage dealt *by* combatant A this round.
        damage_b (int): Damage dealt *by* combatant B this round.
        vitality_a (Vitality): A's vitality after the round (may be <= 0).
        vitality_b (Vitality): B's vitality after the round (may be <= 0).
    """

    index: int
    damage_a: int
    damage_b: int
    vitality_a: Vitality
    vitality_b: Vitality


@dataclass(frozen=True)
class BattleResult:
    """Terminal output of :func:`auto_battle.resolver.resolve`.

    Attributes:
        outcome (Outcome): ``A_WINS``, ``B_WINS`` or ``DRAW``.
        combatant_a (Combatant): First combatant as supplied.
        combatant_b (Combatant): Second combatant as supplied.
        final_vitality_a (Vitality): A's vitality when the battle ended.
        final_vitality_b (Vitality): B's vitality when the battle ended.
        rounds (PVector[RoundRecord]): Every round played, in order. Empty when
            a combatant started at zero vitality.
    """

    outcome: Outcome
    combatant_a: Combatant
    combatant_b: Combatant
    final_vitality_a: Vitality
    final_vitality_b: Vitality
    rounds: PVector[RoundRecord] = pvector()

    @property
    def winner(self) -> Optional[str]:
        """Name of the winning combatant, ``None`` on a draw."""
        if self.outcome == Outcome.A_WINS:
            return self.combatant_a.name
        if self.outcome == Outcome.B_WINS:
            return self.combatant_b.name
        return None

    @property
    def is_draw(self) -> bool:
        return self.outcome == Outcome.DRAW

    @property
    def round_count(self) -> int:
        return len(self.rounds)
