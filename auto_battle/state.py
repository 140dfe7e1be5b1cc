"""Immutable in-flight battle snapshot.

The resolver folds rounds over a :class:`BattleState`: every round returns a
*new* state built with :func:`dataclasses.replace`, nothing is mutated in
place. Keeping the fold pure is what makes a battle reproducible from the
sequence of rolls alone.
"""

from dataclasses import dataclass

from pyrsistent import pvector
from pyrsistent.typing import PVector

from auto_battle.records import RoundRecord
from auto_battle.types import Vitality


@dataclass(frozen=True)
class BattleState:
    """Vitalities plus the append-only round log.

    Attributes:
        vitality_a (Vitality): Current vitality of combatant A.
        vitality_b (Vitality): Current vitality of combatant B.
        rounds (PVector[RoundRecord]): Rounds played so far, oldest first.
    """

    vitality_a: Vitality
    vitality_b: Vitality
    rounds: PVector[RoundRecord] = pvector()

    @property
    def round_count(self) -> int:
        return len(self.rounds)

    @property
    def both_standing(self) -> bool:
        return self.vitality_a > 0 and self.vitality_b > 0
