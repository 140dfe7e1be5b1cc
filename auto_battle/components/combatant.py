"""Combatant component."""

from dataclasses import dataclass
from typing import Optional

from auto_battle.types import Vitality


@dataclass(frozen=True)
class Combatant:
    """A named participant with a starting vitality pool.

    Attributes:
        name:
            Display identifier; must be non-empty for a battle to start.
        vitality:
            Starting health / power. Battles reject negative values; ``0`` is
            accepted and loses immediately.
        source_id:
            Id of the character record this combatant was built from, or
            ``None`` for hand-built combatants. Informational only.
    """

    name: str
    vitality: Vitality
    source_id: Optional[int] = None
