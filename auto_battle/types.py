"""Common type aliases and enumerations.

``RandomSource`` is the central extension point of the resolver: every damage
roll is drawn through one, so a battle is fully determined by the values the
source hands out.
"""

from enum import StrEnum, auto
from typing import Callable

RandomSource = Callable[[int], int]
"""``(exclusive_upper_bound) -> int`` drawing a value in ``[0, bound)``."""

Vitality = int

DEFAULT_MAX_DAMAGE = 5000
DEFAULT_ROUND_CAP = 10_000


class Outcome(StrEnum):
    """Terminal verdict of a battle (reflected in serialized reports)."""

    A_WINS = auto()
    B_WINS = auto()
    DRAW = auto()
