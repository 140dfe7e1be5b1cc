"""Randomness source adapters.

The resolver never touches the ``random`` module directly; it draws every roll
through a :data:`auto_battle.types.RandomSource`. The factories below build
such sources from a seeded generator (normal play), a fixed sequence (test
fixtures, replays) or a constant (degenerate sources).

Examples
--------
>>> roll = seeded_source(42)
>>> 0 <= roll(5000) < 5000
True
>>> roll = sequence_source([7, 2])
>>> roll(10), roll(10)
(7, 2)
"""

import random
from typing import Iterable, Optional

from auto_battle.errors import RandomSourceExhaustedError
from auto_battle.types import RandomSource


def seeded_source(seed: Optional[int] = None) -> RandomSource:
    """Return a source backed by a private ``random.Random(seed)``.

    Each call creates its own generator, so two sources built from the same
    seed hand out the same values and never disturb the global RNG.
    """
    rng = random.Random(seed)

    def next_int(upper_bound: int) -> int:
        return rng.randrange(upper_bound)

    return next_int


def sequence_source(values: Iterable[int]) -> RandomSource:
    """Return a source replaying ``values`` in order.

    The bound passed on each call is ignored; the resolver validates that the
    replayed values fit it.

    Raises:
        RandomSourceExhaustedError: When called after the last value.
    """
    it = iter(list(values))
    drawn = 0

    def next_int(upper_bound: int) -> int:
        nonlocal drawn
        try:
            value = next(it)
        except StopIteration:
            raise RandomSourceExhaustedError(
                f"Sequence exhausted after {drawn} values"
            ) from None
        drawn += 1
        return value

    return next_int


def constant_source(value: int) -> RandomSource:
    """Return a source that always yields ``value``."""

    def next_int(upper_bound: int) -> int:
        return value

    return next_int
