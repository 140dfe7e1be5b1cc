"""Exception hierarchy.

Everything raised on purpose derives from :class:`AutoBattleError` so callers
can catch the package's failures in one place. Input validation errors also
subclass ``ValueError``.
"""

from typing import Optional


class AutoBattleError(Exception):
    """Base class for all package errors."""


class InvalidInputError(AutoBattleError, ValueError):
    """A battle was requested with unusable inputs; no round was played."""


class SimulationDivergedError(AutoBattleError):
    """The round cap was reached while both combatants were still standing."""

    def __init__(self, round_cap: int, vitality_a: int, vitality_b: int) -> None:
        super().__init__(
            f"No result after {round_cap} rounds "
            f"(vitality A={vitality_a}, B={vitality_b})"
        )
        self.round_cap = round_cap
        self.vitality_a = vitality_a
        self.vitality_b = vitality_b


class RandomSourceExhaustedError(AutoBattleError):
    """A finite random source ran out of values."""


class ConfigError(AutoBattleError, ValueError):
    """An environment setting could not be parsed."""


class ProviderError(AutoBattleError):
    """Base class for character-data fetch failures."""

    def __init__(self, message: str, character_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.character_id = character_id


class NotFoundError(ProviderError):
    """The API has no character with the requested id."""


class NetworkError(ProviderError):
    """Transport failure, timeout or unexpected HTTP status."""


class MalformedCharacterError(ProviderError):
    """The character record lacks a usable name or vitality."""
