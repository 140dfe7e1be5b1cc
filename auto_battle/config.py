"""Runtime configuration.

Two settings models cover the knobs of a run: :class:`BattleConfig` for the
resolver and :class:`ProviderConfig` for the character API. Both are
``pydantic_settings.BaseSettings`` reading ``AUTO_BATTLE_*`` environment
variables; defaults are usable as is. The CLI overlays its options on top with
:meth:`BattleConfig.with_overrides`.

``from_env`` reports bad values as :class:`ConfigError` naming the offending
variable. Constructing a model directly raises pydantic's ``ValidationError``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from auto_battle.errors import ConfigError
from auto_battle.types import DEFAULT_MAX_DAMAGE, DEFAULT_ROUND_CAP

ENV_PREFIX = "AUTO_BATTLE_"

DEFAULT_API_URL = "https://akabab.github.io/superhero-api/api/id/{id}.json"
DEFAULT_NAME_FIELD = "name"
DEFAULT_VITALITY_FIELD = "powerstats.durability"
DEFAULT_MAX_CHARACTER_ID = 731

_SETTINGS_CONFIG: Any = {
    "env_prefix": ENV_PREFIX,
    "case_sensitive": False,
    "extra": "ignore",
    "env_ignore_empty": True,
    "frozen": True,
}


def _config_error(exc: ValidationError) -> ConfigError:
    problems = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "?"
        problems.append(f"{ENV_PREFIX}{field.upper()}: {error['msg']}")
    return ConfigError("Invalid configuration: " + "; ".join(problems))


def _prefixed_values(environ: Mapping[str, str]) -> dict:
    """Pick ``AUTO_BATTLE_*`` entries out of ``environ`` as field values."""
    values = {}
    for key, raw in environ.items():
        if not key.upper().startswith(ENV_PREFIX) or raw.strip() == "":
            continue
        values[key[len(ENV_PREFIX):].lower()] = raw.strip()
    return values


class _EnvSettings(BaseSettings):
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None):
        """Build from the process environment, or from ``environ`` when given.

        Raises:
            ConfigError: A variable is unparsable or out of range.
        """
        try:
            if environ is None:
                return cls()
            fields = cls.model_fields
            values = {k: v for k, v in _prefixed_values(environ).items() if k in fields}
            return cls(**values)
        except ValidationError as exc:
            raise _config_error(exc) from exc

    def with_overrides(self, **overrides: Any):
        """Return a copy with ``overrides`` applied and validated.

        Raises:
            ConfigError: An override is out of range.
        """
        try:
            return type(self)(**{**self.model_dump(), **overrides})
        except ValidationError as exc:
            raise _config_error(exc) from exc


class BattleConfig(_EnvSettings):
    """Resolver settings.

    Attributes:
        max_damage: Exclusive upper bound of a single damage roll.
        round_cap: Rounds after which a battle is declared diverged.
        seed: Seed for damage rolls and character ids; ``None`` draws from OS entropy.
    """

    max_damage: int = Field(default=DEFAULT_MAX_DAMAGE, gt=0)
    round_cap: int = Field(default=DEFAULT_ROUND_CAP, gt=0)
    seed: Optional[int] = None

    model_config = _SETTINGS_CONFIG


class ProviderConfig(_EnvSettings):
    """Character API settings.

    Attributes:
        api_url: Record URL with an ``{id}`` placeholder.
        name_field: Dotted path of the display name in the JSON record.
        vitality_field: Dotted path of the value used as starting vitality.
        max_character_id: Random ids are drawn from ``[1, max_character_id]``.
        max_attempts: Fetches tried per random combatant before giving up.
        timeout: Per-request timeout in seconds.
    """

    api_url: str = Field(default=DEFAULT_API_URL)
    name_field: str = Field(default=DEFAULT_NAME_FIELD, min_length=1)
    vitality_field: str = Field(default=DEFAULT_VITALITY_FIELD, min_length=1)
    max_character_id: int = Field(default=DEFAULT_MAX_CHARACTER_ID, ge=1)
    max_attempts: int = Field(default=5, ge=1)
    timeout: float = Field(default=10.0, gt=0)

    model_config = _SETTINGS_CONFIG

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if "{id}" not in v:
            raise ValueError(f"URL template lacks an {{id}} placeholder: {v!r}")
        return v
