"""Character-data provider over HTTP.

Turns records of a public character API into :class:`Combatant` values. The
provider is the only part of the package that touches the network; the
resolver receives fully built combatants and never sees a fetch error.

Failure mapping for a single fetch (:meth:`CharacterProvider.fetch_combatant`):

* HTTP 404 -> :class:`NotFoundError` (ids in the API are sparse).
* Transport failures, timeouts and other non-2xx statuses -> :class:`NetworkError`.
* Non-JSON bodies, missing names, missing / non-numeric / negative vitality
  -> :class:`MalformedCharacterError`.

:meth:`CharacterProvider.fetch_random_combatant` retries any of those with a
different random id, at most ``ProviderConfig.max_attempts`` times, and then
re-raises the last error.
"""

import math
import random
import re
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Mapping, Optional, Set, Tuple

import requests

from auto_battle.components import Combatant
from auto_battle.config import ProviderConfig
from auto_battle.errors import (
    MalformedCharacterError,
    NetworkError,
    NotFoundError,
    ProviderError,
)
from auto_battle.utils.log import get_logger

logger = get_logger(__name__)

_GROUPED_DIGITS = re.compile(r"^\d{1,3}(?:[.,]\d{3})+$")
_MISSING = object()


def lookup_field(record: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted ``path`` through nested mappings; ``None`` if absent."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part, _MISSING)
        if value is _MISSING:
            return None
    return value


def parse_vitality(raw: Any) -> int:
    """Convert an API value into a non-negative integer vitality.

    Integers pass through, finite floats are truncated and strings may use
    ``.`` or ``,`` as thousands separators (``"60.000.000"``).

    Raises:
        ValueError: If ``raw`` is not a usable non-negative number.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValueError(f"not a number: {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValueError(f"not a finite number: {raw!r}")
        value = int(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if _GROUPED_DIGITS.match(text):
            value = int(re.sub(r"[.,]", "", text))
        else:
            number = float(text)
            if not math.isfinite(number):
                raise ValueError(f"not a finite number: {raw!r}")
            value = int(number)
    else:
        raise ValueError(f"unsupported type {type(raw).__name__}")
    if value < 0:
        raise ValueError(f"negative value: {raw!r}")
    return value


def combatant_from_record(
    record: Any, config: ProviderConfig, character_id: Optional[int] = None
) -> Combatant:
    """Build a combatant from a decoded JSON record."""
    if not isinstance(record, Mapping):
        raise MalformedCharacterError(
            f"Character {character_id} is not a JSON object", character_id
        )
    name = lookup_field(record, config.name_field)
    if not isinstance(name, str) or not name.strip():
        raise MalformedCharacterError(
            f"Character {character_id} has no usable {config.name_field!r}", character_id
        )
    try:
        vitality = parse_vitality(lookup_field(record, config.vitality_field))
    except ValueError as exc:
        raise MalformedCharacterError(
            f"Character {character_id} ({name}) has no usable "
            f"{config.vitality_field!r}: {exc}",
            character_id,
        ) from exc
    return Combatant(name=name.strip(), vitality=vitality, source_id=character_id)


class CharacterProvider:
    """Fetch combatants from the configured character API.

    Args:
        config: API location, field mapping and retry bound.
        session: HTTP session to use; a private ``requests.Session`` is
            created (and closed by :meth:`close`) when omitted.
        seed: Seed for random id selection.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        session: Optional[requests.Session] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.config = config if config is not None else ProviderConfig()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._rng = random.Random(seed)
        self._rng_lock = threading.Lock()

    def __enter__(self) -> "CharacterProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def url_for(self, character_id: int) -> str:
        return self.config.api_url.format(id=character_id)

    def fetch_combatant(self, character_id: int) -> Combatant:
        """Fetch one character record and convert it.

        Raises:
            NotFoundError: The API answered 404.
            NetworkError: Transport failure or another non-2xx status.
            MalformedCharacterError: The record cannot be used as a combatant.
        """
        url = self.url_for(character_id)
        logger.debug("fetch_character", character_id=character_id, url=url)
        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise NetworkError(
                f"Request for character {character_id} failed: {exc}", character_id
            ) from exc

        if response.status_code == 404:
            raise NotFoundError(f"Character {character_id} not found", character_id)
        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Character {character_id}: unexpected HTTP {response.status_code}",
                character_id,
            )

        try:
            record = response.json()
        except ValueError as exc:
            raise MalformedCharacterError(
                f"Character {character_id}: response is not JSON", character_id
            ) from exc
        return combatant_from_record(record, self.config, character_id)

    def _spawn_rng(self) -> random.Random:
        """Derive an independent id generator from the provider's seed."""
        with self._rng_lock:
            return random.Random(self._rng.getrandbits(64))

    def _draw_id(self, rng: random.Random, tried: Set[int]) -> int:
        upper = self.config.max_character_id
        character_id = rng.randint(1, upper)
        while character_id in tried and len(tried) < upper:
            character_id = rng.randint(1, upper)
        return character_id

    def fetch_random_combatant(self, rng: Optional[random.Random] = None) -> Combatant:
        """Fetch a random character, retrying failures with fresh ids.

        Args:
            rng: Generator for the ids of this fetch. When omitted one is
                derived from the provider's seed, so successive calls from one
                thread are reproducible.

        Raises:
            ProviderError: The last failure once ``max_attempts`` fetches failed.
        """
        if rng is None:
            rng = self._spawn_rng()
        tried: Set[int] = set()
        last_error: Optional[ProviderError] = None
        for attempt in range(1, self.config.max_attempts + 1):
            character_id = self._draw_id(rng, tried)
            tried.add(character_id)
            try:
                return self.fetch_combatant(character_id)
            except ProviderError as exc:
                last_error = exc
                logger.warning(
                    "fetch_character_failed",
                    character_id=character_id,
                    attempt=attempt,
                    max_attempts=self.config.max_attempts,
                    error=str(exc),
                )
        assert last_error is not None
        raise last_error

    def fetch_two_combatants(self) -> Tuple[Combatant, Combatant]:
        """Fetch two random combatants concurrently.

        Each slot gets its own id generator, derived on the calling thread, so
        a seeded provider yields the same pair whatever order responses
        arrive in. Both fetches must succeed; when both fail the first slot's
        error is raised and the second slot's is logged.
        """
        slot_rngs = [self._spawn_rng(), self._spawn_rng()]
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(self.fetch_random_combatant, rng) for rng in slot_rngs]
            wait(futures)

        errors = [(slot, f.exception()) for slot, f in zip("AB", futures) if f.exception()]
        if errors:
            for slot, error in errors[1:]:
                logger.warning("fetch_slot_failed", slot=slot, error=str(error))
            raise errors[0][1]
        return futures[0].result(), futures[1].result()
