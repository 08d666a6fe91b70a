"""Localization preference store.

Owns ``{backend_preferences, is_loading, error, user_language_override}``.

 - Backend preferences are fetched lazily, at most once per session. Concurrent
   `load_preferences` callers share one in-flight task; once loaded, further
   calls are no-ops until an explicit `reload_preferences`.
 - A failed fetch records an error string and keeps whatever was loaded
   before; state never regresses to "nothing loaded" because of a refresh.
 - The user language override is persisted on its own and affects the active
   locale only, never time zone or measurement system.

Every state change publishes `PrefEvent.LOCALIZATION_CHANGED`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Awaitable, Callable, Mapping, Optional

from prefsync.app.storage import PreferenceStorage, StorageError
from prefsync.config import settings
from .event_bus import EventBus, PrefEvent

_logger = logging.getLogger(__name__)

__all__ = [
    "MeasurementSystem",
    "LocalizationPreferences",
    "LocalizationStore",
    "PreferencesFetcher",
]


class MeasurementSystem(IntEnum):
    METRIC = 0
    IMPERIAL = 1


@dataclass(frozen=True)
class LocalizationPreferences:
    time_zone_id: str
    culture: str
    measurement_system: MeasurementSystem
    country: Optional[int] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "LocalizationPreferences":
        """Build from the backend shape ``{timeZoneId, culture, measurementSystem, country}``."""
        try:
            time_zone_id = str(data["timeZoneId"])
            culture = str(data["culture"])
            measurement = MeasurementSystem(int(data.get("measurementSystem", 0)))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed localization payload: {exc}") from exc
        country = data.get("country")
        return cls(
            time_zone_id=time_zone_id,
            culture=culture,
            measurement_system=measurement,
            country=int(country) if country is not None else None,
        )


PreferencesFetcher = Callable[[], Awaitable[LocalizationPreferences]]


class LocalizationStore:
    def __init__(
        self, bus: EventBus, storage: PreferenceStorage, fetcher: PreferencesFetcher
    ) -> None:
        self._bus = bus
        self._storage = storage
        self._fetcher = fetcher
        self._preferences: Optional[LocalizationPreferences] = None
        self._error: Optional[str] = None
        self._inflight: Optional[asyncio.Task[None]] = None
        # bumped by clear(); a fetch started under an older session is dropped
        self._session = 0
        self._user_language: Optional[str] = self._read_user_language()

    # State -------------------------------------------------------------
    @property
    def backend_preferences(self) -> Optional[LocalizationPreferences]:
        return self._preferences

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def user_language(self) -> Optional[str]:
        return self._user_language

    # Derived accessors (never block, never raise) -----------------------
    @property
    def is_ready(self) -> bool:
        return self._preferences is not None

    @property
    def time_zone_id(self) -> str:
        return self._preferences.time_zone_id if self._preferences else settings.DEFAULT_TIME_ZONE

    @property
    def culture(self) -> str:
        return self._preferences.culture if self._preferences else settings.DEFAULT_CULTURE

    @property
    def measurement_system(self) -> MeasurementSystem:
        if self._preferences is None:
            return MeasurementSystem.METRIC
        return self._preferences.measurement_system

    @property
    def country(self) -> Optional[int]:
        return self._preferences.country if self._preferences else None

    # Loading -----------------------------------------------------------
    async def load_preferences(self) -> None:
        if self._preferences is not None and self._inflight is None:
            return
        await self._join_or_start()

    async def reload_preferences(self) -> None:
        """Explicit refresh; still shares an in-flight fetch if one exists."""
        await self._join_or_start()

    async def _join_or_start(self) -> None:
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._fetch())
            self._publish()
        task = self._inflight
        # shield: a cancelled caller must not cancel the fetch other callers await
        await asyncio.shield(task)

    async def _fetch(self) -> None:
        session = self._session
        try:
            prefs = await self._fetcher()
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - fetch failure is non-fatal
            if session != self._session:
                return
            self._error = str(exc) or exc.__class__.__name__
            _logger.warning("localization preferences fetch failed: %s", self._error)
        else:
            if session != self._session:
                _logger.info("discarding localization preferences from an ended session")
                return
            self._preferences = prefs
            self._error = None
            _logger.info(
                "localization preferences loaded: culture=%s tz=%s", prefs.culture, prefs.time_zone_id
            )
        finally:
            if session == self._session:
                self._inflight = None
                self._publish()

    def clear(self) -> None:
        """Forget backend preferences (session end). The language override stays.

        A fetch still in flight is detached; its result is dropped on arrival.
        """
        self._session += 1
        detached = self._inflight is not None
        self._inflight = None
        if self._preferences is None and self._error is None and not detached:
            return
        self._preferences = None
        self._error = None
        self._publish()

    # User language -------------------------------------------------------
    def set_user_language(self, language: Optional[str]) -> None:
        code = language.strip().lower() if language else None
        if code == self._user_language:
            return
        self._user_language = code or None
        try:
            if self._user_language:
                self._storage.set(settings.USER_LANGUAGE_KEY, self._user_language)
            else:
                self._storage.remove(settings.USER_LANGUAGE_KEY)
        except StorageError as exc:
            _logger.warning("could not persist user language: %s", exc)
        self._publish()

    def _read_user_language(self) -> Optional[str]:
        raw = self._storage.get(settings.USER_LANGUAGE_KEY)
        return raw.strip().lower() if raw and raw.strip() else None

    # Internal ----------------------------------------------------------
    def _publish(self) -> None:
        self._bus.publish(
            PrefEvent.LOCALIZATION_CHANGED,
            {
                "ready": self.is_ready,
                "loading": self.is_loading,
                "error": self._error,
                "user_language": self._user_language,
            },
        )
