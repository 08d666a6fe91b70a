"""EventBus: the engine's observer channel.

Synchronous publish/subscribe with typed event names. Each engine owns its own
bus (no module-level instance), so tests build isolated containers.

Goals:
 - Decouple the stores from the coordinator that writes rendering resources
 - Error isolation: one failing handler doesn't break the publish cycle
 - One-shot (once) subscriptions and explicit unsubscribe handles
 - Optional ring-buffer tracing for diagnostics

Dispatch runs on the caller's stack. Handlers may publish further events
(re-entrant publish is allowed); loop suppression is the responsibility of the
handler, see `SynchronizationCoordinator`.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol, Tuple

__all__ = [
    "PrefEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]

_logger = logging.getLogger(__name__)


class PrefEvent(str, Enum):
    THEME_CHANGED = "theme_changed"  # resolved color map changed
    MODE_CHANGED = "mode_changed"  # dark/light flag changed
    TENANT_CHANGED = "tenant_changed"
    LOCALIZATION_CHANGED = "localization_changed"  # backend prefs / override / loading state
    LOCALE_CHANGED = "locale_changed"  # translation engine switched language
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | PrefEvent) -> str:
    return name.value if isinstance(name, PrefEvent) else name


class EventBus:
    DEFAULT_TRACE_CAPACITY = 50

    def __init__(self) -> None:
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []
        self._tracing_enabled = False
        self._traces: Deque[Tuple[str, float, str]] = deque(maxlen=self.DEFAULT_TRACE_CAPACITY)

    # Subscription management -------------------------------------------
    def subscribe(
        self, name: str | PrefEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.active = False
        bucket = self._subs.get(sub.event)
        if not bucket:
            return
        remaining = [s for s in bucket if s is not sub]
        if remaining:
            self._subs[sub.event] = remaining
        else:
            self._subs.pop(sub.event, None)

    def clear(self) -> None:
        self._subs.clear()
        self._errors.clear()

    # Publishing ----------------------------------------------------------
    def publish(self, name: str | PrefEvent, payload: Any = None) -> Event:
        evt = Event(name=_key(name), payload=payload, timestamp=perf_counter())
        if self._tracing_enabled:
            text = "-" if payload is None else str(payload)
            self._traces.append((evt.name, evt.timestamp, text if len(text) <= 40 else text[:37] + "..."))
        # Snapshot so handlers can (un)subscribe while we dispatch
        for sub in list(self._subs.get(evt.name, ())):
            if not sub.active:
                continue
            if sub.once:
                self.unsubscribe(sub)
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler failures
                _logger.warning("handler for %s failed: %s", evt.name, exc, exc_info=True)
                self._errors.append((evt, exc))
        return evt

    # Introspection -------------------------------------------------------
    def subscriber_count(self, name: str | PrefEvent) -> int:
        return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        return list(self._errors)

    # Tracing ---------------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        self._tracing_enabled = enabled
        if capacity is not None and capacity != self._traces.maxlen:
            self._traces = deque(self._traces, maxlen=capacity)

    def recent_traces(self) -> list[Tuple[str, float, str]]:
        return list(self._traces)
