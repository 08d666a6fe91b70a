"""Logging service.

In-process logging handler capturing recent records into a ring buffer and
emitting `PrefEvent.LOG_RECORD_ADDED` on the engine's bus, so a diagnostics
panel can show why a theme or locale was (not) applied.

 - Capacity-bound ring buffer
 - Filtering by level name or logger name substring
 - Attaches to the ``prefsync`` logger by default, not the root logger
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import EventBus, PrefEvent

__all__ = ["LogEntry", "LoggingService"]


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__()
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self._svc._ingest_record(record)


class LoggingService:
    def __init__(
        self,
        bus: Optional[EventBus] = None,
        capacity: int = 500,
        *,
        logger_name: str = "prefsync",
    ) -> None:
        self._bus = bus
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(logging.DEBUG)
        self._logger_name = logger_name
        self._attached = False
        self._previous_level: Optional[int] = None

    # Lifecycle --------------------------------------------------------
    def attach(self) -> None:
        if self._attached:
            return
        target = logging.getLogger(self._logger_name)
        target.addHandler(self._handler)
        self._previous_level = target.level
        if target.getEffectiveLevel() > logging.DEBUG:
            target.setLevel(logging.DEBUG)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        target = logging.getLogger(self._logger_name)
        target.removeHandler(self._handler)
        if self._previous_level is not None:
            target.setLevel(self._previous_level)
            self._previous_level = None
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    # Internal ingestion -----------------------------------------------
    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        if self._bus is None:
            return
        # The bus logs handler failures itself; skip its own records to avoid recursion
        if record.name.endswith("event_bus"):
            return
        self._bus.publish(
            PrefEvent.LOG_RECORD_ADDED,
            {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
        )

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        out: List[LogEntry] = []
        for e in self.recent():
            if level and e.level != level:
                continue
            if name_contains and name_contains not in e.name:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str | Path, *, level: str | None = None) -> int:
        """Write (filtered) entries as JSON Lines; returns the number of lines."""
        entries = self.filter(level=level)
        with open(path, "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
