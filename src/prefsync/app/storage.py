"""Persistent key-value storage for preference flags.

Holds the small set of values that must survive a reload: the global mode
flag, per-identity mode preferences and the user language override. Resolved
colors and tenant overrides are never written here.

Design principles:
- Pure logic (no Qt import) so it can be unit-tested headless.
- Single JSON object on disk, written atomically via a temp file + replace.
- Graceful fallback: a missing, unreadable or corrupt file reads as empty;
  the failure is logged and callers fall through to their next source.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from prefsync.config import settings

__all__ = ["PreferenceStorage", "StorageError"]

_logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when a value cannot be written."""


class PreferenceStorage:
    def __init__(self, base_dir: str | Path | None = None, filename: str | None = None) -> None:
        base = Path(base_dir) if base_dir else Path(settings.DATA_DIR)
        self.path = base / (filename or settings.STORAGE_FILENAME)

    # Reads ----------------------------------------------------------------
    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("preference storage unreadable (%s): %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("preference storage corrupt (%s): root is not an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def keys(self) -> list[str]:
        return sorted(self._load().keys())

    # Writes ---------------------------------------------------------------
    def _save(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        data = self._load()
        if data.get(key) == value:
            return
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._save(data)
