"""
History Store - Bounded log of recent optimizations, persisted as JSON
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from models.history import HistoryEntry

DEFAULT_MAX_ENTRIES = 20


def parse_max_entries(value) -> int:
    """Read a stored entry limit, falling back to the default when it is unusable"""
    try:
        max_entries = int(value)
    except (TypeError, ValueError):
        if value is not None:
            print(f"[HistoryStore] Ignoring invalid maxEntries {value!r}")
        return DEFAULT_MAX_ENTRIES
    return max_entries if max_entries >= 1 else DEFAULT_MAX_ENTRIES


class HistoryStore:
    """
    Most-recent-N append log.

    Loaded once at construction and written back on every mutation. Only the
    newest ``max_entries`` entries are kept.
    """

    _instance = None

    def __init__(self, path: Path, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.path = path
        self.max_entries = max(1, max_entries)
        self._entries: list[HistoryEntry] = self._load()

    @classmethod
    def get_instance(cls) -> "HistoryStore":
        """Get singleton instance, stored next to config.json"""
        if cls._instance is None:
            from .config_manager import ConfigManager

            config_manager = ConfigManager.get_instance()
            history_cfg = config_manager.get("history", {}) or {}
            cls._instance = HistoryStore(
                config_manager.config_dir / "history.json",
                parse_max_entries(history_cfg.get("maxEntries")),
            )
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    def _load(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                raw = json.load(f)
            entries = [HistoryEntry.model_validate(item) for item in raw]
        except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
            print(f"[HistoryStore] Error loading history, starting empty: {e}")
            return []

        return entries[-self.max_entries:]

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.path, "w") as f:
                json.dump([entry.model_dump() for entry in self._entries], f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save history: {e}")

    def record(
        self,
        language: str,
        original_code: str,
        optimized_code: str,
        improvements: list[str],
    ) -> HistoryEntry:
        """Create an entry for an optimization and append it"""
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            language=language,
            originalCode=original_code,
            optimizedCode=optimized_code,
            improvements=improvements,
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        self.append(entry)
        return entry

    def append(self, entry: HistoryEntry):
        previous = list(self._entries)
        self._entries.append(entry)
        del self._entries[:-self.max_entries]
        try:
            self._save()
        except RuntimeError:
            self._entries = previous
            raise

    def resize(self, max_entries: int):
        """Change the entry limit, dropping the oldest entries beyond it"""
        self.max_entries = max(1, max_entries)
        if len(self._entries) > self.max_entries:
            del self._entries[:-self.max_entries]
            self._save()
        print(f"[HistoryStore] Keeping at most {self.max_entries} entries")

    def list_entries(self) -> list[HistoryEntry]:
        """Entries, newest first"""
        return list(reversed(self._entries))

    def get(self, entry_id: str) -> HistoryEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def clear(self):
        self._entries = []
        self._save()
        print("[HistoryStore] History cleared")
