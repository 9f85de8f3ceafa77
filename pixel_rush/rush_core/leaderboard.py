"""
Leaderboard
===========

Top-N round results persisted through an injected key-value store.

Usage:
    from pixel_rush.rush_core.leaderboard import Leaderboard, LeaderboardRecord, JsonFileStore

    board = Leaderboard(JsonFileStore("~/.pixel_rush/leaderboard.json"))
    board.load()
    board.submit(LeaderboardRecord("ada", score=120, elapsed_ms=30500, prize=120))

Stored value format (under a single key), a JSON list:
    [{"name": "ada", "score": 120, "elapsedMs": 30500, "prize": 120}, ...]
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union


@dataclass(frozen=True)
class LeaderboardRecord:
    """One finished round."""
    name: str
    score: int
    elapsed_ms: int
    prize: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "elapsedMs": self.elapsed_ms,
            "prize": self.prize,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardRecord":
        """
        Parse a stored record.

        Raises:
            KeyError: If a field is missing.
            TypeError, ValueError: If a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Leaderboard record must be an object, got {type(data).__name__}")
        return cls(
            name=str(data["name"]),
            score=int(data["score"]),
            elapsed_ms=int(data["elapsedMs"]),
            prize=int(data["prize"]),
        )


class KeyValueStore(Protocol):
    """String key-value persistence capability."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store, lost on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    Store backed by a JSON object on disk mapping keys to string values.

    An unreadable or corrupt file reads as empty; the next write replaces it.
    """

    def __init__(self, path: Union[str, Path], debug: bool = False):
        self._path = Path(os.path.expanduser(str(path)))
        self._debug = debug

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            if self._debug:
                print(f"[DEBUG] Ignoring unreadable store {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        # Create parent directories if needed
        self._path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._path, "w") as f:
            json.dump(data, f, indent=2)


class Leaderboard:
    """
    Sorted top-N list of LeaderboardRecord.

    Reads once at load() and read-modify-writes on submit(). Malformed or
    missing stored data degrades to an empty list and never raises.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = "pixelRushLeaderboard",
        max_entries: int = 5,
        debug: bool = False
    ):
        """
        Initialize leaderboard.

        Args:
            store: Persistence backend. In-memory if None.
            key: Key the list is stored under.
            max_entries: Number of records kept.
            debug: Print recovered errors.
        """
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._store: KeyValueStore = store if store is not None else MemoryStore()
        self._key = key
        self._max_entries = max_entries
        self._debug = debug
        self._entries: List[LeaderboardRecord] = []

    @property
    def entries(self) -> List[LeaderboardRecord]:
        """In-memory view, best first."""
        return list(self._entries)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def key(self) -> str:
        return self._key

    def _read(self) -> List[LeaderboardRecord]:
        raw = self._store.get(self._key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            records = [LeaderboardRecord.from_dict(entry) for entry in data]
        except (ValueError, TypeError, KeyError, OverflowError, RecursionError) as e:
            if self._debug:
                print(f"[DEBUG] Malformed leaderboard under {self._key!r}, starting empty: {e}")
            return []
        return self._rank(records)

    def _rank(self, records: List[LeaderboardRecord]) -> List[LeaderboardRecord]:
        # sorted() is stable: earlier records win ties
        ranked = sorted(records, key=lambda r: r.score, reverse=True)
        return ranked[:self._max_entries]

    def load(self) -> List[LeaderboardRecord]:
        """
        Read the persisted list into memory.

        Returns:
            Records best first, empty if absent or malformed.
        """
        self._entries = self._read()
        return self.entries

    def qualifies(self, score: int) -> bool:
        """True if a record with this score would be kept."""
        if len(self._entries) < self._max_entries:
            return True
        return score > self._entries[-1].score

    def submit(self, record: LeaderboardRecord) -> List[LeaderboardRecord]:
        """
        Insert a record, keep the top N, persist.

        A failed write leaves the updated list in memory only.

        Args:
            record: Finished round.

        Returns:
            Updated records, best first.
        """
        current = self._read()
        updated = self._rank(current + [record])
        self._entries = updated
        try:
            self._store.set(self._key, json.dumps([r.to_dict() for r in updated]))
        except OSError as e:
            if self._debug:
                print(f"[DEBUG] Could not persist leaderboard under {self._key!r}: {e}")
        return self.entries

    def clear(self) -> None:
        """Remove all records."""
        self._store.set(self._key, json.dumps([]))
        self._entries = []
