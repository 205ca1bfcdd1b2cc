"""Player persistence.

Stores hold whole PlayerRecords keyed by account id, plus the shared
activity feed. The engine treats list_all_players() as a point-in-time
snapshot. Gold is the one field two players can both write (loot
transfer), so compare_and_swap_gold and save(expected_gold=...) guard it.
"""
import json
import threading
from dataclasses import replace
from pathlib import Path
from typing import Optional, Protocol

from .ledger import check_invariants
from .logger import ChannelLogger, get_channel
from .models import PlayerRecord, PlayerSnapshot


class GameStore(Protocol):
    def load(self, player_id: str) -> Optional[PlayerRecord]:
        ...

    def save(self, record: PlayerRecord, expected_gold: Optional[int] = None) -> bool:
        ...

    def delete(self, player_id: str) -> bool:
        ...

    def list_all_players(self) -> list[PlayerSnapshot]:
        ...

    def compare_and_swap_gold(self, player_id: str, expected: int, new: int) -> bool:
        ...

    def load_activity(self) -> list[dict]:
        ...

    def save_activity(self, entries: list[dict]) -> None:
        ...


class MemoryStore:
    """Process-local store, used by tests and as the JSON store's cache."""

    def __init__(
        self,
        records: Optional[dict[str, PlayerRecord]] = None,
        logger: Optional[ChannelLogger] = None,
        activity: Optional[list[dict]] = None,
    ):
        self._records: dict[str, PlayerRecord] = dict(records or {})
        self._activity: list[dict] = list(activity or [])
        self._lock = threading.Lock()
        self.logger = logger or get_channel("store")

    def load(self, player_id: str) -> Optional[PlayerRecord]:
        with self._lock:
            record = self._records.get(player_id)
            return record.copy() if record is not None else None

    def save(self, record: PlayerRecord, expected_gold: Optional[int] = None) -> bool:
        """Write the whole record.

        With `expected_gold` the write only happens if the stored gold still
        has that value, so a session never overwrites gold another writer
        changed since it last loaded the record.
        """
        with self._lock:
            current = self._records.get(record.id)
            if expected_gold is not None and current is not None and current.stats.gold != expected_gold:
                self.logger.info(
                    "rejected stale save of %s (expected gold=%d, stored=%d)",
                    record.id, expected_gold, current.stats.gold,
                )
                return False
            self._records[record.id] = record.copy()
        self.logger.debug("saved %s (gold=%d, level=%d)", record.id, record.stats.gold, record.weapon.level)
        self._after_write()
        return True

    def delete(self, player_id: str) -> bool:
        with self._lock:
            removed = self._records.pop(player_id, None) is not None
        if removed:
            self._after_write()
        return removed

    def list_all_players(self) -> list[PlayerSnapshot]:
        with self._lock:
            return [record.snapshot() for record in self._records.values()]

    def compare_and_swap_gold(self, player_id: str, expected: int, new: int) -> bool:
        """Set a player's gold to `new` only if it is still `expected`."""
        if new < 0:
            raise ValueError(f"Gold cannot go negative ({new})")
        with self._lock:
            record = self._records.get(player_id)
            if record is None or record.stats.gold != expected:
                return False
            record.stats = replace(record.stats, gold=new)
        self._after_write()
        return True

    def load_activity(self) -> list[dict]:
        with self._lock:
            return [dict(entry) for entry in self._activity]

    def save_activity(self, entries: list[dict]) -> None:
        with self._lock:
            self._activity = [dict(entry) for entry in entries]
        self._after_write()

    def _after_write(self) -> None:
        pass


class JsonFileStore(MemoryStore):
    """MemoryStore that writes every change through to a JSON file.

    Records are validated with check_invariants on load, so a hand-edited
    save with an impossible weapon or negative gold is refused up front.
    """

    def __init__(self, path: Path, logger: Optional[ChannelLogger] = None):
        self.path = Path(path)
        records: dict[str, PlayerRecord] = {}
        activity: list[dict] = []
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            for entry in data.get("players", []):
                record = PlayerRecord.from_dict(entry)
                check_invariants(record.weapon, record.stats)
                records[record.id] = record
            activity = data.get("activity", [])
        super().__init__(records, logger, activity)

    def _after_write(self) -> None:
        with self._lock:
            payload = {
                "players": [record.to_dict() for record in self._records.values()],
                "activity": self._activity,
            }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)
