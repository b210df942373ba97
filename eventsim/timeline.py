"""
Append-only per-entity event log.

Entries hold only validated events, kept sorted by timestamp with ties
broken by insertion order, which is the order replay folds them in.
Interpretation and memories are derived during replay, never stored.

The log also holds the reference snapshot: a cached replay cursor at the
entity's reference time, dropped whenever the log changes.
"""

import bisect
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from eventsim.entity import Entity
from eventsim.events import Event
from eventsim.evolution import ReplayCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    """One logged event and its insertion sequence."""
    seq: int
    event: Event

    @property
    def timestamp(self) -> datetime:
        return self.event.timestamp

    @property
    def sort_key(self) -> Tuple[datetime, int]:
        return (self.timestamp, self.seq)


@dataclass
class ReferenceSnapshot:
    """Replay cursor covering every entry with timestamp <= horizon."""
    version: int
    horizon: datetime
    cursor: ReplayCursor


class EntityTimeline:
    """Event log and reference snapshot for one entity."""

    def __init__(self, entity: Entity, reference_time: datetime):
        self.entity = entity
        self.reference_time = reference_time
        self._entries: List[LogEntry] = []
        self._keys: List[Tuple[datetime, int]] = []
        self._next_seq = 0
        self._version = 0
        self._snapshot: Optional[ReferenceSnapshot] = None

    @property
    def version(self) -> int:
        return self._version

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, event: Event) -> LogEntry:
        """Insert a timestamped event after any entries with the same timestamp."""
        if event.timestamp is None:
            raise ValueError(f"Event {event.id} has no timestamp")
        entry = LogEntry(self._next_seq, event)
        self._next_seq += 1
        index = bisect.bisect_right(self._keys, entry.sort_key)
        self._keys.insert(index, entry.sort_key)
        self._entries.insert(index, entry)
        self._version += 1
        if self._snapshot is not None:
            logger.debug(f"Invalidating reference snapshot for {self.entity.id}")
            self._snapshot = None
        return entry

    def snapshot_for(self, timestamp: datetime) -> Optional[ReplayCursor]:
        """Cached cursor usable for a query at `timestamp`, if any."""
        snapshot = self._snapshot
        if snapshot is None or snapshot.version != self._version:
            return None
        if timestamp < snapshot.horizon:
            return None
        return snapshot.cursor

    def store_snapshot(self, horizon: datetime, cursor: ReplayCursor):
        self._snapshot = ReferenceSnapshot(self._version, horizon, cursor.copy())

    def invalidate_snapshot(self):
        self._snapshot = None

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None and self._snapshot.version == self._version
