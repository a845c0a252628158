"""
Per-activity serialization for capacity-sensitive writes.

Counting approved applications and then writing a new status is a
check-then-act sequence. Two approvals for the same activity must
not both pass the count before either one commits, so every write
that moves an application into or out of "approved" runs while
holding the activity's lock here, and re-reads the activity row
with SELECT ... FOR UPDATE so that databases with row locks also
serialize writers in other processes.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from volunteer_system.models.activity import Activity


class _Entry:
    """A lock and the number of threads holding or waiting for it."""

    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.RLock()
        self.holders = 0


class ActivityLocks:
    """
    Registry of one re-entrant lock per activity id.

    One instance is shared by every request in the process;
    it is created at application startup and injected into
    the ApplicationService.

    An entry exists only while some thread holds or waits for
    it. The last one out removes it, so ids that never matched
    an activity, or activities nobody touches any more, cost
    nothing.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[int, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _acquire_entry(self, activity_id: int) -> _Entry:
        with self._guard:
            entry = self._entries.get(activity_id)
            if entry is None:
                entry = _Entry()
                self._entries[activity_id] = entry
            entry.holders += 1
            return entry

    def _release_entry(self, activity_id: int, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[activity_id]

    @contextmanager
    def hold(self, activity_id: int) -> Iterator[None]:
        """Hold the activity's lock for the duration of the block."""
        entry = self._acquire_entry(activity_id)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(activity_id, entry)


def lock_activity_row(db: Session, activity_id: int) -> Activity | None:
    """
    Re-read an activity with a row lock, bypassing the identity map.

    SQLite ignores FOR UPDATE; there the in-process lock is the
    only serialization.
    """
    return db.execute(
        select(Activity)
        .where(Activity.id == activity_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
