from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Set

from ..core.enums import AttendanceStatus, MarkedVia
from .model import AttendanceRecord


class AttendanceLedger(Protocol):
    """Append-only store of attendance records.

    ``insert_unique`` must be a single atomic conditional insert on the
    (group, person, day) key and raise ``LedgerConflict`` when the key exists.
    """

    def insert_unique(
        self,
        *,
        group_id: int,
        person_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        marked_via: MarkedVia,
        marked_at: datetime,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def find_by_group(self, group_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_person(self, person_id: int, group_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_all(self, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def distinct_session_dates(self, group_id: int) -> Set[date]:
        raise NotImplementedError
