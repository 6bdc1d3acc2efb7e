from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, MarkedVia


@dataclass(frozen=True)
class AttendanceRecord:
    """One ledger row per (group, person, calendar day). Immutable once written."""

    record_id: int
    group_id: int
    person_id: int
    attendance_date: date
    status: AttendanceStatus
    marked_via: MarkedVia
    marked_at: datetime
    # Reserved for location proofing; never populated here.
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def counts_as_present(self) -> bool:
        return self.status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "groupId": self.group_id,
            "personId": self.person_id,
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "markedVia": self.marked_via.value,
            "markedAt": self.marked_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
