from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PersonStats:
    """Attendance of one person within one group."""

    person_id: int
    full_name: str
    external_ref: Optional[str]
    total_sessions: int
    present_count: int
    absent_count: int
    percentage: float

    def to_dict(self) -> dict:
        return {
            "personId": self.person_id,
            "name": self.full_name,
            "studentId": self.external_ref,
            "totalSessions": self.total_sessions,
            "present": self.present_count,
            "absent": self.absent_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class GroupStats:
    """Attendance of one person in one of their groups (person analytics view)."""

    group_id: int
    group_name: str
    group_code: str
    total_sessions: int
    present_count: int
    absent_count: int
    percentage: float

    def to_dict(self) -> dict:
        return {
            "groupId": self.group_id,
            "groupName": self.group_name,
            "groupCode": self.group_code,
            "totalSessions": self.total_sessions,
            "present": self.present_count,
            "absent": self.absent_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class DailyCount:
    day: date
    count: int

    def to_dict(self) -> dict:
        return {"date": self.day.strftime("%Y-%m-%d"), "count": self.count}
