from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence

from ..core.constants import LOW_ATTENDANCE_THRESHOLD
from ..core.exceptions import NotFoundError
from ..ledger.model import AttendanceRecord
from ..ledger.repository import AttendanceLedger
from ..roster.model import Group
from ..roster.repository import RosterRepository
from .model import DailyCount, GroupStats, PersonStats


def attendance_percentage(present_count: int, total_sessions: int) -> float:
    if total_sessions <= 0:
        return 0
    return round(present_count / total_sessions * 100, 2)


def _present_count(records: Iterable[AttendanceRecord]) -> int:
    return sum(1 for r in records if r.counts_as_present)


class AnalyticsAggregator:
    """Read-only projections over the ledger.

    A "session" here is a calendar day with at least one record for the group;
    absence is inferred as ``total_sessions - present_count`` and never read
    from storage. Missing data yields zero-valued statistics, not errors.
    """

    def __init__(self, ledger: AttendanceLedger, roster: RosterRepository):
        self._ledger = ledger
        self._roster = roster

    def total_sessions(self, group_id: int) -> int:
        return len(self._ledger.distinct_session_dates(int(group_id)))

    def person_stats(self, group_id: int) -> List[PersonStats]:
        total = self.total_sessions(group_id)
        records = self._ledger.find_by_group(int(group_id))
        present_by_person = Counter(r.person_id for r in records if r.counts_as_present)

        stats = []
        for person in self._roster.members_of(int(group_id)):
            present = present_by_person.get(person.person_id, 0)
            stats.append(
                PersonStats(
                    person_id=person.person_id,
                    full_name=person.full_name,
                    external_ref=person.external_ref,
                    total_sessions=total,
                    present_count=present,
                    absent_count=total - present,
                    percentage=attendance_percentage(present, total),
                )
            )
        return stats

    def low_attendance(self, group_id: int) -> List[PersonStats]:
        return self.filter_low_attendance(self.person_stats(group_id))

    @staticmethod
    def filter_low_attendance(stats: Sequence[PersonStats]) -> List[PersonStats]:
        return [s for s in stats if s.percentage < LOW_ATTENDANCE_THRESHOLD]

    def group_stats_for_person(self, group: Group, person_id: int) -> GroupStats:
        total = self.total_sessions(group.group_id)
        present = _present_count(self._ledger.find_by_person(int(person_id), group.group_id))
        return GroupStats(
            group_id=group.group_id,
            group_name=group.name,
            group_code=group.code,
            total_sessions=total,
            present_count=present,
            absent_count=total - present,
            percentage=attendance_percentage(present, total),
        )

    def per_person_across_groups(self, person_id: int) -> tuple[List[GroupStats], float]:
        """Per-group stats plus the unweighted mean of their percentages.

        Groups with zero sessions contribute 0 and still count in the denominator.
        """
        per_group = [self.group_stats_for_person(g, person_id) for g in self._roster.groups_for_person(int(person_id))]
        if not per_group:
            return per_group, 0
        overall = round(sum(s.percentage for s in per_group) / len(per_group), 2)
        return per_group, overall

    def trend(self, group_id: int) -> List[DailyCount]:
        counts = Counter(r.attendance_date for r in self._ledger.find_by_group(int(group_id)))
        return [DailyCount(day=d, count=counts[d]) for d in sorted(counts)]

    def group_report(self, group_id: int) -> dict:
        group = self._roster.get_group(int(group_id))
        if not group:
            raise NotFoundError("Group not found")

        stats = self.person_stats(group.group_id)
        return {
            "groupInfo": {
                "groupId": group.group_id,
                "name": group.name,
                "code": group.code,
                "totalMembers": len(group.member_ids),
                "totalSessions": self.total_sessions(group.group_id),
            },
            "perPersonStats": [s.to_dict() for s in stats],
            "dateWiseCounts": [c.to_dict() for c in self.trend(group.group_id)],
            "lowAttendanceList": [s.to_dict() for s in self.filter_low_attendance(stats)],
        }

    def person_report(self, person_id: int) -> dict:
        person = self._roster.get_person(int(person_id))
        if not person:
            raise NotFoundError("Person not found")

        per_group, overall = self.per_person_across_groups(person.person_id)
        return {
            "personInfo": {
                "personId": person.person_id,
                "name": person.full_name,
                "studentId": person.external_ref,
                "department": person.department,
            },
            "perGroupStats": [s.to_dict() for s in per_group],
            "overallPercentage": overall,
        }
