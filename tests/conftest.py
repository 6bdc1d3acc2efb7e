from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional

import pytest

from qr_attendance.container import wire_services
from qr_attendance.core.enums import AttendanceStatus, MarkedVia, Role
from qr_attendance.core.exceptions import LedgerConflict
from qr_attendance.ledger.model import AttendanceRecord
from qr_attendance.main import create_app
from qr_attendance.roster.model import Group, Person
from qr_attendance.sessions.model import AttendanceSession, Redemption

ADMIN_ID = 99
OWNER_ID = 10
OTHER_FACULTY_ID = 11
STUDENT_A = 1
STUDENT_B = 2
STUDENT_C = 3
OUTSIDER = 4
GROUP_ID = 1
SECOND_GROUP_ID = 2


class InMemoryRoster:
    def __init__(self, people: dict[int, Person], groups: dict[int, Group]):
        self.people = people
        self.groups = groups

    def get_group(self, group_id: int) -> Optional[Group]:
        return self.groups.get(group_id)

    def get_person(self, person_id: int) -> Optional[Person]:
        return self.people.get(person_id)

    def is_member(self, group_id: int, person_id: int) -> bool:
        group = self.groups.get(group_id)
        return bool(group and group.has_member(person_id))

    def members_of(self, group_id: int):
        group = self.groups.get(group_id)
        if not group:
            return []
        return sorted((self.people[p] for p in group.member_ids), key=lambda p: p.full_name)

    def groups_for_person(self, person_id: int):
        return [g for g in self.groups.values() if g.has_member(person_id)]


class InMemorySessions:
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, AttendanceSession] = {}
        self._id = 0
        self.fail_appends = False

    def create(self, *, group_id, issuer_id, token, valid_from, valid_until) -> AttendanceSession:
        with self._lock:
            self._id += 1
            s = AttendanceSession(
                session_id=self._id,
                group_id=group_id,
                issuer_id=issuer_id,
                token=token,
                valid_from=valid_from,
                valid_until=valid_until,
            )
            self._by_id[s.session_id] = s
            return s

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._by_id.get(session_id)

    def deactivate(self, session_id: int) -> bool:
        with self._lock:
            s = self._by_id.get(session_id)
            if not s:
                return False
            self._by_id[session_id] = AttendanceSession(
                session_id=s.session_id,
                group_id=s.group_id,
                issuer_id=s.issuer_id,
                token=s.token,
                valid_from=s.valid_from,
                valid_until=s.valid_until,
                active=False,
                redemptions=s.redemptions,
            )
            return True

    def append_redemption(self, *, session_id, person_id, redeemed_at) -> None:
        if self.fail_appends:
            raise RuntimeError("session storage unavailable")
        with self._lock:
            s = self._by_id[session_id]
            if any(r.person_id == person_id for r in s.redemptions):
                return
            self._by_id[session_id] = AttendanceSession(
                session_id=s.session_id,
                group_id=s.group_id,
                issuer_id=s.issuer_id,
                token=s.token,
                valid_from=s.valid_from,
                valid_until=s.valid_until,
                active=s.active,
                redemptions=s.redemptions + (Redemption(person_id=person_id, redeemed_at=redeemed_at),),
            )


class InMemoryLedger:
    """Ledger fake whose unique (group, person, day) key is checked and set under one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_key: dict[tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0

    def insert_unique(self, *, group_id, person_id, attendance_date, status, marked_via, marked_at) -> AttendanceRecord:
        key = (group_id, person_id, attendance_date)
        with self._lock:
            if key in self._by_key:
                raise LedgerConflict(group_id=group_id, person_id=person_id, attendance_date=attendance_date)
            self._id += 1
            rec = AttendanceRecord(
                record_id=self._id,
                group_id=group_id,
                person_id=person_id,
                attendance_date=attendance_date,
                status=status,
                marked_via=marked_via,
                marked_at=marked_at,
            )
            self._by_key[key] = rec
            return rec

    def seed(self, group_id: int, person_id: int, day: date, status: AttendanceStatus = AttendanceStatus.PRESENT):
        return self.insert_unique(
            group_id=group_id,
            person_id=person_id,
            attendance_date=day,
            status=status,
            marked_via=MarkedVia.MANUAL,
            marked_at=datetime.combine(day, datetime.min.time()).replace(hour=9),
        )

    def _sorted(self, items):
        return sorted(items, key=lambda r: (r.attendance_date, r.marked_at), reverse=True)

    def find_by_group(self, group_id: int):
        return self._sorted(r for r in self._by_key.values() if r.group_id == group_id)

    def find_by_person(self, person_id: int, group_id: Optional[int] = None):
        return self._sorted(
            r for r in self._by_key.values() if r.person_id == person_id and (group_id is None or r.group_id == group_id)
        )

    def find_all(self, limit: int):
        return self._sorted(self._by_key.values())[:limit]

    def distinct_session_dates(self, group_id: int):
        return {r.attendance_date for r in self._by_key.values() if r.group_id == group_id}

    def __len__(self):
        return len(self._by_key)


class ScriptedCursor:
    def __init__(self, error=None, lastrowid=7):
        self.error = error
        self.lastrowid = lastrowid
        self.rowcount = 1
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        if self.error is not None:
            raise self.error

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class ScriptedConnectionFactory:
    def __init__(self, cursor):
        self.conn = ScriptedConnection(cursor)

    def connect(self, *, with_database=True):
        return self.conn


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def roster() -> InMemoryRoster:
    people = {
        ADMIN_ID: Person(person_id=ADMIN_ID, full_name="Admin", role=Role.ADMIN),
        OWNER_ID: Person(person_id=OWNER_ID, full_name="Dr. Owner", role=Role.FACULTY, department="CSE"),
        OTHER_FACULTY_ID: Person(person_id=OTHER_FACULTY_ID, full_name="Dr. Other", role=Role.FACULTY),
        STUDENT_A: Person(person_id=STUDENT_A, full_name="Asha", role=Role.STUDENT, external_ref="S-001", department="CSE"),
        STUDENT_B: Person(person_id=STUDENT_B, full_name="Bala", role=Role.STUDENT, external_ref="S-002"),
        STUDENT_C: Person(person_id=STUDENT_C, full_name="Chitra", role=Role.STUDENT, external_ref="S-003"),
        OUTSIDER: Person(person_id=OUTSIDER, full_name="Dev", role=Role.STUDENT, external_ref="S-004"),
    }
    groups = {
        GROUP_ID: Group(
            group_id=GROUP_ID,
            name="Data Structures",
            code="CS201",
            owner_id=OWNER_ID,
            member_ids=frozenset({STUDENT_A, STUDENT_B, STUDENT_C}),
        ),
        SECOND_GROUP_ID: Group(
            group_id=SECOND_GROUP_ID,
            name="Compilers",
            code="CS301",
            owner_id=OTHER_FACULTY_ID,
            member_ids=frozenset({STUDENT_A}),
        ),
    }
    return InMemoryRoster(people, groups)


@pytest.fixture
def sessions_repo() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def container(sessions_repo, ledger, roster):
    return wire_services(sessions_repo=sessions_repo, ledger=ledger, roster=roster)


@pytest.fixture
def app(container):
    return create_app(container, settings_module="qr_attendance.settings.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(person_id: int, role: Role):
        with client.session_transaction() as s:
            s["user_id"] = person_id
            s["role"] = role.value
        return client

    return _login
