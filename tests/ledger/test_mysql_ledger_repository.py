from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from conftest import GROUP_ID, STUDENT_A, ScriptedConnectionFactory, ScriptedCursor
from qr_attendance.core.enums import AttendanceStatus, MarkedVia
from qr_attendance.core.exceptions import LedgerConflict
from qr_attendance.ledger.mysql_ledger_repository import MySQLAttendanceLedger


def _insert(ledger):
    return ledger.insert_unique(
        group_id=GROUP_ID,
        person_id=STUDENT_A,
        attendance_date=date(2026, 3, 2),
        status=AttendanceStatus.PRESENT,
        marked_via=MarkedVia.TOKEN,
        marked_at=datetime(2026, 3, 2, 9, 5),
    )


def test_insert_unique_commits_and_returns_record():
    cursor = ScriptedCursor(lastrowid=41)
    factory = ScriptedConnectionFactory(cursor)

    rec = _insert(MySQLAttendanceLedger(factory))

    assert rec.record_id == 41
    assert rec.person_id == STUDENT_A
    assert factory.conn.committed is True
    assert factory.conn.closed is True
    sql, params = cursor.executed[0]
    assert sql.startswith("INSERT INTO attendance_records")
    assert params[:5] == (GROUP_ID, STUDENT_A, date(2026, 3, 2), "present", "token")


def test_duplicate_key_becomes_ledger_conflict():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    factory = ScriptedConnectionFactory(ScriptedCursor(error=dup))

    with pytest.raises(LedgerConflict) as exc:
        _insert(MySQLAttendanceLedger(factory))

    assert exc.value.__cause__ is dup
    assert factory.conn.rolled_back is True
    assert factory.conn.committed is False


def test_other_integrity_errors_propagate():
    fk = mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    factory = ScriptedConnectionFactory(ScriptedCursor(error=fk))

    with pytest.raises(mysql.connector.IntegrityError) as exc:
        _insert(MySQLAttendanceLedger(factory))

    assert not isinstance(exc.value, LedgerConflict)
    assert exc.value.errno == errorcode.ER_NO_REFERENCED_ROW_2
    assert factory.conn.rolled_back is True
