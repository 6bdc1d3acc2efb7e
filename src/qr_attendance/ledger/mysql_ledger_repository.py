from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence, Set

import mysql.connector

from ..core.enums import AttendanceStatus, MarkedVia
from ..core.exceptions import LedgerConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceLedger

_COLUMNS = "record_id, group_id, person_id, attendance_date, status, marked_via, marked_at, latitude, longitude"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        group_id=int(r["group_id"]),
        person_id=int(r["person_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        marked_via=MarkedVia(r["marked_via"]),
        marked_at=r["marked_at"],
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
    )


class MySQLAttendanceLedger(AttendanceLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        # uq_records_group_person_day decides the race; no prior SELECT.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(group_id, person_id, attendance_date, status, marked_via, marked_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(group_id), int(person_id), attendance_date, status.value, marked_via.value, marked_at),
                )
                record_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise LedgerConflict(group_id=group_id, person_id=person_id, attendance_date=attendance_date) from e
            raise

        return AttendanceRecord(
            record_id=record_id,
            group_id=int(group_id),
            person_id=int(person_id),
            attendance_date=attendance_date,
            status=status,
            marked_via=marked_via,
            marked_at=marked_at,
        )

    def find_by_group(self, group_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE group_id=%s
                ORDER BY attendance_date DESC, marked_at DESC
                """,
                (int(group_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_by_person(self, person_id: int, group_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["person_id=%s"]
        params: list[object] = [int(person_id)]
        if group_id is not None:
            clauses.append("group_id=%s")
            params.append(int(group_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC, marked_at DESC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_all(self, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                ORDER BY attendance_date DESC, marked_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def distinct_session_dates(self, group_id: int) -> Set[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT attendance_date FROM attendance_records WHERE group_id=%s",
                (int(group_id),),
            )
            return {r["attendance_date"] for r in fetchall(cur)}
