from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceSession, Redemption
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        group_id: int,
        issuer_id: int,
        token: str,
        valid_from: datetime,
        valid_until: datetime,
    ) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(group_id, issuer_id, token, valid_from, valid_until, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (int(group_id), int(issuer_id), token, valid_from, valid_until),
            )
            session_id = int(cur.lastrowid)

        return AttendanceSession(
            session_id=session_id,
            group_id=int(group_id),
            issuer_id=int(issuer_id),
            token=token,
            valid_from=valid_from,
            valid_until=valid_until,
            active=True,
        )

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, group_id, issuer_id, token, valid_from, valid_until, is_active
                FROM attendance_sessions
                WHERE session_id=%s
                """,
                (int(session_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                SELECT person_id, redeemed_at
                FROM session_redemptions
                WHERE session_id=%s
                ORDER BY redeemed_at ASC
                """,
                (int(session_id),),
            )
            redemptions = tuple(
                Redemption(person_id=int(x["person_id"]), redeemed_at=x["redeemed_at"]) for x in fetchall(cur)
            )

            return AttendanceSession(
                session_id=int(r["session_id"]),
                group_id=int(r["group_id"]),
                issuer_id=int(r["issuer_id"]),
                token=r["token"],
                valid_from=r["valid_from"],
                valid_until=r["valid_until"],
                active=bool(r["is_active"]),
                redemptions=redemptions,
            )

    def deactivate(self, session_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET is_active=0 WHERE session_id=%s",
                (int(session_id),),
            )
            return cur.rowcount > 0

    def append_redemption(self, *, session_id: int, person_id: int, redeemed_at: datetime) -> None:
        # The (session_id, person_id) key keeps a person listed once per session.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO session_redemptions(session_id, person_id, redeemed_at)
                VALUES(%s,%s,%s)
                """,
                (int(session_id), int(person_id), redeemed_at),
            )
