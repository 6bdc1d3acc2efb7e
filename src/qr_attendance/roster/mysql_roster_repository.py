from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Group, Person
from .repository import RosterRepository


def _row_to_person(r: dict) -> Person:
    return Person(
        person_id=int(r["person_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        external_ref=r.get("external_ref"),
        department=r.get("department"),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _member_ids(self, cur, group_id: int) -> frozenset:
        cur.execute("SELECT person_id FROM group_members WHERE group_id=%s", (group_id,))
        return frozenset(int(r["person_id"]) for r in fetchall(cur))

    def get_group(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT group_id, name, code, owner_id, department
                FROM class_groups
                WHERE group_id=%s AND is_active=1
                """,
                (int(group_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Group(
                group_id=int(r["group_id"]),
                name=r["name"],
                code=r["code"],
                owner_id=int(r["owner_id"]),
                department=r.get("department"),
                member_ids=self._member_ids(cur, int(r["group_id"])),
            )

    def get_person(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT person_id, full_name, role, external_ref, department
                FROM people
                WHERE person_id=%s
                """,
                (int(person_id),),
            )
            r = fetchone(cur)
            return _row_to_person(r) if r else None

    def is_member(self, group_id: int, person_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM group_members WHERE group_id=%s AND person_id=%s",
                (int(group_id), int(person_id)),
            )
            return fetchone(cur) is not None

    def members_of(self, group_id: int) -> Sequence[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.person_id, p.full_name, p.role, p.external_ref, p.department
                FROM group_members gm
                JOIN people p ON p.person_id = gm.person_id
                WHERE gm.group_id=%s
                ORDER BY p.full_name ASC, p.person_id ASC
                """,
                (int(group_id),),
            )
            return [_row_to_person(r) for r in fetchall(cur)]

    def groups_for_person(self, person_id: int) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.group_id, g.name, g.code, g.owner_id, g.department
                FROM group_members gm
                JOIN class_groups g ON g.group_id = gm.group_id
                WHERE gm.person_id=%s AND g.is_active=1
                ORDER BY g.code ASC
                """,
                (int(person_id),),
            )
            rows = fetchall(cur)
            return [
                Group(
                    group_id=int(r["group_id"]),
                    name=r["name"],
                    code=r["code"],
                    owner_id=int(r["owner_id"]),
                    department=r.get("department"),
                    member_ids=self._member_ids(cur, int(r["group_id"])),
                )
                for r in rows
            ]
