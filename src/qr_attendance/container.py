from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .analytics.service import AnalyticsAggregator
from .auth.capabilities import AuthorizationGate
from .database.connection import DatabaseConnection, DBConfig
from .ledger.mysql_ledger_repository import MySQLAttendanceLedger
from .ledger.repository import AttendanceLedger
from .ledger.service import HistoryService
from .redemption.service import RedemptionEngine
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionStore


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    sessions_repo: SessionRepository
    ledger: AttendanceLedger
    roster: RosterRepository

    gate: AuthorizationGate
    session_store: SessionStore
    redemption_engine: RedemptionEngine
    history_service: HistoryService
    analytics: AnalyticsAggregator


def wire_services(
    *,
    sessions_repo: SessionRepository,
    ledger: AttendanceLedger,
    roster: RosterRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    gate = AuthorizationGate(roster)
    session_store = SessionStore(sessions_repo, roster)

    return Container(
        conn=conn,
        sessions_repo=sessions_repo,
        ledger=ledger,
        roster=roster,
        gate=gate,
        session_store=session_store,
        redemption_engine=RedemptionEngine(session_store, roster, ledger),
        history_service=HistoryService(ledger, gate),
        analytics=AnalyticsAggregator(ledger, roster),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        sessions_repo=MySQLSessionRepository(conn),
        ledger=MySQLAttendanceLedger(conn),
        roster=MySQLRosterRepository(conn),
        conn=conn,
    )
