from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import day_of, now_utc
from ..core.enums import AttendanceStatus, MarkedVia, RedemptionState, RejectReason, TokenCheck
from ..core.exceptions import LedgerConflict
from ..ledger.model import AttendanceRecord
from ..ledger.repository import AttendanceLedger
from ..roster.repository import RosterRepository
from ..sessions.service import SessionStore
from .state import RedemptionAttempt

logger = logging.getLogger(__name__)


class RedemptionEngine:
    """Use case: turn a presented token into exactly one ledger record, or a rejection.

    Each call is one logical transaction with no retries. The ledger's unique
    key is the only guard against double marking; a conflict there is an
    ordinary ``AlreadyMarked`` rejection.
    """

    def __init__(
        self,
        store: SessionStore,
        roster: RosterRepository,
        ledger: AttendanceLedger,
    ):
        self._store = store
        self._roster = roster
        self._ledger = ledger

    def redeem(
        self,
        session_id: int,
        token: str,
        person_id: int,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_utc()
        attempt = RedemptionAttempt(session_id=int(session_id), person_id=int(person_id), now=now)

        session = self._store.find(attempt.session_id)
        check = self._store.check_loaded(session, token, now)

        if check == TokenCheck.NOT_FOUND:
            raise attempt.reject(RejectReason.NOT_FOUND)
        if check == TokenCheck.EXPIRED:
            if session.active:
                # Lazy expiry: later checks short-circuit on the flag.
                self._store.expire(session.session_id)
            raise attempt.reject(RejectReason.INVALID_OR_EXPIRED, "(expired)")
        if check == TokenCheck.TOKEN_MISMATCH:
            raise attempt.reject(RejectReason.INVALID_OR_EXPIRED, "(token mismatch)")
        attempt.advance(RedemptionState.TOKEN_VALIDATED)

        if not self._roster.is_member(session.group_id, attempt.person_id):
            raise attempt.reject(RejectReason.NOT_ENROLLED, f"(group={session.group_id})")
        attempt.advance(RedemptionState.MEMBERSHIP_VALIDATED)

        attempt.advance(RedemptionState.UNCOMMITTED)
        try:
            record = self._ledger.insert_unique(
                group_id=session.group_id,
                person_id=attempt.person_id,
                attendance_date=day_of(now),
                status=AttendanceStatus.PRESENT,
                marked_via=MarkedVia.TOKEN,
                marked_at=now,
            )
        except LedgerConflict:
            raise attempt.reject(RejectReason.ALREADY_MARKED, f"(group={session.group_id} date={day_of(now)})")
        attempt.advance(RedemptionState.COMMITTED)

        logger.info(
            "Attendance recorded: record=%s group=%s person=%s session=%s",
            record.record_id,
            record.group_id,
            record.person_id,
            session.session_id,
        )

        # The session log is advisory; the committed record stands regardless.
        try:
            self._store.record_redemption(session.session_id, attempt.person_id, now)
        except Exception:
            logger.warning(
                "Could not append redemption to session %s for person %s",
                session.session_id,
                attempt.person_id,
                exc_info=True,
            )

        return record
