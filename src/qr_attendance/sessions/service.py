from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import iso, now_utc
from ..common.qr_image import render_payload
from ..common.validators import require_int_in_range
from ..core.constants import MAX_SESSION_LIFETIME_MINUTES, MIN_SESSION_LIFETIME_MINUTES, TOKEN_BYTES
from ..core.enums import TokenCheck
from ..core.exceptions import AuthorizationError, NotFoundError
from ..roster.repository import RosterRepository
from .model import AttendanceSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


class SessionStore:
    """Use case: mint, look up and check short-lived attendance sessions."""

    def __init__(self, sessions: SessionRepository, roster: RosterRepository):
        self._sessions = sessions
        self._roster = roster

    def issue(
        self,
        group_id: int,
        issuer_id: int,
        lifetime_minutes: int,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceSession:
        lifetime = require_int_in_range(
            lifetime_minutes,
            "lifetimeMinutes",
            minimum=MIN_SESSION_LIFETIME_MINUTES,
            maximum=MAX_SESSION_LIFETIME_MINUTES,
        )

        group = self._roster.get_group(int(group_id))
        if not group:
            raise NotFoundError("Group not found")
        if not group.is_owned_by(issuer_id):
            raise AuthorizationError("Only the group owner can issue attendance sessions")

        now = now or now_utc()
        session = self._sessions.create(
            group_id=group.group_id,
            issuer_id=int(issuer_id),
            token=generate_token(),
            valid_from=now,
            valid_until=now + timedelta(minutes=lifetime),
        )
        logger.info(
            "Issued session %s for group %s by %s (valid until %s)",
            session.session_id,
            session.group_id,
            session.issuer_id,
            iso(session.valid_until),
        )
        return session

    def find(self, session_id: int) -> Optional[AttendanceSession]:
        return self._sessions.get_by_id(int(session_id))

    def lookup(self, session_id: int) -> AttendanceSession:
        session = self.find(session_id)
        if not session:
            raise NotFoundError("Attendance session not found")
        return session

    def redeem_check(self, session_id: int, presented_token: str, now: datetime) -> TokenCheck:
        """Pure check of a presented token; never mutates the session.

        EXPIRED with ``active`` still true means the caller must call :meth:`expire`.
        """
        return self.check_loaded(self.find(session_id), presented_token, now)

    @staticmethod
    def check_loaded(session: Optional[AttendanceSession], presented_token: str, now: datetime) -> TokenCheck:
        if session is None:
            return TokenCheck.NOT_FOUND
        if not session.active:
            return TokenCheck.EXPIRED
        # Token before time: a wrong token never flips `active`, even past expiry.
        if not isinstance(presented_token, str) or not hmac.compare_digest(
            session.token.encode("utf-8"), presented_token.encode("utf-8")
        ):
            return TokenCheck.TOKEN_MISMATCH
        if session.is_past_expiry(now):
            return TokenCheck.EXPIRED
        return TokenCheck.VALID

    def expire(self, session_id: int) -> None:
        if self._sessions.deactivate(int(session_id)):
            logger.info("Session %s deactivated after expiry", session_id)

    def record_redemption(self, session_id: int, person_id: int, now: datetime) -> None:
        self._sessions.append_redemption(session_id=int(session_id), person_id=int(person_id), redeemed_at=now)

    def describe_issue(self, session: AttendanceSession) -> dict:
        """Payload returned to the issuer: the scannable image plus its validity window."""
        qr_image = render_payload(
            {"sessionId": session.session_id, "token": session.token, "groupId": session.group_id}
        )
        return {
            "sessionId": session.session_id,
            "qrImage": qr_image,
            "validUntil": iso(session.valid_until),
            "lifetimeMinutes": session.lifetime_minutes,
        }
