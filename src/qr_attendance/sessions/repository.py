from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import AttendanceSession


class SessionRepository(Protocol):
    """Storage for attendance sessions.

    Implementations are expected to reclaim rows past ``valid_until`` on their own schedule.
    """

    def create(
        self,
        *,
        group_id: int,
        issuer_id: int,
        token: str,
        valid_from: datetime,
        valid_until: datetime,
    ) -> AttendanceSession:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def deactivate(self, session_id: int) -> bool:
        raise NotImplementedError

    def append_redemption(self, *, session_id: int, person_id: int, redeemed_at: datetime) -> None:
        raise NotImplementedError
