from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple


@dataclass(frozen=True)
class Redemption:
    person_id: int
    redeemed_at: datetime


@dataclass(frozen=True)
class AttendanceSession:
    """A short-lived QR token tied to one group and one issuer.

    The token stays redeemable by every enrolled person until ``valid_until``;
    ``redemptions`` is an advisory log, the ledger is the source of truth.
    """

    session_id: int
    group_id: int
    issuer_id: int
    token: str
    valid_from: datetime
    valid_until: datetime
    active: bool = True
    redemptions: Tuple[Redemption, ...] = field(default_factory=tuple)

    def is_past_expiry(self, now: datetime) -> bool:
        return now > self.valid_until

    @property
    def lifetime_minutes(self) -> int:
        return int((self.valid_until - self.valid_from).total_seconds() // 60)
