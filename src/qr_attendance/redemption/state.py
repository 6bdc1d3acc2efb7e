from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..core.enums import RedemptionState, RejectReason
from ..core.exceptions import (
    AlreadyMarkedError,
    InvalidOrExpiredError,
    NotEnrolledError,
    RedemptionRejected,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)

_NEXT = {
    RedemptionState.RECEIVED: RedemptionState.TOKEN_VALIDATED,
    RedemptionState.TOKEN_VALIDATED: RedemptionState.MEMBERSHIP_VALIDATED,
    RedemptionState.MEMBERSHIP_VALIDATED: RedemptionState.UNCOMMITTED,
    RedemptionState.UNCOMMITTED: RedemptionState.COMMITTED,
}

_ERRORS = {
    RejectReason.NOT_FOUND: SessionNotFoundError,
    RejectReason.INVALID_OR_EXPIRED: InvalidOrExpiredError,
    RejectReason.NOT_ENROLLED: NotEnrolledError,
    RejectReason.ALREADY_MARKED: AlreadyMarkedError,
}


@dataclass
class RedemptionAttempt:
    """Tracks one redemption attempt through its states; transitions only move forward."""

    session_id: int
    person_id: int
    now: datetime
    state: RedemptionState = RedemptionState.RECEIVED
    reason: Optional[RejectReason] = None
    trail: List[RedemptionState] = field(default_factory=lambda: [RedemptionState.RECEIVED])

    def advance(self, target: RedemptionState) -> None:
        if _NEXT.get(self.state) != target:
            raise RuntimeError(f"illegal redemption transition {self.state.value} -> {target.value}")
        self.state = target
        self.trail.append(target)

    def reject(self, reason: RejectReason, detail: str = "") -> RedemptionRejected:
        """Move to REJECTED and return the matching exception for the caller to raise."""
        if self.state in (RedemptionState.COMMITTED, RedemptionState.REJECTED):
            raise RuntimeError(f"attempt already terminal ({self.state.value})")
        self.state = RedemptionState.REJECTED
        self.reason = reason
        self.trail.append(RedemptionState.REJECTED)
        logger.info(
            "Redemption rejected: session=%s person=%s reason=%s %s",
            self.session_id,
            self.person_id,
            reason.value,
            detail,
        )
        return _ERRORS[reason]()
