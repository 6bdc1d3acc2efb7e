from __future__ import annotations

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a session, group or person does not exist."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks the role or ownership for an action."""


class RedemptionRejected(DomainError):
    """Terminal failure of a redemption attempt."""

    reason: RejectReason = RejectReason.INVALID_OR_EXPIRED

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason.value)


class SessionNotFoundError(RedemptionRejected, NotFoundError):
    reason = RejectReason.NOT_FOUND


class InvalidOrExpiredError(RedemptionRejected):
    reason = RejectReason.INVALID_OR_EXPIRED


class NotEnrolledError(RedemptionRejected):
    reason = RejectReason.NOT_ENROLLED


class AlreadyMarkedError(RedemptionRejected):
    reason = RejectReason.ALREADY_MARKED


class LedgerConflict(Exception):
    """Storage-level unique key violation on (group, person, day)."""

    def __init__(self, *, group_id: int, person_id: int, attendance_date):
        super().__init__(f"attendance already recorded for group={group_id} person={person_id} date={attendance_date}")
        self.group_id = group_id
        self.person_id = person_id
        self.attendance_date = attendance_date
