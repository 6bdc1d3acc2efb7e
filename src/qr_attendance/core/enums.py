from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Principal roles supplied by the identity provider."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class MarkedVia(str, Enum):
    """How a ledger row was produced. Only TOKEN is written by this package."""

    TOKEN = "token"
    MANUAL = "manual"
    BIOMETRIC = "biometric"


class TokenCheck(str, Enum):
    """Outcome of checking a presented token against a stored session."""

    VALID = "VALID"
    EXPIRED = "EXPIRED"
    TOKEN_MISMATCH = "TOKEN_MISMATCH"
    NOT_FOUND = "NOT_FOUND"


class RejectReason(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_OR_EXPIRED = "INVALID_OR_EXPIRED"
    NOT_ENROLLED = "NOT_ENROLLED"
    ALREADY_MARKED = "ALREADY_MARKED"


class RedemptionState(str, Enum):
    RECEIVED = "RECEIVED"
    TOKEN_VALIDATED = "TOKEN_VALIDATED"
    MEMBERSHIP_VALIDATED = "MEMBERSHIP_VALIDATED"
    UNCOMMITTED = "UNCOMMITTED"
    COMMITTED = "COMMITTED"
    REJECTED = "REJECTED"
