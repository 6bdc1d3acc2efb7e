from __future__ import annotations

import logging

from flask import jsonify

from ..core.enums import RejectReason
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    RedemptionRejected,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Each rejection reason gets its own user-facing status.
REJECT_STATUS = {
    RejectReason.NOT_FOUND: 404,
    RejectReason.INVALID_OR_EXPIRED: 410,
    RejectReason.NOT_ENROLLED: 403,
    RejectReason.ALREADY_MARKED: 409,
}

REJECT_MESSAGES = {
    RejectReason.NOT_FOUND: "Attendance session not found",
    RejectReason.INVALID_OR_EXPIRED: "Invalid or expired QR code",
    RejectReason.NOT_ENROLLED: "Not enrolled in this group",
    RejectReason.ALREADY_MARKED: "Attendance already marked for today",
}


def error_response(exc: DomainError):
    if isinstance(exc, RedemptionRejected):
        reason = exc.reason
        return jsonify({"success": False, "reason": reason.value, "message": REJECT_MESSAGES[reason]}), REJECT_STATUS[reason]
    if isinstance(exc, ValidationError):
        return jsonify({"success": False, "reason": "VALIDATION_ERROR", "message": str(exc)}), 400
    if isinstance(exc, AuthorizationError):
        return jsonify({"success": False, "reason": "NOT_AUTHORIZED", "message": str(exc) or "Not authorized"}), 403
    if isinstance(exc, NotFoundError):
        return jsonify({"success": False, "reason": "NOT_FOUND", "message": str(exc)}), 404
    return jsonify({"success": False, "reason": "ERROR", "message": str(exc)}), 400


def unauthenticated_response():
    return jsonify({"success": False, "reason": "NOT_AUTHENTICATED", "message": "Not logged in"}), 401


def internal_error_response(action: str):
    logger.exception("Unexpected error while %s", action)
    return jsonify({"success": False, "reason": "INTERNAL_ERROR", "message": f"System error while {action}"}), 500
