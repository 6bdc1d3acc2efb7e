from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.capabilities import Capability
from ..auth.web import principal_required
from ..common.responses import error_response, internal_error_response
from ..common.validators import require_int, require_non_empty
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/redeem", methods=["POST"], endpoint="redeem_attendance")
    @principal_required
    def redeem_attendance():
        """Scanning client posts the decoded QR payload: {sessionId, token}."""
        try:
            container.gate.require(g.principal, Capability.REDEEM)

            data = request.get_json(silent=True) or {}
            session_id = require_int(data.get("sessionId"), "sessionId")
            token = require_non_empty(data.get("token"), "token")

            record = container.redemption_engine.redeem(session_id, token, g.principal.person_id)
            return jsonify({"success": True, "message": "Attendance marked successfully", "attendance": record.to_dict()}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("marking attendance")
