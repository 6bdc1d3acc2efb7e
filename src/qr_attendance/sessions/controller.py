from __future__ import annotations

from flask import Flask, current_app, g, jsonify, request

from ..auth.capabilities import Capability
from ..auth.web import principal_required
from ..common.datetime_utils import iso
from ..common.responses import error_response, internal_error_response
from ..common.validators import require_int
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["POST"], endpoint="issue_session")
    @principal_required
    def issue_session():
        try:
            data = request.get_json(silent=True) or {}
            group_id = require_int(data.get("groupId"), "groupId")
            lifetime = data.get("lifetimeMinutes")
            if lifetime is None:
                lifetime = current_app.config["SESSION_LIFETIME_MINUTES"]

            container.gate.require(g.principal, Capability.ISSUE_SESSION, group_id=group_id)
            qr_session = container.session_store.issue(group_id, g.principal.person_id, lifetime)
            return jsonify(container.session_store.describe_issue(qr_session)), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("issuing the QR session")

    @app.route("/api/sessions/<int:session_id>", methods=["GET"], endpoint="get_session")
    @principal_required
    def get_session(session_id: int):
        try:
            qr_session = container.session_store.lookup(session_id)
            container.gate.require(g.principal, Capability.VIEW_SESSION, group_id=qr_session.group_id)
            return jsonify(
                {
                    "sessionId": qr_session.session_id,
                    "groupId": qr_session.group_id,
                    "issuerId": qr_session.issuer_id,
                    "validFrom": iso(qr_session.valid_from),
                    "validUntil": iso(qr_session.valid_until),
                    "active": qr_session.active,
                    "redemptions": [
                        {"personId": r.person_id, "redeemedAt": iso(r.redeemed_at)} for r in qr_session.redemptions
                    ],
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("loading the QR session")
