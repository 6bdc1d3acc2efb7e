from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.capabilities import Capability
from ..auth.web import principal_required
from ..common.responses import error_response, internal_error_response
from ..common.validators import require_int
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/analytics/groups/<int:group_id>", methods=["GET"], endpoint="group_analytics")
    @principal_required
    def group_analytics(group_id: int):
        try:
            container.gate.require(g.principal, Capability.VIEW_GROUP_ANALYTICS, group_id=group_id)
            return jsonify(container.analytics.group_report(group_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("computing group analytics")

    @app.route("/api/analytics/people", methods=["GET"], endpoint="person_analytics")
    @principal_required
    def person_analytics():
        """Students get their own report; other roles pass ?personId=."""
        try:
            raw = request.args.get("personId")
            if raw:
                person_id = require_int(raw, "personId")
            elif g.principal.role == Role.STUDENT:
                person_id = g.principal.person_id
            else:
                raise ValidationError("personId is required")

            container.gate.require(g.principal, Capability.VIEW_PERSON_ANALYTICS, person_id=person_id)
            return jsonify(container.analytics.person_report(person_id))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("computing person analytics")
