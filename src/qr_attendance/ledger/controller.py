from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.web import principal_required
from ..common.datetime_utils import now_utc
from ..common.responses import error_response, internal_error_response
from ..common.validators import require_int
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _group_id_arg():
        value = request.args.get("groupId")
        return require_int(value, "groupId") if value else None

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @principal_required
    def attendance_history():
        try:
            records = container.history_service.history(g.principal, _group_id_arg())
            return jsonify([r.to_dict() for r in records])
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("loading attendance history")

    @app.route("/api/attendance/history.csv", methods=["GET"], endpoint="attendance_history_csv")
    @principal_required
    def attendance_history_csv():
        try:
            group_id = _group_id_arg()
            csv_bytes = container.history_service.history_csv(g.principal, group_id)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error_response("exporting attendance history")

        scope = f"group{group_id}" if group_id is not None else "all"
        filename = f"attendance_{scope}_{now_utc().strftime('%Y%m%d_%H%M%S')}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
