from __future__ import annotations

import csv
import io
from typing import Optional, Sequence

from ..auth.capabilities import AuthorizationGate, Capability, Principal
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import AttendanceRecord
from .repository import AttendanceLedger

CSV_FIELDS = ["date", "groupId", "personId", "status", "markedVia", "markedAt"]


class HistoryService:
    """Use case: role-scoped attendance history.

    Visibility rules:
    - students see only their own records (optionally narrowed to one group);
    - faculty must name a group they own;
    - admins see a group's records, or the most recent records across all groups.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        gate: AuthorizationGate,
        *,
        admin_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._ledger = ledger
        self._gate = gate
        self._admin_limit = int(admin_limit)

    def history(self, principal: Principal, group_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        self._gate.require(principal, Capability.VIEW_HISTORY)

        if principal.role == Role.STUDENT:
            return self._ledger.find_by_person(principal.person_id, group_id)

        if group_id is None:
            if principal.role == Role.ADMIN:
                return self._ledger.find_all(self._admin_limit)
            raise ValidationError("groupId is required for faculty")

        self._gate.require(principal, Capability.VIEW_GROUP_RECORDS, group_id=group_id)
        return self._ledger.find_by_group(int(group_id))

    def history_csv(self, principal: Principal, group_id: Optional[int] = None) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in self.history(principal, group_id):
            row = r.to_dict()
            writer.writerow({k: row[k] for k in CSV_FIELDS})
        return out.getvalue().encode("utf-8-sig")
