"""Example: use the service layer directly (no Flask).

Issues a session for the demo group, redeems it for one student and prints the group report.
Run scripts/init_db.py and scripts/seed_db.py first.
"""

import importlib
import json

from qr_attendance.container import build_container
from qr_attendance.core.exceptions import AlreadyMarkedError
from qr_attendance.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    qr_session = container.session_store.issue(group_id=1, issuer_id=2, lifetime_minutes=15)
    try:
        record = container.redemption_engine.redeem(qr_session.session_id, qr_session.token, person_id=3)
        print("marked:", record.to_dict())
    except AlreadyMarkedError:
        print("already marked today")

    print(json.dumps(container.analytics.group_report(1), indent=2))


if __name__ == "__main__":
    main()
