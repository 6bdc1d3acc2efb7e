from __future__ import annotations

import importlib

from qr_attendance.database.bootstrap import apply_seed_sql
from qr_attendance.settings import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)

    print(
        "OK: Seeded demo roster -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
