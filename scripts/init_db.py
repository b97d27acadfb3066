"""Create the time clock tables in the configured MySQL database.

    APP_ENV=production python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import REQUIRED_TABLES, apply_schema, missing_tables


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = missing_tables(db_config)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    if missing:
        print(f"FAILED: {target} is missing {', '.join(missing)}")
        return 1
    print(f"OK: {target} has {', '.join(REQUIRED_TABLES)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
