"""Dump the time clock tables with `mysqldump`.

    python scripts/backup.py [output_dir]

Keeps the newest KEEP_BACKUPS dumps in the output directory. Without the
MySQL client tools, back up with MySQL Workbench instead.
"""

from __future__ import annotations

import importlib
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import REQUIRED_TABLES

KEEP_BACKUPS = 10


def _prune(out_dir: Path, database: str) -> None:
    dumps = sorted(out_dir.glob(f"{database}_*.sql"))
    for old in dumps[:-KEEP_BACKUPS]:
        old.unlink()


def main(argv: list[str]) -> None:
    db = importlib.import_module(get_settings_module()).DB_CONFIG
    out_dir = Path(argv[0]) if argv else REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    out_file = out_dir / f"{db['database']}_{datetime.now():%Y%m%d_%H%M%S}.sql"
    cmd = [
        "mysqldump",
        f"--host={db['host']}",
        f"--port={db.get('port', 3306)}",
        f"--user={db['user']}",
        f"--password={db['password']}",
        "--single-transaction",
        db["database"],
        *REQUIRED_TABLES,
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        out_file.unlink(missing_ok=True)
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools or back up with Workbench.")

    _prune(out_dir, db["database"])
    print(f"OK: {', '.join(REQUIRED_TABLES)} -> {out_file}")


if __name__ == "__main__":
    main(sys.argv[1:])
