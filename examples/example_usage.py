"""Example: use the service layer directly (no Flask).

Controllers stay thin; the workday rules live in the services.
"""

import importlib
import sys

from config import get_settings_module

from src.timeclock.timeclock.container import build_container
from src.timeclock.timeclock.common.formatting import format_duration


def main(user_id: str):
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    view = container.workday_service.dashboard(user_id)
    print(f"{view.status_label}: worked {format_duration(view.daily_hours_ms)} today, bank {view.time_bank}")
    for day in container.workday_service.history(user_id, limit=5):
        print(day.day, [f"{e.label} {e.time:%H:%M}" for e in day.events])


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "")
