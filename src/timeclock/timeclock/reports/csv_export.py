from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from ..common.formatting import format_hhmm, format_total_duration
from ..core.constants import MS_PER_MINUTE
from ..entries.model import TimeEntry, sort_by_start

CSV_HEADER = ["Date", "Clock In", "Clock Out", "Duration (HH:MM)"]


def entries_in_range(entries: Iterable[TimeEntry], start: date, end: date) -> list[TimeEntry]:
    """Closed entries starting within [start, end], oldest first."""
    return sort_by_start(e for e in entries if not e.is_open and start <= e.work_date <= end)


def export_entries_csv(entries: Iterable[TimeEntry], start: date, end: date) -> str:
    """Render the period as CSV.

    One row per closed entry, then a blank line and a quoted total. The
    total is the sum of the per-row minutes, so re-summing the duration
    column always gives the printed total.
    """
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    total_minutes = 0
    for e in entries_in_range(entries, start, end):
        duration_ms = max(e.duration_ms(), 0)
        total_minutes += duration_ms // MS_PER_MINUTE
        writer.writerow(
            [
                e.start_time.strftime("%Y-%m-%d"),
                e.start_time.strftime("%H:%M"),
                e.end_time.strftime("%H:%M"),
                format_hhmm(duration_ms),
            ]
        )

    writer.writerow([])
    out.write(f'Total,,,"{format_total_duration(total_minutes * MS_PER_MINUTE)}"\n')
    return out.getvalue()


def csv_filename(start: date, end: date) -> str:
    return f"time_entries_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
