"""Export the user list as a flat CSV table or as the full JSON model."""

from __future__ import annotations

import csv
import io
import logging
from typing import Iterable

from src.models.users import User
from src.tracker.persistence import encode_users

logger = logging.getLogger("cyclekeeper.tracker.export")

CSV_COLUMNS = ["user_name", "date", "kind", "detail"]


def iter_rows(users: Iterable[User]) -> Iterable[list[str]]:
    """Yield one row per cycle start, cycle end (if recorded) and symptom."""
    for user in users:
        for cycle in user.cycles:
            yield [user.name, cycle.start_date.isoformat(), "period_start", cycle.flow.value]
            if cycle.end_date is not None:
                yield [user.name, cycle.end_date.isoformat(), "period_end", cycle.flow.value]
        for symptom in user.symptoms:
            yield [
                user.name,
                symptom.date.isoformat(),
                "symptom",
                f"{symptom.type.value} - severity:{symptom.severity}",
            ]


def export_csv(users: Iterable[User]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    count = 0
    for row in iter_rows(users):
        writer.writerow(row)
        count += 1
    logger.info("Exported %d CSV rows", count)
    return buf.getvalue()


def export_json(users: Iterable[User]) -> str:
    """Pretty-printed JSON of every user with their records."""
    return encode_users(list(users), indent=2).decode("utf-8")
