"""CSV export of finalized attempts."""

from __future__ import annotations

import csv
import io
from typing import Iterable, TextIO

from quizdesk.db.models import Attempt

CSV_COLUMNS = (
    "attempt_id",
    "username",
    "quiz_title",
    "score",
    "total",
    "percentage",
    "status",
    "started_at",
    "ended_at",
    "duration_seconds",
)


def _row(attempt: Attempt) -> list:
    return [
        attempt.id,
        attempt.user.username,
        attempt.quiz.title,
        attempt.score,
        attempt.total,
        f"{attempt.percentage:.2f}",
        attempt.status.value,
        attempt.started_at.isoformat(),
        attempt.ended_at.isoformat(),
        attempt.duration_seconds,
    ]


def write_attempts_csv(attempts: Iterable[Attempt], out: TextIO) -> int:
    """Write a header plus one line per attempt to *out*; return the row count."""
    writer = csv.writer(out)
    writer.writerow(CSV_COLUMNS)
    count = 0
    for attempt in attempts:
        writer.writerow(_row(attempt))
        count += 1
    return count


def attempts_to_csv(attempts: Iterable[Attempt]) -> str:
    buf = io.StringIO()
    write_attempts_csv(attempts, buf)
    return buf.getvalue()
