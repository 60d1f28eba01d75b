# core/attendance_aggregator.py

"""
Rolls daily attendance marks up into presence percentages.

`AttendanceAggregator` is an in-memory store of marks keyed by (student id, subject id, date).
Recording a mark for a key that already has one replaces it, so a class that is re-marked
(for example to correct a mistake) is never counted twice.

The module-level functions are pure and operate on any iterable of marks:
    - `compute_summary()` tallies statuses and computes the percentage and good standing
    - `filter_by_date_range()`, `filter_by_subject()`, and `filter_by_student()` narrow a mark set
    - `summarize_by_subject()` produces one summary per subject
    - `daily_status()` collapses each day to a single calendar status
"""

from __future__ import annotations

import datetime
from collections import Counter, defaultdict
from collections.abc import Collection, Iterable
from typing import Any

from core.attendance_rules import CREDITED_STATUSES, DAILY_STATUS_PRIORITY
from core.logger import get_logger
from core.utils import round_half_up
from models.attendance_mark import AttendanceMark, AttendanceStatus
from models.grade_result import AttendanceSummary

logger = get_logger(__name__)

MarkKey = tuple[str, str, datetime.date]


class AttendanceAggregator:
    """
    An upserting store of attendance marks.

    Notes:
        - Marks are stored in a `dict[MarkKey, AttendanceMark]`, so the at-most-one-mark-per-key
          invariant holds structurally.
        - No validation is performed on student or subject IDs; the caller is responsible for
          passing IDs that exist.
    """

    def __init__(self, marks: Iterable[AttendanceMark] | None = None):
        self._marks: dict[MarkKey, AttendanceMark] = {}

        if marks is not None:
            self.load(marks)

    def record_mark(
        self,
        student_id: str,
        subject_id: str,
        date: datetime.date,
        status: AttendanceStatus | str,
        remarks: str | None = None,
        marked_by: str | None = None,
    ) -> AttendanceMark:
        """
        Records or replaces the attendance mark for a student, subject, and day.

        Args:
            student_id (str): The unique ID of the student.
            subject_id (str): The unique ID of the subject.
            date (datetime.date): The class day. A `datetime.datetime` is truncated to its date.
            status (AttendanceStatus | str): Present, Absent, or Late.
            remarks (str | None): Optional free-text note.
            marked_by (str | None): Optional ID of the faculty member taking attendance.

        Returns:
            The stored `AttendanceMark`.

        Raises:
            InvalidStatusError: If `status` is not one of the three attendance statuses.
            TypeError: If `date` is not a date.
        """
        mark = AttendanceMark(
            student_id=student_id,
            subject_id=subject_id,
            date=date,
            status=status,
            remarks=remarks,
            marked_by=marked_by,
        )

        previous = self._marks.get(mark.key)
        self._marks[mark.key] = mark

        if previous is not None and previous.status is not mark.status:
            logger.debug(
                "attendance re-marked: %s %s %s %s -> %s",
                student_id,
                subject_id,
                mark.date.isoformat(),
                previous.status.value,
                mark.status.value,
            )

        return mark

    def load(self, marks: Iterable[AttendanceMark]) -> None:
        """
        Adds existing marks to the store, later marks replacing earlier ones with the same key.
        """
        for mark in marks:
            self._marks[mark.key] = mark

    def clear_mark(
        self, student_id: str, subject_id: str, date: datetime.date
    ) -> AttendanceMark | None:
        """
        Removes the mark for the given key, if present.

        Returns:
            The removed mark, or None if no mark was stored for that key.
        """
        key = (student_id, subject_id, AttendanceMark.validate_date_input(date))
        return self._marks.pop(key, None)

    def get_mark(
        self, student_id: str, subject_id: str, date: datetime.date
    ) -> AttendanceMark | None:
        key = (student_id, subject_id, AttendanceMark.validate_date_input(date))
        return self._marks.get(key)

    def marks(self) -> list[AttendanceMark]:
        """
        Returns all stored marks ordered by date, then student ID, then subject ID.
        """
        return [self._marks[key] for key in sorted(self._marks, key=_sort_key)]

    def is_empty(self) -> bool:
        return not self._marks

    def __len__(self) -> int:
        return len(self._marks)


def _sort_key(key: MarkKey) -> tuple[datetime.date, str, str]:
    student_id, subject_id, date = key
    return (date, student_id, subject_id)


# === pure aggregation ===


def compute_summary(marks: Iterable[AttendanceMark]) -> AttendanceSummary:
    """
    Tallies a set of marks into an `AttendanceSummary`.

    The percentage is round(100 * (present + late) / total), rounding halves up. An empty
    input is valid and yields 0 % rather than an error.

    Args:
        marks (Iterable[AttendanceMark]): The marks to tally, already filtered by the caller.

    Returns:
        An `AttendanceSummary` with counts, the percentage, and `good_standing`.
    """
    counts = Counter(mark.status for mark in marks)
    total = sum(counts.values())
    credited = sum(counts[status] for status in CREDITED_STATUSES)

    percentage = int(round_half_up(100 * credited / total)) if total > 0 else 0

    return AttendanceSummary(
        present_count=counts[AttendanceStatus.PRESENT],
        late_count=counts[AttendanceStatus.LATE],
        absent_count=counts[AttendanceStatus.ABSENT],
        total_marks=total,
        percentage=percentage,
    )


def filter_by_date_range(
    marks: Iterable[AttendanceMark],
    start: datetime.date | None = None,
    end: datetime.date | None = None,
) -> list[AttendanceMark]:
    """
    Keeps marks whose date falls between `start` and `end`, both inclusive.

    A missing bound leaves that side of the range open.

    Raises:
        ValueError: If both bounds are given and `start` is after `end`.
    """
    start = AttendanceMark.validate_date_input(start) if start is not None else None
    end = AttendanceMark.validate_date_input(end) if end is not None else None

    if start is not None and end is not None and start > end:
        raise ValueError(
            f"Invalid date range: {start.isoformat()} is after {end.isoformat()}."
        )

    return [
        mark
        for mark in marks
        if (start is None or mark.date >= start) and (end is None or mark.date <= end)
    ]


def filter_by_subject(
    marks: Iterable[AttendanceMark], subject_ids: str | Collection[str]
) -> list[AttendanceMark]:
    wanted = {subject_ids} if isinstance(subject_ids, str) else set(subject_ids)
    return [mark for mark in marks if mark.subject_id in wanted]


def filter_by_student(
    marks: Iterable[AttendanceMark], student_id: str
) -> list[AttendanceMark]:
    return [mark for mark in marks if mark.student_id == student_id]


def summarize_by_subject(
    marks: Iterable[AttendanceMark],
) -> dict[str, AttendanceSummary]:
    """
    Produces one `AttendanceSummary` per subject present in the marks, keyed by subject ID.
    """
    grouped: dict[str, list[AttendanceMark]] = defaultdict(list)

    for mark in marks:
        grouped[mark.subject_id].append(mark)

    return {
        subject_id: compute_summary(grouped[subject_id]) for subject_id in sorted(grouped)
    }


def daily_status(marks: Iterable[AttendanceMark]) -> dict[datetime.date, AttendanceStatus]:
    """
    Collapses marks into one status per calendar day, for calendar-style views.

    When a day has several marks (one per subject), the most severe status wins:
    Absent over Late over Present.

    Returns:
        A dictionary mapping each marked date to its status, sorted by date.
    """
    by_date: dict[datetime.date, set[AttendanceStatus]] = defaultdict(set)

    for mark in marks:
        by_date[mark.date].add(mark.status)

    collapsed = {}
    for date in sorted(by_date):
        statuses = by_date[date]
        collapsed[date] = next(s for s in DAILY_STATUS_PRIORITY if s in statuses)

    return collapsed


def summary_payload(marks: Iterable[AttendanceMark]) -> dict[str, Any]:
    """
    Builds the overall and per-subject summaries for a mark set in one pass over the input.
    """
    marks = list(marks)

    return {
        "overall": compute_summary(marks),
        "by_subject": summarize_by_subject(marks),
    }
