# models/attendance_mark.py

"""
Represents one attendance mark: a single student, in a single subject, on a single calendar day.

The day is stored as a `datetime.date`; a `datetime.datetime` passed in is truncated to its date,
so two marks taken at different times on the same day share one key. At most one mark may exist
per (student, subject, date) key, and recording another mark for the same key replaces it.

Includes functionality for:
- Validating attendance status input
- Serializing to and from JSON-compatible dictionaries
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from core.errors import InvalidStatusError


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class AttendanceMark:

    def __init__(
        self,
        student_id: str,
        subject_id: str,
        date: datetime.date,
        status: AttendanceStatus | str,
        remarks: str | None = None,
        marked_by: str | None = None,
    ):
        self._student_id = student_id
        self._subject_id = subject_id
        self._date = AttendanceMark.validate_date_input(date)
        self._status = AttendanceMark.validate_status_input(status)
        self._remarks = remarks
        self._marked_by = marked_by

    # === properties ===

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def subject_id(self) -> str:
        return self._subject_id

    @property
    def date(self) -> datetime.date:
        return self._date

    @property
    def status(self) -> AttendanceStatus:
        return self._status

    @property
    def remarks(self) -> str | None:
        return self._remarks

    @property
    def marked_by(self) -> str | None:
        return self._marked_by

    @property
    def key(self) -> tuple[str, str, datetime.date]:
        return (self._student_id, self._subject_id, self._date)

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "student_id": self._student_id,
            "subject_id": self._subject_id,
            "date": self._date.isoformat(),
            "status": self._status.value,
            "remarks": self._remarks,
            "marked_by": self._marked_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AttendanceMark:
        return cls(
            student_id=data["student_id"],
            subject_id=data["subject_id"],
            date=datetime.date.fromisoformat(data["date"]),
            status=data["status"],
            remarks=data.get("remarks"),
            marked_by=data.get("marked_by"),
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttendanceMark):
            return NotImplemented
        return self.key == other.key and self._status == other._status

    def __hash__(self) -> int:
        return hash((self.key, self._status))

    def __repr__(self) -> str:
        return f"AttendanceMark({self._student_id}, {self._subject_id}, {self._date.isoformat()}, {self._status.value})"

    def __str__(self) -> str:
        return f"ATTENDANCE: student id: {self._student_id}, subject id: {self._subject_id}, date: {self._date.isoformat()}, status: {self._status.value}"

    # === data validators ===

    @staticmethod
    def validate_status_input(status: Any) -> AttendanceStatus:
        """
        Validates and normalizes an attendance status.

        Accepts an `AttendanceStatus` member or its string value ("Present", "Absent", "Late").
        Surrounding whitespace is ignored and matching is case-insensitive.

        Args:
            status (Any): The input value to validate.

        Returns:
            The matching `AttendanceStatus` member.

        Raises:
            InvalidStatusError: If the input does not name one of the three statuses.
        """
        if isinstance(status, AttendanceStatus):
            return status

        if isinstance(status, str):
            normalized = status.strip().lower()
            for member in AttendanceStatus:
                if member.value.lower() == normalized:
                    return member

        raise InvalidStatusError(
            f"Invalid attendance status: {status!r}. Expected one of Present, Absent, or Late."
        )

    @staticmethod
    def validate_date_input(date: Any) -> datetime.date:
        """
        Validates and normalizes an attendance date to a calendar day.

        Raises:
            TypeError: If the input is not a `datetime.date` or `datetime.datetime`.
        """
        # datetime is a subclass of date, so it must be checked first
        if isinstance(date, datetime.datetime):
            return date.date()

        if isinstance(date, datetime.date):
            return date

        raise TypeError("Invalid input. Attendance date must be a datetime.date.")
