# models/marks_entry.py

"""
Represents one student's marks in one subject for one semester of an academic year.

Each `MarksEntry` records internal marks (0-30) and external marks (0-70), optional remarks,
and whether the entry has been published. Unpublished entries are drafts: faculty can see and
edit them, students cannot.

Includes functionality for:
- Validating marks, semester, and academic year input
- Deriving a `GradeResult` on read (grades are never stored)
- Publishing (a one-way, idempotent flag flip)
- Serializing to and from JSON-compatible dictionaries

Notes:
- Marks outside their range raise `InvalidMarksError` and are never clamped.
- At most one entry exists per (student, subject, semester, academic year); see `key`.
"""

from __future__ import annotations

import datetime
import math
import re
from typing import Any

from core.errors import InvalidMarksError
from core.grade_rules import EXTERNAL_MAX, INTERNAL_MAX
from models.grade_result import GradeResult
from models.subject import Subject


class MarksEntry:

    def __init__(
        self,
        id: str,
        student_id: str,
        subject_id: str,
        semester: int,
        academic_year: str,
        internal_marks: float,
        external_marks: float,
        remarks: str | None = None,
        is_published: bool = False,
        graded_by: str | None = None,
        graded_at: datetime.datetime | None = None,
    ):
        self._id = id
        self._student_id = student_id
        self._subject_id = subject_id
        self._semester = Subject.validate_semester_input(semester)
        self._academic_year = MarksEntry.validate_academic_year_input(academic_year)
        # marks use setter methods for validation
        self.internal_marks = internal_marks
        self.external_marks = external_marks
        self._remarks = remarks
        self._is_published = is_published
        self._graded_by = graded_by
        self._graded_at = graded_at

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def subject_id(self) -> str:
        return self._subject_id

    @property
    def semester(self) -> int:
        return self._semester

    @property
    def academic_year(self) -> str:
        return self._academic_year

    @property
    def internal_marks(self) -> float:
        return self._internal_marks

    @internal_marks.setter
    def internal_marks(self, marks: Any) -> None:
        self._internal_marks = MarksEntry.validate_marks_input(
            marks, INTERNAL_MAX, "Internal"
        )

    @property
    def external_marks(self) -> float:
        return self._external_marks

    @external_marks.setter
    def external_marks(self, marks: Any) -> None:
        self._external_marks = MarksEntry.validate_marks_input(
            marks, EXTERNAL_MAX, "External"
        )

    @property
    def total_marks(self) -> float:
        return self._internal_marks + self._external_marks

    @property
    def remarks(self) -> str | None:
        return self._remarks

    @remarks.setter
    def remarks(self, remarks: str | None) -> None:
        self._remarks = remarks

    @property
    def is_published(self) -> bool:
        return self._is_published

    @property
    def published_status(self) -> str:
        return "'PUBLISHED'" if self._is_published else "'DRAFT'"

    def publish(self) -> None:
        self._is_published = True

    @property
    def graded_by(self) -> str | None:
        return self._graded_by

    @property
    def graded_at(self) -> datetime.datetime | None:
        return self._graded_at

    def stamp_graded(self, graded_by: str | None, graded_at: datetime.datetime) -> None:
        self._graded_by = graded_by
        self._graded_at = graded_at

    @property
    def key(self) -> tuple[str, str, int, str]:
        return (self._student_id, self._subject_id, self._semester, self._academic_year)

    # === derived data ===

    def grade_result(self, credits: int | None = None) -> GradeResult:
        """
        Derives the `GradeResult` for this entry.

        Args:
            credits (int | None): The credit hours of the linked subject, needed when the result
                will feed an SGPA or CGPA calculation.

        Returns:
            A new `GradeResult` carrying this entry's subject, semester, and academic year.
        """
        from core.grade_engine import grade_entry

        return grade_entry(self, credits)

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "student_id": self._student_id,
            "subject_id": self._subject_id,
            "semester": self._semester,
            "academic_year": self._academic_year,
            "internal_marks": self._internal_marks,
            "external_marks": self._external_marks,
            "remarks": self._remarks,
            "is_published": self._is_published,
            "graded_by": self._graded_by,
            "graded_at": self._graded_at.isoformat() if self._graded_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MarksEntry:
        graded_at_str = data.get("graded_at")
        graded_at = (
            datetime.datetime.fromisoformat(graded_at_str) if graded_at_str else None
        )

        return cls(
            id=data["id"],
            student_id=data["student_id"],
            subject_id=data["subject_id"],
            semester=data["semester"],
            academic_year=data["academic_year"],
            internal_marks=data["internal_marks"],
            external_marks=data["external_marks"],
            remarks=data.get("remarks"),
            is_published=data.get("is_published", False),
            graded_by=data.get("graded_by"),
            graded_at=graded_at,
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"MarksEntry({self._id}, {self._student_id}, {self._subject_id}, {self._semester}, {self._academic_year}, {self._internal_marks}, {self._external_marks}, {self._is_published})"

    def __str__(self) -> str:
        return f"MARKS: student id: {self._student_id}, subject id: {self._subject_id}, semester: {self._semester} ({self._academic_year}), total: {self.total_marks}"

    # === data validators ===

    @staticmethod
    def validate_marks_input(marks: Any, maximum: int, label: str) -> float:
        """
        Validates and normalizes a marks component.

        Accepts any input, and then:
            - Casts to float.
            - Ensures the number is finite.
            - Ensures it is between 0 and `maximum`, inclusive.

        Args:
            marks (Any): The input value to validate.
            maximum (int): The upper bound for this component (30 internal, 70 external).
            label (str): The component name used in the error message.

        Returns:
            The normalized marks value (float).

        Raises:
            InvalidMarksError: If the input is not a finite number within range.
        """
        if isinstance(marks, bool):
            raise InvalidMarksError(f"{label} marks must be a number.")

        try:
            marks = float(marks)

        except (TypeError, ValueError):
            raise InvalidMarksError(f"{label} marks must be a number.") from None

        if not math.isfinite(marks):
            raise InvalidMarksError(f"{label} marks must be a finite number.")

        if marks < 0 or marks > maximum:
            raise InvalidMarksError(
                f"{label} marks must be between 0 and {maximum}, got {marks:g}."
            )

        return marks

    @staticmethod
    def validate_academic_year_input(academic_year: Any) -> str:
        """
        Validates an academic year label such as "2024-2025".

        Raises:
            ValueError: If the label is not two consecutive four-digit years joined by a hyphen.
        """
        if not isinstance(academic_year, str):
            raise ValueError("Invalid input. Academic year must be a string.")

        academic_year = academic_year.strip()
        match = re.fullmatch(r"(\d{4})-(\d{4})", academic_year)

        if not match or int(match.group(2)) != int(match.group(1)) + 1:
            raise ValueError(
                f"Invalid input. Academic year must look like 2024-2025, got {academic_year!r}."
            )

        return academic_year
