# models/grade_result.py

"""
Read-only view models produced by the grading and attendance computations.

None of these objects are stored. They are derived from `MarksEntry` and `AttendanceMark`
records every time they are needed, and handed to presentation or export code as-is.

- `GradeResult`: total marks, letter grade, grade point, and pass/fail status for one entry.
- `SemesterSummary`: credit-weighted SGPA and credit totals for one semester.
- `TranscriptSummary`: credit-weighted CGPA and credit totals across all semesters.
- `AttendanceSummary`: status tallies and the attendance percentage for a set of marks.
"""

from __future__ import annotations

from core.attendance_rules import GOOD_STANDING_THRESHOLD
from core.grade_rules import ResultStatus


class GradeResult:

    def __init__(
        self,
        internal_marks: float,
        external_marks: float,
        total_marks: float,
        grade: str,
        grade_point: int,
        status: ResultStatus,
        credits: int | None = None,
        subject_id: str | None = None,
        semester: int | None = None,
        academic_year: str | None = None,
    ):
        self._internal_marks = internal_marks
        self._external_marks = external_marks
        self._total_marks = total_marks
        self._grade = grade
        self._grade_point = grade_point
        self._status = status
        self._credits = credits
        self._subject_id = subject_id
        self._semester = semester
        self._academic_year = academic_year

    # === properties ===

    @property
    def internal_marks(self) -> float:
        return self._internal_marks

    @property
    def external_marks(self) -> float:
        return self._external_marks

    @property
    def total_marks(self) -> float:
        return self._total_marks

    @property
    def grade(self) -> str:
        return self._grade

    @property
    def grade_point(self) -> int:
        return self._grade_point

    @property
    def status(self) -> ResultStatus:
        return self._status

    @property
    def is_pass(self) -> bool:
        return self._status is ResultStatus.PASS

    @property
    def credits(self) -> int | None:
        return self._credits

    @property
    def subject_id(self) -> str | None:
        return self._subject_id

    @property
    def semester(self) -> int | None:
        return self._semester

    @property
    def academic_year(self) -> str | None:
        return self._academic_year

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "internal_marks": self._internal_marks,
            "external_marks": self._external_marks,
            "total_marks": self._total_marks,
            "grade": self._grade,
            "grade_point": self._grade_point,
            "status": self._status.value,
            "credits": self._credits,
            "subject_id": self._subject_id,
            "semester": self._semester,
            "academic_year": self._academic_year,
        }

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"GradeResult({self._total_marks}, {self._grade}, {self._grade_point}, {self._status.value})"

    def __str__(self) -> str:
        return f"RESULT: total: {self._total_marks}, grade: {self._grade}, point: {self._grade_point}, status: {self._status.value}"


class SemesterSummary:

    def __init__(
        self,
        sgpa: float,
        total_credits: int,
        earned_credits: int,
        semester: int | None = None,
        academic_year: str | None = None,
        results: list[GradeResult] | None = None,
    ):
        self._sgpa = sgpa
        self._total_credits = total_credits
        self._earned_credits = earned_credits
        self._semester = semester
        self._academic_year = academic_year
        self._results = list(results or [])

    @property
    def sgpa(self) -> float:
        return self._sgpa

    @property
    def total_credits(self) -> int:
        return self._total_credits

    @property
    def earned_credits(self) -> int:
        return self._earned_credits

    @property
    def semester(self) -> int | None:
        return self._semester

    @property
    def academic_year(self) -> str | None:
        return self._academic_year

    @property
    def results(self) -> list[GradeResult]:
        return self._results.copy()

    def to_dict(self) -> dict:
        return {
            "semester": self._semester,
            "academic_year": self._academic_year,
            "sgpa": self._sgpa,
            "total_credits": self._total_credits,
            "earned_credits": self._earned_credits,
            "results": [r.to_dict() for r in self._results],
        }

    def __repr__(self) -> str:
        return f"SemesterSummary({self._semester}, {self._academic_year}, {self._sgpa}, {self._total_credits}, {self._earned_credits})"


class TranscriptSummary:

    def __init__(
        self,
        cgpa: float,
        total_credits: int,
        earned_credits: int,
        semesters: list[SemesterSummary] | None = None,
    ):
        self._cgpa = cgpa
        self._total_credits = total_credits
        self._earned_credits = earned_credits
        self._semesters = list(semesters or [])

    @property
    def cgpa(self) -> float:
        return self._cgpa

    @property
    def total_credits(self) -> int:
        return self._total_credits

    @property
    def earned_credits(self) -> int:
        return self._earned_credits

    @property
    def semesters(self) -> list[SemesterSummary]:
        return self._semesters.copy()

    def to_dict(self) -> dict:
        return {
            "cgpa": self._cgpa,
            "total_credits": self._total_credits,
            "earned_credits": self._earned_credits,
            "semesters": [s.to_dict() for s in self._semesters],
        }

    def __repr__(self) -> str:
        return f"TranscriptSummary({self._cgpa}, {self._total_credits}, {self._earned_credits})"


class AttendanceSummary:

    def __init__(
        self,
        present_count: int,
        late_count: int,
        absent_count: int,
        total_marks: int,
        percentage: int,
    ):
        self._present_count = present_count
        self._late_count = late_count
        self._absent_count = absent_count
        self._total_marks = total_marks
        self._percentage = percentage

    @property
    def present_count(self) -> int:
        return self._present_count

    @property
    def late_count(self) -> int:
        return self._late_count

    @property
    def absent_count(self) -> int:
        return self._absent_count

    @property
    def total_marks(self) -> int:
        return self._total_marks

    @property
    def percentage(self) -> int:
        return self._percentage

    @property
    def good_standing(self) -> bool:
        return self._percentage >= GOOD_STANDING_THRESHOLD

    def to_dict(self) -> dict:
        return {
            "present_count": self._present_count,
            "late_count": self._late_count,
            "absent_count": self._absent_count,
            "total_marks": self._total_marks,
            "percentage": self._percentage,
            "good_standing": self.good_standing,
        }

    def __repr__(self) -> str:
        return f"AttendanceSummary({self._present_count}, {self._late_count}, {self._absent_count}, {self._total_marks}, {self._percentage})"
