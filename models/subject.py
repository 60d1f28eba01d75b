# models/subject.py

"""
Represents a subject (course offering) that marks and attendance are recorded against.

Stores the subject code, display name, credit hours, and the semester it is taught in.
Credits are the weights used for SGPA and CGPA, so they must be positive whole numbers.

Includes functionality for:
- Validating and normalizing the subject code, credits, and semester
- Toggling between active and archived status
- Serializing to and from JSON-compatible dictionaries

Notes:
- Credits must not change once marks reference the subject; the `Ledger` enforces this.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from core.errors import InconsistentCreditsError

DEFAULT_CREDITS = 3
MIN_SEMESTER = 1
MAX_SEMESTER = 8


class SubjectType(str, Enum):
    CORE = "Core"
    ELECTIVE = "Elective"
    LAB = "Lab"
    PROJECT = "Project"


class Subject:

    def __init__(
        self,
        id: str,
        code: str,
        name: str,
        semester: int,
        credits: int = DEFAULT_CREDITS,
        subject_type: SubjectType | str = SubjectType.CORE,
        active: bool = True,
    ):
        self._id = id
        self._code = Subject.validate_code_input(code)
        self._name = name
        self._semester = Subject.validate_semester_input(semester)
        # credits uses setter method for validation
        self.credits = credits
        self._subject_type = SubjectType(subject_type)
        self._is_active = active

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def code(self) -> str:
        return self._code

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = name

    @property
    def semester(self) -> int:
        return self._semester

    @property
    def credits(self) -> int:
        return self._credits

    @credits.setter
    def credits(self, credits: Any) -> None:
        self._credits = Subject.validate_credits_input(credits)

    @property
    def subject_type(self) -> SubjectType:
        return self._subject_type

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def status(self) -> str:
        return "'ACTIVE'" if self._is_active else "'ARCHIVED'"

    def toggle_archived_status(self) -> None:
        self._is_active = not self._is_active

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "code": self._code,
            "name": self._name,
            "semester": self._semester,
            "credits": self._credits,
            "type": self._subject_type.value,
            "active": self._is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Subject:
        return cls(
            id=data["id"],
            code=data["code"],
            name=data["name"],
            semester=data["semester"],
            credits=data.get("credits", DEFAULT_CREDITS),
            subject_type=data.get("type", SubjectType.CORE.value),
            active=data.get("active", True),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Subject({self._id}, {self._code}, {self._name}, {self._semester}, {self._credits})"

    def __str__(self) -> str:
        return f"SUBJECT: {self._code} {self._name}, credits: {self._credits}, semester: {self._semester}, id: {self._id}"

    # === data validators ===

    @staticmethod
    def validate_code_input(code: Any) -> str:
        if not isinstance(code, str) or not code.strip():
            raise ValueError("Invalid input. Subject code must be a non-empty string.")

        return code.strip().upper()

    @staticmethod
    def validate_semester_input(semester: Any) -> int:
        """
        Validates a semester number.

        Raises:
            TypeError: If the input is not an integer.
            ValueError: If the semester falls outside 1-8.
        """
        if isinstance(semester, bool) or not isinstance(semester, int):
            raise TypeError("Invalid input. Semester must be a whole number.")

        if not MIN_SEMESTER <= semester <= MAX_SEMESTER:
            raise ValueError(
                f"Invalid input. Semester must be between {MIN_SEMESTER} and {MAX_SEMESTER}."
            )

        return semester

    @staticmethod
    def validate_credits_input(credits: Any) -> int:
        """
        Validates and normalizes the credit hours for a `Subject`.

        Accepts any input, and then:
            - Casts to float.
            - Ensures the number is finite and whole.
            - Ensures it is greater than zero.

        Args:
            credits (Any): The input value to validate.

        Returns:
            The normalized credit value (int).

        Raises:
            InconsistentCreditsError: If the input is not a positive whole number.
        """
        if isinstance(credits, bool):
            raise InconsistentCreditsError("Credits must be a positive whole number.")

        try:
            value = float(credits)

        except (TypeError, ValueError):
            raise InconsistentCreditsError(
                f"Credits must be a positive whole number, got {credits!r}."
            ) from None

        if not math.isfinite(value) or value != int(value):
            raise InconsistentCreditsError(
                f"Credits must be a positive whole number, got {credits!r}."
            )

        if value <= 0:
            raise InconsistentCreditsError(
                f"Credits must be greater than zero, got {credits!r}."
            )

        return int(value)
