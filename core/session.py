# core/session.py

"""
Per-request session context.

A `Session` describes who is asking: their user ID, their role, and (for students) the
student record they own. Request handlers build one per request and pass it explicitly to
`Ledger` read methods; there is no module-level "current user".
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"


class Session:

    def __init__(
        self,
        user_id: str,
        role: Role | str,
        student_id: str | None = None,
        faculty_id: str | None = None,
    ):
        self._user_id = user_id
        self._role = Role(role)
        self._student_id = student_id
        self._faculty_id = faculty_id

        if self._role is Role.STUDENT and not student_id:
            raise ValueError("A student session requires a student_id.")

    # === properties ===

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def role(self) -> Role:
        return self._role

    @property
    def student_id(self) -> str | None:
        return self._student_id

    @property
    def faculty_id(self) -> str | None:
        return self._faculty_id

    @property
    def can_view_drafts(self) -> bool:
        # unpublished marks are visible to staff only
        return self._role in (Role.ADMIN, Role.FACULTY)

    def can_view_student(self, student_id: str) -> bool:
        if self._role is Role.STUDENT:
            return student_id == self._student_id
        return True

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Session({self._user_id}, {self._role.value}, {self._student_id}, {self._faculty_id})"
