# core/response.py

from __future__ import annotations

from enum import Enum

from core.errors import (
    InconsistentCreditsError,
    InvalidMarksError,
    InvalidStatusError,
    PermissionDeniedError,
)


class ErrorCode(Enum):
    # === Not Found ===
    NOT_FOUND = "NOT_FOUND"

    # === Access ===
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # === Validation Failures ===
    # required argument or attribute is missing
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # input structure is malformed or incomplete
    INVALID_INPUT = "INVALID_INPUT"

    # field value is out of bounds or incorrectly formatted
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

    # the value is valid in isolation, but violates system rules
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # internal or external marks outside 0-30 / 0-70
    INVALID_MARKS = "INVALID_MARKS"

    # zero, negative, or fractional credits
    INCONSISTENT_CREDITS = "INCONSISTENT_CREDITS"

    # attendance status other than Present, Absent, or Late
    INVALID_STATUS = "INVALID_STATUS"

    # === State Restrictions ===

    # credits or subject removal blocked because marks reference the subject
    SUBJECT_IN_USE = "SUBJECT_IN_USE"

    # === Internal Faults ===
    INTERNAL_ERROR = "INTERNAL_ERROR"


# most specific first, since the domain errors also subclass ValueError
_EXCEPTION_CODES: tuple[tuple[type[Exception], ErrorCode, int], ...] = (
    (InvalidMarksError, ErrorCode.INVALID_MARKS, 422),
    (InconsistentCreditsError, ErrorCode.INCONSISTENT_CREDITS, 422),
    (InvalidStatusError, ErrorCode.INVALID_STATUS, 422),
    (PermissionDeniedError, ErrorCode.PERMISSION_DENIED, 403),
    (ValueError, ErrorCode.INVALID_FIELD_VALUE, 400),
    (TypeError, ErrorCode.MISSING_REQUIRED_FIELD, 400),
)


class Response:
    """
    Standard Response object for Ledger manipulator and lookup methods.

    Attributes:
        success (bool): Indicates whether the operation succeeded.
        detail (str | None): Optional human-readable explanation.
        error (ErrorCode | str | None): Optional machine-readable error identifier.
        status_code (int | None): Optional HTTP response code.
        data (dict): Optional payload, varies by operation.
        trace (str | None): Optional exception traceback when errors occur.
    """

    def __init__(
        self,
        success: bool,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
        trace: str | None = None,
    ):
        self._success = success
        self._detail = detail
        self._error = error
        self._status_code = status_code
        self._data = data or {}
        self._trace = trace

    # === properties ===

    @property
    def success(self) -> bool:
        return self._success

    @property
    def detail(self) -> str | None:
        return self._detail

    @property
    def error(self) -> ErrorCode | str | None:
        return self._error

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def data(self) -> dict:
        return self._data or {}

    @property
    def trace(self) -> str | None:
        return self._trace

    # === public classmethods ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        status_code: int | None = 200,
        data: dict | None = None,
    ) -> Response:
        return cls(
            success=True,
            detail=detail,
            error=None,
            status_code=status_code,
            data=data,
        )

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = 400,
        data: dict | None = None,
    ) -> Response:
        return cls(
            success=False,
            detail=detail,
            error=error,
            status_code=status_code,
            data=data,
        )

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        context: str,
        data: dict | None = None,
    ) -> Response:
        """
        Builds a failed response for an exception raised by a validator or computation.

        Args:
            exc (Exception): The caught exception.
            context (str): A short phrase naming the operation, prefixed to the detail.
            data (dict | None): Optional payload to attach.

        Returns:
            Response: A failed response whose error code and status code match the exception type.
                Unrecognized exceptions map to `ErrorCode.INTERNAL_ERROR`.
        """
        for exc_type, code, status_code in _EXCEPTION_CODES:
            if isinstance(exc, exc_type):
                return cls.fail(
                    detail=f"{context}: {exc}",
                    error=code,
                    status_code=status_code,
                    data=data,
                )

        return cls.fail(
            detail=f"Unexpected error: {exc}",
            error=ErrorCode.INTERNAL_ERROR,
            status_code=500,
            data=data,
        )

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "error": self.error.value if isinstance(self.error, Enum) else self.error,
            "detail": self.detail,
            "data": self.data,
            "status_code": self.status_code,
            "trace": self.trace,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> Response:
        error = payload.get("error")

        if error in ErrorCode._value2member_map_:
            error = ErrorCode(error)

        return cls(
            success=payload["success"],
            error=error,
            detail=payload.get("detail"),
            data=payload.get("data", {}),
            status_code=payload.get("status_code"),
            trace=payload.get("trace"),
        )

    # === dunder methods ===

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.detail or ''}"
        else:
            error_str = (
                self.error.value if isinstance(self.error, Enum) else self.error or ""
            )
            return f"Error: {error_str}"
