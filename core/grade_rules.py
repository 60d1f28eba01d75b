# core/grade_rules.py

"""
Constant tables for converting total marks into letter grades and grade points.

The grade table is evaluated top-down and the first row whose lower bound is met wins.
Lower bounds are inclusive, so a total of exactly 40 earns a D and also passes: 40 is both
the D cutoff and the pass cutoff.
"""

from enum import Enum

INTERNAL_MAX = 30
EXTERNAL_MAX = 70
TOTAL_MAX = INTERNAL_MAX + EXTERNAL_MAX

PASS_THRESHOLD = 40

# (lower bound on total marks, letter grade, grade point)
GRADE_TABLE: tuple[tuple[int, str, int], ...] = (
    (90, "A+", 10),
    (80, "A", 9),
    (70, "B+", 8),
    (60, "B", 7),
    (50, "C", 6),
    (40, "D", 5),
    (0, "F", 0),
)

GRADE_LETTERS: tuple[str, ...] = tuple(letter for _, letter, _ in GRADE_TABLE)


class ResultStatus(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class RetakePolicy(str, Enum):
    """
    Controls how repeated attempts at the same subject feed into the CGPA.

    - ALL_ATTEMPTS: every graded attempt is included (the default).
    - LATEST_ATTEMPT: only the attempt from the most recent academic year is kept.
    """

    ALL_ATTEMPTS = "all_attempts"
    LATEST_ATTEMPT = "latest_attempt"


DEFAULT_RETAKE_POLICY = RetakePolicy.ALL_ATTEMPTS


def lookup_grade(total_marks: float) -> tuple[str, int]:
    """
    Returns the (letter grade, grade point) pair for a total mark.

    Assumes `total_marks` has already been range-checked by the caller.
    """
    for lower_bound, letter, point in GRADE_TABLE:
        if total_marks >= lower_bound:
            return letter, point

    # unreachable for validated input, the last row has a lower bound of 0
    return GRADE_TABLE[-1][1], GRADE_TABLE[-1][2]
