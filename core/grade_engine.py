# core/grade_engine.py

"""
Pure grading computations: marks to grade, and grades to SGPA and CGPA.

Nothing in this module reads from or writes to storage. Callers pass in marks or
`GradeResult` objects and receive new view models back; `publish()` flips a flag on the
entries it is given and leaves persisting them to the caller.

SGPA and CGPA share a single credit-weighted average (`_weighted_totals`) so the two can
never diverge in method, only in the set of results they are given.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from core.errors import InconsistentCreditsError
from core.grade_rules import (
    DEFAULT_RETAKE_POLICY,
    EXTERNAL_MAX,
    GRADE_LETTERS,
    INTERNAL_MAX,
    PASS_THRESHOLD,
    ResultStatus,
    RetakePolicy,
    lookup_grade,
)
from core.logger import get_logger
from core.utils import round2
from models.grade_result import GradeResult, SemesterSummary, TranscriptSummary
from models.marks_entry import MarksEntry
from models.subject import Subject

logger = get_logger(__name__)

# === single result ===


def compute_grade(internal_marks: Any, external_marks: Any) -> GradeResult:
    """
    Converts internal and external marks into a `GradeResult`.

    Args:
        internal_marks (Any): Internal marks, 0 to 30 inclusive.
        external_marks (Any): External marks, 0 to 70 inclusive.

    Returns:
        A `GradeResult` with the total, letter grade, grade point, and pass/fail status.

    Raises:
        InvalidMarksError: If either component is non-numeric, non-finite, or out of range.
    """
    internal = MarksEntry.validate_marks_input(internal_marks, INTERNAL_MAX, "Internal")
    external = MarksEntry.validate_marks_input(external_marks, EXTERNAL_MAX, "External")

    total = internal + external
    grade, grade_point = lookup_grade(total)
    status = ResultStatus.PASS if total >= PASS_THRESHOLD else ResultStatus.FAIL

    return GradeResult(
        internal_marks=internal,
        external_marks=external,
        total_marks=total,
        grade=grade,
        grade_point=grade_point,
        status=status,
    )


def grade_entry(entry: MarksEntry, credits: int | None = None) -> GradeResult:
    """
    Derives a `GradeResult` from a `MarksEntry`, carrying its subject, semester, and academic year.

    Args:
        entry (MarksEntry): The marks entry to grade.
        credits (int | None): Credit hours of the linked subject, if known.

    Raises:
        InconsistentCreditsError: If `credits` is given but is not a positive whole number.
    """
    base = compute_grade(entry.internal_marks, entry.external_marks)

    return GradeResult(
        internal_marks=base.internal_marks,
        external_marks=base.external_marks,
        total_marks=base.total_marks,
        grade=base.grade,
        grade_point=base.grade_point,
        status=base.status,
        credits=Subject.validate_credits_input(credits) if credits is not None else None,
        subject_id=entry.subject_id,
        semester=entry.semester,
        academic_year=entry.academic_year,
    )


# === aggregation ===


def _require_credits(result: GradeResult) -> int:
    if result.credits is None:
        raise InconsistentCreditsError(
            f"Missing credits for result in subject {result.subject_id or '[UNKNOWN]'}."
        )

    # same positive whole number rule as a subject's own credits
    return Subject.validate_credits_input(result.credits)


def _weighted_totals(results: list[GradeResult]) -> tuple[float, int, int]:
    """
    Computes the credit-weighted grade point average and credit totals for a set of results.

    Returns:
        A tuple of (average rounded to two places, total credits, earned credits).
        The average is 0 when there are no credits to divide by.

    Raises:
        InconsistentCreditsError: If any result has missing credits, or credits that are not a positive whole number.
    """
    weighted_points = 0
    total_credits = 0
    earned_credits = 0

    for result in results:
        credits = _require_credits(result)
        weighted_points += result.grade_point * credits
        total_credits += credits

        if result.is_pass:
            earned_credits += credits

    average = round2(weighted_points / total_credits) if total_credits > 0 else 0.0

    return average, total_credits, earned_credits


def compute_semester_summary(results: Iterable[GradeResult]) -> SemesterSummary:
    """
    Aggregates one semester's results into an SGPA with credit totals.

    Args:
        results (Iterable[GradeResult]): Results that all belong to the same semester and
            academic year, each carrying credits.

    Returns:
        A `SemesterSummary`. An empty input yields an SGPA of 0 with zero credits.

    Raises:
        InconsistentCreditsError: If any result has missing credits, or credits that are not a positive whole number.
        ValueError: If the results span more than one semester or academic year.

    Notes:
        - Failed subjects count toward `total_credits` but not `earned_credits`.
    """
    results = list(results)

    periods = {
        (r.semester, r.academic_year)
        for r in results
        if r.semester is not None or r.academic_year is not None
    }

    if len(periods) > 1:
        raise ValueError(
            "All results in a semester summary must share the same semester and academic year."
        )

    semester, academic_year = next(iter(periods)) if periods else (None, None)
    sgpa, total_credits, earned_credits = _weighted_totals(results)

    logger.debug(
        "semester summary: semester=%s year=%s results=%d sgpa=%.2f",
        semester,
        academic_year,
        len(results),
        sgpa,
    )

    return SemesterSummary(
        sgpa=sgpa,
        total_credits=total_credits,
        earned_credits=earned_credits,
        semester=semester,
        academic_year=academic_year,
        results=results,
    )


def compute_transcript_summary(
    results: Iterable[GradeResult],
    retake_policy: RetakePolicy | str = DEFAULT_RETAKE_POLICY,
) -> TranscriptSummary:
    """
    Aggregates a student's full result history into a CGPA with credit totals.

    Uses the same weighted average as `compute_semester_summary()`, over a wider input.

    Args:
        results (Iterable[GradeResult]): All graded results for one student, each carrying credits.
        retake_policy (RetakePolicy | str): Whether every attempt at a subject counts
            (`ALL_ATTEMPTS`, the default) or only the most recent one (`LATEST_ATTEMPT`).

    Returns:
        A `TranscriptSummary` including one `SemesterSummary` per (semester, academic year),
        ordered by semester and then academic year.

    Raises:
        InconsistentCreditsError: If any result has missing credits, or credits that are not a positive whole number.
        ValueError: If `retake_policy` is not a recognized policy.
    """
    policy = RetakePolicy(retake_policy)
    results = list(results)

    if policy is RetakePolicy.LATEST_ATTEMPT:
        results = latest_attempts(results)

    cgpa, total_credits, earned_credits = _weighted_totals(results)

    semesters = [
        compute_semester_summary(group) for group in group_by_semester(results)
    ]

    logger.debug(
        "transcript summary: policy=%s results=%d cgpa=%.2f",
        policy.value,
        len(results),
        cgpa,
    )

    return TranscriptSummary(
        cgpa=cgpa,
        total_credits=total_credits,
        earned_credits=earned_credits,
        semesters=semesters,
    )


def group_by_semester(results: Iterable[GradeResult]) -> list[list[GradeResult]]:
    """
    Groups results by (semester, academic year), ordered by semester and then academic year.
    """
    groups: dict[tuple[int, str], list[GradeResult]] = defaultdict(list)

    for result in results:
        groups[(result.semester or 0, result.academic_year or "")].append(result)

    return [groups[key] for key in sorted(groups)]


def latest_attempts(results: Iterable[GradeResult]) -> list[GradeResult]:
    """
    Keeps only the most recent attempt at each subject.

    The most recent attempt is the one with the latest academic year, then the highest
    semester. Results without a subject id cannot be matched and are always kept.
    Input order is otherwise preserved.
    """
    results = list(results)
    latest: dict[str, GradeResult] = {}

    for result in results:
        if result.subject_id is None:
            continue

        current = latest.get(result.subject_id)
        if current is None or _attempt_order(result) > _attempt_order(current):
            latest[result.subject_id] = result

    kept = set(map(id, latest.values()))

    return [r for r in results if r.subject_id is None or id(r) in kept]


def _attempt_order(result: GradeResult) -> tuple[str, int]:
    return (result.academic_year or "", result.semester or 0)


# === publishing ===


def publish(entries: Iterable[MarksEntry]) -> list[MarksEntry]:
    """
    Marks the given entries as published.

    Args:
        entries (Iterable[MarksEntry]): The entries to publish.

    Returns:
        The same entries, each with `is_published` set to True.

    Notes:
        - This function does not persist anything; the caller owns saving the entries.
        - Publishing is idempotent: publishing an already-published entry changes nothing.
    """
    entries = list(entries)

    for entry in entries:
        entry.publish()

    return entries


# === statistics ===


def compute_result_statistics(results: Iterable[GradeResult]) -> dict[str, Any]:
    """
    Summarizes a class's results for one subject offering.

    Returns:
        A dictionary with "total", "pass", "fail", "average_marks", "highest_marks",
        "lowest_marks", and "grade_distribution" (a count for every letter grade, zeros included).
        Numeric fields are 0 when there are no results.
    """
    results = list(results)
    totals = [r.total_marks for r in results]

    distribution = {letter: 0 for letter in GRADE_LETTERS}
    for result in results:
        distribution[result.grade] += 1

    return {
        "total": len(results),
        "pass": sum(1 for r in results if r.is_pass),
        "fail": sum(1 for r in results if not r.is_pass),
        "average_marks": round2(sum(totals) / len(totals)) if totals else 0,
        "highest_marks": max(totals) if totals else 0,
        "lowest_marks": min(totals) if totals else 0,
        "grade_distribution": distribution,
    }
