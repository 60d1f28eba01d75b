# models/ledger.py

"""
The Ledger is the reference store for subjects, marks entries, and attendance marks.

It plays the part of the storage collaborator the grading and attendance computations read
from: records live in memory, keyed by UUID (or by (student, subject, date) for attendance),
and are written to .json files on save alongside a `Ledger.metadata` dictionary that holds
the ledger name and its configuration (currently the CGPA retake policy).

Provides functions for creating, loading, and saving a Ledger; adding, finding, and removing
subjects; submitting and publishing marks; recording attendance; and building the derived
result and attendance views through `core.grade_engine` and `core.attendance_aggregator`.

Every public manipulator and lookup returns a `Response` and does not raise.
"""

from __future__ import annotations

import datetime
import json
import os
from typing import Any, Callable

import core.attendance_aggregator as aggregator
import core.formatters as formatters
import core.grade_engine as grade_engine
from core.attendance_aggregator import AttendanceAggregator
from core.errors import PermissionDeniedError
from core.grade_rules import DEFAULT_RETAKE_POLICY, RetakePolicy
from core.logger import get_logger
from core.response import ErrorCode, Response
from core.session import Session
from models.attendance_mark import AttendanceMark, AttendanceStatus
from models.marks_entry import MarksEntry
from models.subject import Subject
from models.types import RecordType

logger = get_logger(__name__)


class Ledger:

    def __init__(self, save_dir_path: str):
        self._metadata: dict[str, Any] = {}
        self._subjects: dict[str, Subject] = {}
        self._marks: dict[str, MarksEntry] = {}
        self._attendance: AttendanceAggregator = AttendanceAggregator()
        self._dir_path: str = save_dir_path
        self._unsaved_changes: bool = False

    # === properties ===

    # --- core data structures ---

    @property
    def subjects(self) -> dict[str, Subject]:
        return self._subjects

    @property
    def marks(self) -> dict[str, MarksEntry]:
        return self._marks

    @property
    def attendance(self) -> AttendanceAggregator:
        return self._attendance

    # --- metadata fields ---

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    @property
    def name(self) -> str:
        return self._metadata["name"]

    @property
    def retake_policy(self) -> RetakePolicy:
        return RetakePolicy(
            self._metadata.get("retake_policy", DEFAULT_RETAKE_POLICY.value)
        )

    @property
    def path(self) -> str:
        return self._dir_path

    @path.setter
    def path(self, dir_path: str) -> None:
        self._dir_path = dir_path

    # --- status markers ---

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    # === public classmethods ===

    @classmethod
    def create(cls, name: str, save_dir_path: str) -> Response:
        """
        Creates, saves, and returns a new `Ledger` instance.

        Args:
            name (str): The ledger name, e.g. the programme or department.
            save_dir_path (str): The path for writing and reading serialized data. Created if missing.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the `Ledger` object was created and saved successfully.
                    - False if invalid data is passed or the directory cannot be written.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, None.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if ValueError raised.
                    - `ErrorCode.INTERNAL_ERROR` for filesystem or unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 or 500 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "ledger" (Ledger): The newly created `Ledger` object.
                    - On failure:
                        - None

        Notes:
            - This method writes to disk with `ledger.save()` before returning.
        """
        try:
            if not isinstance(name, str) or not name.strip():
                raise ValueError("Ledger name must be a non-empty string.")

            os.makedirs(save_dir_path, exist_ok=True)

            ledger = cls(save_dir_path)
            ledger._metadata = {
                "name": name.strip(),
                "retake_policy": DEFAULT_RETAKE_POLICY.value,
                "created_at": datetime.datetime.now().isoformat(),
            }

            save_response = ledger.save(save_dir_path)

            if not save_response.success:
                return save_response

        except Exception as e:
            return Response.from_exception(e, "Could not create ledger")

        else:
            logger.info("created ledger %r at %s", ledger.name, save_dir_path)

            return Response.succeed(
                data={
                    "ledger": ledger,
                },
            )

    @classmethod
    def load(cls, save_dir_path: str) -> Response:
        """
        Loads previously serialized data from disk and returns a `Ledger` instance.

        Args:
            save_dir_path (str): The directory path where the ledger data is stored.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the load operation was successful.
                    - False for JSON deserialization issues, invalid records, or missing files.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                    - On success, None.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_INPUT` if JSONDecodeError raised.
                    - `ErrorCode.NOT_FOUND` if a required file is missing.
                    - The matching validation code (`INVALID_MARKS`, `INCONSISTENT_CREDITS`,
                      `INVALID_STATUS`, `INVALID_FIELD_VALUE`) if a record fails validation.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 4xx or 500 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "ledger" (Ledger): The loaded `Ledger` object.
                    - On failure:
                        - None

        Notes:
            - `attendance.json` is optional; a ledger without it loads with no attendance marks.
            - The loaded ledger starts with no unsaved changes.
        """

        def read_json(filename: str) -> list[Any] | dict[str, Any]:
            with open(os.path.join(save_dir_path, filename), "r") as f:
                return json.load(f)

        def load_and_import(
            filename: str, import_fn: Callable[[list[Any]], None], required: bool = True
        ) -> None:
            try:
                data = read_json(filename)
            except FileNotFoundError:
                if required:
                    raise
                return

            if not isinstance(data, list):
                raise ValueError(f"Expected {filename} to contain a list.")

            import_fn(data)

        try:
            ledger = cls(save_dir_path)

            metadata = read_json("metadata.json")
            if not isinstance(metadata, dict):
                raise ValueError("metadata.json must contain a dictionary.")
            name = metadata.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ValueError("metadata.json must contain a non-empty ledger name.")
            RetakePolicy(metadata.get("retake_policy", DEFAULT_RETAKE_POLICY.value))
            ledger._metadata = metadata

            load_and_import("subjects.json", ledger.import_subjects)
            load_and_import("marks.json", ledger.import_marks)
            load_and_import("attendance.json", ledger.import_attendance, required=False)

        except json.JSONDecodeError as e:
            return Response.fail(
                detail=f"Failed to parse JSON data: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except FileNotFoundError as e:
            return Response.fail(
                detail=f"Missing ledger file: {e}",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        except Exception as e:
            return Response.from_exception(e, "Could not load ledger")

        else:
            ledger._unsaved_changes = False
            logger.info(
                "loaded ledger %r: %d subjects, %d marks entries, %d attendance marks",
                ledger.name,
                len(ledger.subjects),
                len(ledger.marks),
                len(ledger.attendance),
            )

            return Response.succeed(
                data={
                    "ledger": ledger,
                },
            )

    # === persistence and import ===

    def save(self, save_dir_path: str | None = None) -> Response:
        """
        Serializes and saves data to disk in JSON format.

        Args:
            save_dir_path (str | None):
                - The directory path where the ledger data will be saved.
                - If no argument is provided, `self.path` will be used by default.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if all files were written.
                - detail (str | None): A confirmation message or a description of the failure.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if a record is not JSON serializable.
                    - `ErrorCode.INTERNAL_ERROR` if OSError raised or for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 or 500 on failure
                - data (dict | None):
                    - Always None, this method does not return any payload.

        Notes:
            - Existing files in the directory are overwritten.
        """
        target_dir = save_dir_path if save_dir_path is not None else self.path

        def write_json(filename: str, data: list | dict) -> None:
            with open(os.path.join(target_dir, filename), "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)

        try:
            write_json("metadata.json", self._metadata)
            write_json("subjects.json", [s.to_dict() for s in self.subjects.values()])
            write_json("marks.json", [m.to_dict() for m in self.marks.values()])
            write_json(
                "attendance.json", [a.to_dict() for a in self.attendance.marks()]
            )

        except TypeError as e:
            return Response.fail(
                detail=f"Object not JSON serializable: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except OSError as e:
            logger.error("failed to write ledger to %s: %s", target_dir, e)

            return Response.fail(
                detail=f"Failed to write data to disk: {e}",
                error=ErrorCode.INTERNAL_ERROR,
                status_code=500,
            )

        except Exception as e:
            return Response.from_exception(e, "Could not save ledger")

        else:
            self._unsaved_changes = False

            return Response.succeed(detail="Ledger successfully saved to disk.")

    def _import_records(
        self,
        data: list[dict[str, Any]],
        from_dict_fn: Callable[[dict[str, Any]], RecordType],
        add_fn: Callable[[RecordType], Response],
        record_name: str,
    ) -> None:
        """
        Deserializes and imports a list of records into the ledger, failing fast on error.

        Raises:
            - The validator's own exception (e.g. `InvalidMarksError`) if a record is malformed.
            - ValueError: If a deserialized record is rejected by `add_fn`.
            - RuntimeError: If `add_fn` fails for an unexpected reason.
        """
        for record_dict in data:
            try:
                record = from_dict_fn(record_dict)
            except KeyError as e:
                raise ValueError(
                    f"Failed to deserialize {record_name}: {record_dict} - missing field {e}"
                ) from None

            response = add_fn(record)

            if not response.success:
                message = (
                    f"Failed to import {record_name}: {record_dict} - {response.detail}"
                )
                if response.error is ErrorCode.INTERNAL_ERROR:
                    raise RuntimeError(message)
                raise ValueError(message)

    def import_subjects(self, subject_data: list) -> None:
        self._import_records(
            data=subject_data,
            from_dict_fn=Subject.from_dict,
            add_fn=self.add_subject,
            record_name="subject",
        )

    def import_marks(self, marks_data: list) -> None:
        """
        Imports a list of serialized marks entries, preserving their ids, grading stamps, and publication state.
        """
        self._import_records(
            data=marks_data,
            from_dict_fn=MarksEntry.from_dict,
            add_fn=lambda entry: self.submit_marks(entry, restamp=False),
            record_name="marks entry",
        )

    def import_attendance(self, attendance_data: list) -> None:
        for record_dict in attendance_data:
            try:
                mark = AttendanceMark.from_dict(record_dict)
            except KeyError as e:
                raise ValueError(
                    f"Failed to deserialize attendance mark: {record_dict} - missing field {e}"
                ) from None

            if mark.subject_id not in self.subjects:
                raise ValueError(
                    f"Failed to import attendance mark: {record_dict} - unknown subject."
                )

            self.attendance.load([mark])

    # === data accessors ===

    # --- find record by uuid ---

    def find_record_by_uuid(
        self,
        uuid: str,
        dictionary: dict[str, RecordType],
    ) -> Response:
        """
        Finds a record by UUID within a given dictionary.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the record was found.
                - error (ErrorCode | str | None): `ErrorCode.NOT_FOUND` if no match is found.
                - status_code (int | None): 200 on success, 404 if not found.
                - data (dict): On success, "record" holds the matched record.

        Notes:
            - This method is read-only and does not raise.
        """
        record = dictionary.get(uuid)

        if record is None:
            return Response.fail(
                detail=f"No matching record found for {uuid}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        return Response.succeed(
            data={
                "record": record,
            },
        )

    def find_subject_by_uuid(self, uuid: str) -> Response:
        return self.find_record_by_uuid(uuid, self.subjects)

    def find_marks_entry_by_uuid(self, uuid: str) -> Response:
        return self.find_record_by_uuid(uuid, self.marks)

    def find_subject_by_code(self, code: str) -> Response:
        """
        Finds a `Subject` by its code, ignoring case and surrounding whitespace.

        Returns:
            Response: On success, data["record"] holds the `Subject`; 404 `NOT_FOUND` otherwise.
        """
        normalized = self._normalize(code)

        for subject in self.subjects.values():
            if self._normalize(subject.code) == normalized:
                return Response.succeed(
                    data={
                        "record": subject,
                    }
                )

        return Response.fail(
            detail=f"No subject found with the code '{code}'.",
            error=ErrorCode.NOT_FOUND,
            status_code=404,
        )

    def find_marks_entry_by_key(
        self, student_id: str, subject_id: str, semester: int, academic_year: str
    ) -> Response:
        key = (student_id, subject_id, semester, academic_year)

        for entry in self.marks.values():
            if entry.key == key:
                return Response.succeed(
                    data={
                        "record": entry,
                    }
                )

        return Response.fail(
            detail=f"No marks entry found for student {student_id} in {formatters.format_term(semester, academic_year)}.",
            error=ErrorCode.NOT_FOUND,
            status_code=404,
        )

    def subject_is_graded(self, subject_id: str) -> bool:
        return any(entry.subject_id == subject_id for entry in self.marks.values())

    # --- results views ---

    def get_student_results(
        self,
        session: Session,
        student_id: str,
        semester: int | None = None,
    ) -> Response:
        """
        Builds a student's results: graded entries, per-semester SGPA, and overall CGPA.

        Args:
            session (Session): The requesting session. Students may only view their own results,
                and only published entries; faculty and admins also see drafts.
            student_id (str): The student whose results are requested.
            semester (int | None): If given, only entries from this semester are included, and the
                CGPA is computed over that subset.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the results were computed, even if the student has no entries.
                    - False if access is denied, a linked subject is missing, or credits are invalid.
                - detail (str | None):
                    - On failure, a human-readable description of the problem.
                    - On success, a one-line summary with the CGPA.
                - error (ErrorCode | str | None):
                    - `ErrorCode.PERMISSION_DENIED` if the session cannot view this student.
                    - `ErrorCode.NOT_FOUND` if an entry references an unknown subject.
                    - `ErrorCode.INCONSISTENT_CREDITS` if a subject's credits are invalid.
                - status_code (int | None):
                    - 200 on success
                    - 403, 404, or 422 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "entries" (list[MarksEntry]): The visible entries, ordered by semester, year, and subject code.
                        - "results" (list[GradeResult]): The derived result for each entry, in the same order.
                        - "transcript" (TranscriptSummary): CGPA, credit totals, and per-semester summaries.
                    - On failure:
                        - None

        Notes:
            - This method is read-only and does not raise.
            - The CGPA honours the ledger's configured retake policy.
        """
        try:
            if not session.can_view_student(student_id):
                raise PermissionDeniedError(
                    f"Session {session.user_id} may not view results for student {student_id}."
                )

            entries = [
                entry
                for entry in self.marks.values()
                if entry.student_id == student_id
                and (semester is None or entry.semester == semester)
                and (entry.is_published or session.can_view_drafts)
            ]

            missing = [e for e in entries if e.subject_id not in self.subjects]
            if missing:
                return Response.fail(
                    detail=f"Marks entry {missing[0].id} references an unknown subject: {missing[0].subject_id}.",
                    error=ErrorCode.NOT_FOUND,
                    status_code=404,
                )

            entries.sort(
                key=lambda e: (
                    e.semester,
                    e.academic_year,
                    self.subjects[e.subject_id].code,
                )
            )

            results = [
                entry.grade_result(self.subjects[entry.subject_id].credits)
                for entry in entries
            ]

            transcript = grade_engine.compute_transcript_summary(
                results, self.retake_policy
            )

        except Exception as e:
            logger.warning("results request for %s rejected: %s", student_id, e)
            return Response.from_exception(e, "Could not compute results")

        else:
            return Response.succeed(
                detail=f"CGPA {formatters.format_gpa(transcript.cgpa)}, {formatters.format_credits(transcript.earned_credits, transcript.total_credits)} earned.",
                data={
                    "entries": entries,
                    "results": results,
                    "transcript": transcript,
                },
            )

    def get_result_statistics(
        self, subject_id: str, semester: int, academic_year: str
    ) -> Response:
        """
        Summarizes published results for one subject offering.

        Returns:
            Response: On success, data["statistics"] holds the dictionary produced by
                `grade_engine.compute_result_statistics()`. Fails with `NOT_FOUND` for an unknown subject.

        Notes:
            - Drafts are excluded; statistics describe what students can see.
        """
        if subject_id not in self.subjects:
            return Response.fail(
                detail=f"No subject found for {subject_id}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        try:
            results = [
                entry.grade_result()
                for entry in self.marks.values()
                if entry.subject_id == subject_id
                and entry.semester == semester
                and entry.academic_year == academic_year
                and entry.is_published
            ]

            statistics = grade_engine.compute_result_statistics(results)

        except Exception as e:
            return Response.from_exception(e, "Could not compute statistics")

        else:
            return Response.succeed(
                data={
                    "statistics": statistics,
                }
            )

    # --- attendance views ---

    def get_attendance_for_student(
        self,
        student_id: str,
        subject_id: str | None = None,
        start: datetime.date | None = None,
        end: datetime.date | None = None,
    ) -> Response:
        """
        Generates an attendance report for one student, overall and per subject.

        Args:
            student_id (str): The student whose attendance is summarized.
            subject_id (str | None): If given, only marks for this subject are included.
            start (datetime.date | None): Inclusive lower bound on the class date.
            end (datetime.date | None): Inclusive upper bound on the class date.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the report was generated, even if no marks match.
                    - False if the subject is unknown or the date range is inverted.
                - detail (str | None):
                    - On success, the overall percentage.
                    - On failure, a human-readable description of the problem.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if `subject_id` is not in the ledger.
                    - `ErrorCode.INVALID_FIELD_VALUE` if `start` is after `end`.
                - status_code (int | None):
                    - 200 on success
                    - 400 or 404 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "marks" (list[AttendanceMark]): Matching marks, newest first.
                        - "summary" (AttendanceSummary): Totals across all matching marks.
                        - "by_subject" (dict[str, AttendanceSummary]): Totals per subject ID.
                        - "daily" (dict[datetime.date, AttendanceStatus]): One calendar status per day.
                    - On failure:
                        - None

        Notes:
            - This method is read-only and does not raise.
            - A student with no marks yields a 0 % summary, not an error.
        """
        if subject_id is not None and subject_id not in self.subjects:
            return Response.fail(
                detail=f"No subject found for {subject_id}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        try:
            marks = aggregator.filter_by_student(self.attendance.marks(), student_id)

            if subject_id is not None:
                marks = aggregator.filter_by_subject(marks, subject_id)

            marks = aggregator.filter_by_date_range(marks, start, end)
            payload = aggregator.summary_payload(marks)

        except Exception as e:
            return Response.from_exception(e, "Could not summarize attendance")

        else:
            return Response.succeed(
                detail=f"Overall attendance: {formatters.format_percentage(payload['overall'].percentage)}.",
                data={
                    "marks": sorted(marks, key=lambda m: m.date, reverse=True),
                    "summary": payload["overall"],
                    "by_subject": payload["by_subject"],
                    "daily": aggregator.daily_status(marks),
                },
            )

    def get_class_attendance(
        self, subject_id: str, class_date: datetime.date | None = None
    ) -> Response:
        """
        Lists attendance marks for a subject, optionally on a single class date.

        Returns:
            Response: On success, data["marks"] holds the matching marks ordered by date then
                student ID, and data["summary"] their `AttendanceSummary`. Fails with `NOT_FOUND`
                for an unknown subject.
        """
        if subject_id not in self.subjects:
            return Response.fail(
                detail=f"No subject found for {subject_id}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        try:
            marks = aggregator.filter_by_subject(self.attendance.marks(), subject_id)

            if class_date is not None:
                marks = aggregator.filter_by_date_range(marks, class_date, class_date)

            summary = aggregator.compute_summary(marks)

        except Exception as e:
            return Response.from_exception(e, "Could not list class attendance")

        else:
            return Response.succeed(
                data={
                    "marks": marks,
                    "summary": summary,
                }
            )

    # === data manipulators ===

    def _mark_dirty(self) -> None:
        self._unsaved_changes = True

    # --- generalized record operations ---

    def _add_record(self, record: RecordType, dictionary: dict) -> Response:
        """
        Adds a `RecordType` object to a given `Ledger` attribute dictionary.

        Notes:
            - This method mutates `Ledger` state and does not call `_mark_dirty()`; callers must handle that manually.
        """
        try:
            dictionary[record.id] = record

        except Exception as e:
            return Response.from_exception(e, "Could not add record")

        else:
            return Response.succeed(
                detail="Record successfully added to dictionary.",
                data={
                    "record": record,
                },
            )

    def _remove_record(self, record: RecordType, dictionary: dict) -> Response:
        try:
            del dictionary[record.id]

        except KeyError:
            return Response.fail(
                detail=f"No matching record could be found for deletion: {record}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        else:
            return Response.succeed(
                detail="Record successfully removed from the ledger.",
            )

    # --- configuration ---

    def set_retake_policy(self, policy: RetakePolicy | str) -> Response:
        """
        Sets how retaken subjects count toward the CGPA.

        Args:
            policy (RetakePolicy | str): `all_attempts` or `latest_attempt`.

        Returns:
            Response: On success, data["retake_policy"] holds the new `RetakePolicy`.
                Fails with `INVALID_FIELD_VALUE` for an unrecognized policy.

        Notes:
            - This method mutates `Ledger` metadata and calls `_mark_dirty()` if the policy changes.
        """
        try:
            policy = RetakePolicy(policy)

        except ValueError as e:
            return Response.from_exception(e, "Invalid retake policy")

        if policy is not self.retake_policy:
            self._metadata["retake_policy"] = policy.value
            self._mark_dirty()
            logger.info("retake policy set to %s", policy.value)

        return Response.succeed(
            detail=f"Retake policy set to {policy.value}.",
            data={
                "retake_policy": policy,
            },
        )

    # --- subject manipulation ---

    def add_subject(self, subject: Subject) -> Response:
        """
        Adds a `Subject` object to the `ledger.subjects` dictionary.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the `Subject` object was successfully added.
                    - False if another subject already uses the same code.
                - detail (str | None): A confirmation message or a description of the error.
                - error (ErrorCode | str | None):
                    - `ErrorCode.VALIDATION_FAILED` if the subject code is not unique.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 400 on failure
                - data (dict | None):
                    - On success, "record" (Subject): The added `Subject` object.

        Notes:
            - This method mutates `Ledger` state and calls `_mark_dirty()` if successful.
        """
        try:
            self.require_unique_subject_code(subject.code)

            add_response = self._add_record(subject, self.subjects)

            if not add_response.success:
                return add_response

        except ValueError as e:
            return Response.fail(
                detail=f"Unique record validation failed: {e}",
                error=ErrorCode.VALIDATION_FAILED,
            )

        else:
            self._mark_dirty()
            logger.info("added subject %s (%s)", subject.code, subject.id)

            return Response.succeed(
                detail=f"Subject {subject.code} successfully added to the ledger.",
                data=add_response.data,
            )

    def remove_subject(self, subject: Subject) -> Response:
        """
        Removes a `Subject` object and its attendance marks from the ledger.

        Returns:
            Response: Fails with `SUBJECT_IN_USE` (409) if any marks entry references the subject,
                or `NOT_FOUND` (404) if it is not in the ledger.

        Notes:
            - This method mutates `Ledger` state and calls `_mark_dirty()` if successful.
            - Graded subjects cannot be removed; removing them would orphan the students' results.
        """
        if self.subject_is_graded(subject.id):
            return Response.fail(
                detail=f"Subject {subject.code} has marks entries and cannot be removed.",
                error=ErrorCode.SUBJECT_IN_USE,
                status_code=409,
            )

        remove_response = self._remove_record(subject, self.subjects)

        if not remove_response.success:
            return remove_response

        for mark in aggregator.filter_by_subject(self.attendance.marks(), subject.id):
            self.attendance.clear_mark(mark.student_id, mark.subject_id, mark.date)

        self._mark_dirty()
        logger.info("removed subject %s (%s)", subject.code, subject.id)

        return Response.succeed(
            detail=f"Subject {subject.code} successfully removed from the ledger."
        )

    def update_subject_credits(self, subject: Subject, credits: int) -> Response:
        """
        Updates the credit hours of a `Subject` that has not been graded yet.

        Args:
            subject (Subject): The subject to update.
            credits (int): The new credit hours, a positive whole number.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the credits were updated.
                - error (ErrorCode | str | None):
                    - `ErrorCode.SUBJECT_IN_USE` if marks already reference the subject.
                    - `ErrorCode.INCONSISTENT_CREDITS` if the new value is not a positive whole number.
                - status_code (int | None):
                    - 200 on success
                    - 409 or 422 on failure
                - data (dict | None):
                    - On success, "record" (Subject): The updated subject.

        Notes:
            - Changing credits after grading would silently rewrite historical SGPA and CGPA, so it is refused.
            - This method mutates `Subject` state and calls `_mark_dirty()` if successful.
        """
        if self.subject_is_graded(subject.id):
            return Response.fail(
                detail=f"Subject {subject.code} has marks entries; its credits can no longer change.",
                error=ErrorCode.SUBJECT_IN_USE,
                status_code=409,
            )

        try:
            subject.credits = credits

        except Exception as e:
            return Response.from_exception(e, "Invalid credits")

        else:
            if subject.id in self.subjects:
                self._mark_dirty()

            return Response.succeed(
                detail=f"Subject {subject.code} now carries {subject.credits} credits.",
                data={
                    "record": subject,
                },
            )

    # --- marks manipulation ---

    def submit_marks(
        self,
        entry: MarksEntry,
        graded_by: str | None = None,
        restamp: bool = True,
    ) -> Response:
        """
        Saves a `MarksEntry`, replacing any existing entry for the same student, subject, semester, and academic year.

        Args:
            entry (MarksEntry): The marks to save. Its marks were validated on construction.
            graded_by (str | None): The faculty ID to stamp on the entry.
            restamp (bool): If True (the default), stamps `graded_by` and the current time.
                Imports pass False to keep the stored stamps.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the entry was created or replaced.
                    - False if the subject is unknown.
                - detail (str | None):
                    - On success, the derived grade and whether the entry was created or updated.
                    - On failure, a human-readable description of the problem.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the linked subject is not in the ledger.
                    - `ErrorCode.INTERNAL_ERROR` for unexpected errors.
                - status_code (int | None):
                    - 200 on success
                    - 404 or 500 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (MarksEntry): The stored entry. On replacement it keeps the existing entry's id.
                        - "result" (GradeResult): The derived grade for the stored entry.
                        - "created" (bool): False if an existing entry was replaced.
                    - On failure:
                        - None

        Notes:
            - This method mutates `Ledger` state and calls `_mark_dirty()` if successful.
            - A replacement takes the publication state of the submitted entry, so resubmitting
              marks as a draft withdraws a previously published result until it is published again.
        """
        subject_response = self.find_subject_by_uuid(entry.subject_id)

        if not subject_response.success:
            return Response.fail(
                detail=f"Could not resolve subject for marks entry: {subject_response.detail}",
                error=subject_response.error,
                status_code=subject_response.status_code,
            )

        subject = subject_response.data["record"]

        try:
            existing_response = self.find_marks_entry_by_key(*entry.key)
            created = not existing_response.success

            if not created:
                existing = existing_response.data["record"]
                if existing.id != entry.id:
                    entry = MarksEntry.from_dict({**entry.to_dict(), "id": existing.id})

            if restamp:
                entry.stamp_graded(graded_by, datetime.datetime.now())

            add_response = self._add_record(entry, self.marks)

            if not add_response.success:
                return add_response

            result = entry.grade_result(subject.credits)

        except Exception as e:
            logger.error("failed to save marks entry %s: %s", entry.id, e)
            return Response.from_exception(e, "Could not save marks")

        else:
            self._mark_dirty()

            if restamp:
                logger.info(
                    "%s marks for student %s in %s, %s: %s",
                    "saved" if created else "updated",
                    entry.student_id,
                    subject.code,
                    formatters.format_term(entry.semester, entry.academic_year),
                    result.grade,
                )

            return Response.succeed(
                detail=f"Marks for {subject.code} {'saved' if created else 'updated'}: {formatters.format_marks(result.total_marks)}, grade {result.grade}.",
                data={
                    "record": entry,
                    "result": result,
                    "created": created,
                },
            )

    def batch_submit_marks(
        self, entries: list[MarksEntry], graded_by: str | None = None
    ) -> Response:
        """
        Saves multiple marks entries.

        Attempts to save each entry individually with `submit_marks()`. This method is not
        transactional; some entries may be saved even if others fail.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if every entry was saved.
                    - False if one or more entries were skipped.
                - detail (str | None): Indication of complete or partial success.
                - error (ErrorCode | str | None):
                    - `ErrorCode.VALIDATION_FAILED` if one or more entries were skipped.
                - status_code (int | None):
                    - 200 if every entry was saved
                    - 400 otherwise
                - data (dict | None):
                    - "saved" (list[MarksEntry]): Entries that were saved, as stored.
                    - "skipped" (list[tuple[MarksEntry, str]]): Entries that were not saved, with the reason.

        Notes:
            - Marks are validated when each `MarksEntry` is constructed, so out-of-range rows are
              rejected before they reach this method; callers building entries from raw input
              should collect those `InvalidMarksError`s themselves.
        """
        saved = []
        skipped = []

        for entry in entries:
            submit_response = self.submit_marks(entry, graded_by)

            if submit_response.success:
                saved.append(submit_response.data["record"])
            else:
                skipped.append((entry, submit_response.detail))

        if not skipped:
            return Response.succeed(
                detail=f"{len(saved)} marks entries saved successfully.",
                data={
                    "saved": saved,
                    "skipped": skipped,
                },
            )

        logger.warning(
            "batch marks submission: %d saved, %d skipped", len(saved), len(skipped)
        )

        return Response.fail(
            detail=f"{len(saved)} of {len(entries)} marks entries saved; {len(skipped)} skipped.",
            error=ErrorCode.VALIDATION_FAILED,
            data={
                "saved": saved,
                "skipped": skipped,
            },
        )

    def remove_marks_entry(self, entry: MarksEntry) -> Response:
        remove_response = self._remove_record(entry, self.marks)

        if not remove_response.success:
            return remove_response

        self._mark_dirty()

        return Response.succeed(detail="Marks entry successfully removed from the ledger.")

    def publish_results(
        self, subject_id: str, semester: int, academic_year: str
    ) -> Response:
        """
        Publishes every draft entry for one subject offering.

        Args:
            subject_id (str): The subject whose results are published.
            semester (int): The semester of the offering.
            academic_year (str): The academic year of the offering.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True unless the subject is unknown.
                - detail (str | None): How many results were published.
                - error (ErrorCode | str | None): `ErrorCode.NOT_FOUND` for an unknown subject.
                - status_code (int | None): 200 on success, 404 on failure.
                - data (dict | None):
                    - On success:
                        - "published" (list[MarksEntry]): The entries that changed from draft to published.

        Notes:
            - Already-published entries are left alone, so calling this twice publishes nothing the second time.
            - This method calls `_mark_dirty()` only if at least one entry changed.
        """
        if subject_id not in self.subjects:
            return Response.fail(
                detail=f"No subject found for {subject_id}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        drafts = [
            entry
            for entry in self.marks.values()
            if entry.subject_id == subject_id
            and entry.semester == semester
            and entry.academic_year == academic_year
            and not entry.is_published
        ]

        published = grade_engine.publish(drafts)

        if published:
            self._mark_dirty()
            logger.info(
                "published %d results for %s, %s",
                len(published),
                self.subjects[subject_id].code,
                formatters.format_term(semester, academic_year),
            )

        return Response.succeed(
            detail=f"{len(published)} results published successfully.",
            data={
                "published": published,
            },
        )

    # --- attendance manipulation ---

    def record_attendance(
        self,
        student_id: str,
        subject_id: str,
        class_date: datetime.date,
        status: AttendanceStatus | str,
        remarks: str | None = None,
        marked_by: str | None = None,
    ) -> Response:
        """
        Records or replaces a student's attendance for one subject on one day.

        Returns:
            Response: A structured response with the following contract:
                - success (bool): True if the mark was stored.
                - detail (str | None): A confirmation message or a description of the error.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the subject is not in the ledger.
                    - `ErrorCode.INVALID_STATUS` if the status is not Present, Absent, or Late.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if the date is not a date.
                - status_code (int | None):
                    - 200 on success
                    - 400, 404, or 422 on failure
                - data (dict | None):
                    - On success, "record" (AttendanceMark): The stored mark.

        Notes:
            - This is an upsert: re-marking the same student, subject, and day replaces the earlier mark.
            - This method mutates `Ledger` state and calls `_mark_dirty()` if successful.
        """
        if subject_id not in self.subjects:
            return Response.fail(
                detail=f"No subject found for {subject_id}.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        try:
            mark = self.attendance.record_mark(
                student_id,
                subject_id,
                class_date,
                status,
                remarks=remarks,
                marked_by=marked_by,
            )

        except Exception as e:
            logger.warning("attendance for %s rejected: %s", student_id, e)
            return Response.from_exception(e, "Could not record attendance")

        else:
            self._mark_dirty()

            return Response.succeed(
                detail=f"Marked {mark.status.value} on {formatters.format_class_date_long(mark.date)}.",
                data={
                    "record": mark,
                },
            )

    def clear_attendance(
        self, student_id: str, subject_id: str, class_date: datetime.date
    ) -> Response:
        try:
            removed = self.attendance.clear_mark(student_id, subject_id, class_date)

        except Exception as e:
            return Response.from_exception(e, "Could not clear attendance")

        if removed is None:
            return Response.fail(
                detail="No attendance mark found for that student, subject, and date.",
                error=ErrorCode.NOT_FOUND,
                status_code=404,
            )

        self._mark_dirty()

        return Response.succeed(detail="Attendance mark cleared.")

    # === data validators ===

    def require_unique_subject_code(self, code: str) -> None:
        """
        Validates that no existing subject shares the given code.

        Raises:
            ValueError: If a subject with the same normalized code already exists.
        """
        normalized = self._normalize(code)
        if any(self._normalize(s.code) == normalized for s in self.subjects.values()):
            raise ValueError(f"A subject with the code '{code}' already exists.")

    # === helper methods ===

    def _normalize(self, input: str) -> str:
        return input.strip().lower()

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Ledger({self._metadata.get('name')}, {self._dir_path})"
