# tests/test_ledger.py

import datetime
import json
import os

from core.grade_rules import RetakePolicy
from core.response import ErrorCode
from models.attendance_mark import AttendanceStatus
from models.ledger import Ledger
from models.marks_entry import MarksEntry
from models.subject import Subject


def test_create_new_ledger(sample_ledger):
    assert sample_ledger.name == "B.Tech Computer Science"
    assert sample_ledger.retake_policy is RetakePolicy.ALL_ATTEMPTS
    assert not sample_ledger.has_unsaved_changes
    assert os.path.exists(os.path.join(sample_ledger.path, "metadata.json"))


def test_create_rejects_blank_name(tmp_path):
    response = Ledger.create("  ", str(tmp_path))

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_load_ledger_from_file(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry, graded_by="fac001")
    populated_ledger.save()

    response = Ledger.load(populated_ledger.path)
    assert response.success

    loaded = response.data["ledger"]
    assert loaded.name == "B.Tech Computer Science"
    assert len(loaded.subjects) == 2
    assert loaded.marks["m001"].graded_by == "fac001"
    assert not loaded.has_unsaved_changes


def test_load_missing_directory(tmp_path):
    response = Ledger.load(str(tmp_path / "missing"))

    assert not response.success
    assert response.error is ErrorCode.NOT_FOUND


def test_load_corrupt_json(sample_ledger):
    with open(os.path.join(sample_ledger.path, "marks.json"), "w") as f:
        f.write("{not json")

    response = Ledger.load(sample_ledger.path)

    assert not response.success
    assert response.error is ErrorCode.INVALID_INPUT


def test_load_rejects_out_of_range_marks(populated_ledger, sample_marks_entry):
    data = sample_marks_entry.to_dict()
    data["external_marks"] = 95

    with open(os.path.join(populated_ledger.path, "marks.json"), "w") as f:
        json.dump([data], f)
    with open(os.path.join(populated_ledger.path, "subjects.json"), "w") as f:
        json.dump([s.to_dict() for s in populated_ledger.subjects.values()], f)

    response = Ledger.load(populated_ledger.path)

    assert not response.success
    assert response.error is ErrorCode.INVALID_MARKS


def test_load_rejects_metadata_without_name(sample_ledger):
    with open(os.path.join(sample_ledger.path, "metadata.json"), "w") as f:
        json.dump({"retake_policy": "all_attempts"}, f)

    response = Ledger.load(sample_ledger.path)

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_load_rejects_blank_name(sample_ledger):
    with open(os.path.join(sample_ledger.path, "metadata.json"), "w") as f:
        json.dump({"name": "   "}, f)

    response = Ledger.load(sample_ledger.path)

    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_load_without_attendance_file(sample_ledger):
    os.remove(os.path.join(sample_ledger.path, "attendance.json"))

    response = Ledger.load(sample_ledger.path)

    assert response.success
    assert response.data["ledger"].attendance.is_empty()


# === persistence round trip ===


def test_persist_and_reload_preserves_results(
    populated_ledger, sample_marks_entry, admin_session, class_day
):
    ledger = populated_ledger
    ledger.submit_marks(sample_marks_entry)
    ledger.record_attendance("stu001", "sub001", class_day, "Late")
    before = ledger.get_student_results(admin_session, "stu001").data["results"][0]

    ledger.save()
    loaded = Ledger.load(ledger.path).data["ledger"]
    after = loaded.get_student_results(admin_session, "stu001").data["results"][0]

    assert after.grade == before.grade
    assert after.grade_point == before.grade_point
    assert after.status is before.status
    assert loaded.attendance.get_mark("stu001", "sub001", class_day).status is (
        AttendanceStatus.LATE
    )


def test_save_writes_subjects(populated_ledger, tmp_path):
    response = populated_ledger.save(str(tmp_path))
    assert response.success

    with open(tmp_path / "subjects.json") as f:
        data = json.load(f)

    assert sorted(s["code"] for s in data) == ["CS101", "CS102L"]


# === configuration ===


def test_set_retake_policy(sample_ledger):
    response = sample_ledger.set_retake_policy("latest_attempt")

    assert response.success
    assert sample_ledger.retake_policy is RetakePolicy.LATEST_ATTEMPT
    assert sample_ledger.has_unsaved_changes

    sample_ledger.save()
    loaded = Ledger.load(sample_ledger.path).data["ledger"]
    assert loaded.retake_policy is RetakePolicy.LATEST_ATTEMPT


def test_set_retake_policy_rejects_unknown(sample_ledger):
    response = sample_ledger.set_retake_policy("best_attempt")

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE
    assert sample_ledger.retake_policy is RetakePolicy.ALL_ATTEMPTS


# === subject methods ===


def test_add_subject(sample_ledger, sample_subject):
    response = sample_ledger.add_subject(sample_subject)

    assert response.success
    assert sample_subject in sample_ledger.subjects.values()
    assert sample_ledger.has_unsaved_changes


def test_add_subject_duplicate_code(populated_ledger):
    duplicate = Subject("sub099", " Cs101 ", "Another Programming", 2)

    response = populated_ledger.add_subject(duplicate)

    assert not response.success
    assert response.error is ErrorCode.VALIDATION_FAILED


def test_find_subject_by_code(populated_ledger, sample_subject):
    response = populated_ledger.find_subject_by_code("cs101")

    assert response.success
    assert response.data["record"] is sample_subject
    assert not populated_ledger.find_subject_by_code("XX999").success


def test_find_subject_by_uuid(populated_ledger, sample_subject):
    assert populated_ledger.find_subject_by_uuid("sub001").data["record"] is sample_subject

    response = populated_ledger.find_subject_by_uuid("nope")
    assert response.error is ErrorCode.NOT_FOUND
    assert response.status_code == 404


def test_remove_ungraded_subject(populated_ledger, sample_lab_subject, class_day):
    populated_ledger.record_attendance("stu001", "sub002", class_day, "Present")

    response = populated_ledger.remove_subject(sample_lab_subject)

    assert response.success
    assert "sub002" not in populated_ledger.subjects
    assert populated_ledger.attendance.is_empty()


def test_remove_graded_subject_is_refused(
    populated_ledger, sample_subject, sample_marks_entry
):
    populated_ledger.submit_marks(sample_marks_entry)

    response = populated_ledger.remove_subject(sample_subject)

    assert not response.success
    assert response.error is ErrorCode.SUBJECT_IN_USE
    assert "sub001" in populated_ledger.subjects


def test_update_subject_credits(populated_ledger, sample_subject):
    response = populated_ledger.update_subject_credits(sample_subject, 3)

    assert response.success
    assert sample_subject.credits == 3


def test_update_subject_credits_rejects_zero(populated_ledger, sample_subject):
    response = populated_ledger.update_subject_credits(sample_subject, 0)

    assert not response.success
    assert response.error is ErrorCode.INCONSISTENT_CREDITS
    assert response.status_code == 422
    assert sample_subject.credits == 4


def test_update_graded_subject_credits_is_refused(
    populated_ledger, sample_subject, sample_marks_entry
):
    populated_ledger.submit_marks(sample_marks_entry)

    response = populated_ledger.update_subject_credits(sample_subject, 2)

    assert response.error is ErrorCode.SUBJECT_IN_USE
    assert sample_subject.credits == 4


# === marks methods ===


def test_submit_marks(populated_ledger, sample_marks_entry):
    response = populated_ledger.submit_marks(sample_marks_entry, graded_by="fac001")

    assert response.success
    assert response.data["created"]
    assert response.data["result"].grade == "A"
    assert sample_marks_entry.graded_by == "fac001"
    assert isinstance(sample_marks_entry.graded_at, datetime.datetime)
    assert populated_ledger.has_unsaved_changes
    assert (
        populated_ledger.find_marks_entry_by_uuid("m001").data["record"]
        is sample_marks_entry
    )


def test_submit_marks_unknown_subject(sample_ledger, sample_marks_entry):
    response = sample_ledger.submit_marks(sample_marks_entry)

    assert not response.success
    assert response.error is ErrorCode.NOT_FOUND
    assert not sample_ledger.marks


def test_submit_marks_is_upsert(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry)

    revised = MarksEntry("m-new", "stu001", "sub001", 1, "2024-2025", 30, 65)
    response = populated_ledger.submit_marks(revised)

    assert response.success
    assert not response.data["created"]
    assert len(populated_ledger.marks) == 1

    stored = populated_ledger.marks["m001"]
    assert stored.total_marks == 95
    assert response.data["record"] is stored


def test_submit_same_marks_twice_is_idempotent(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry)
    first = populated_ledger.marks["m001"].grade_result(4).to_dict()

    populated_ledger.submit_marks(sample_marks_entry)
    second = populated_ledger.marks["m001"].grade_result(4).to_dict()

    assert len(populated_ledger.marks) == 1
    assert first == second


def test_retake_in_new_year_is_a_separate_entry(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry)
    retake = MarksEntry("m003", "stu001", "sub001", 1, "2025-2026", 20, 40)

    response = populated_ledger.submit_marks(retake)

    assert response.data["created"]
    assert len(populated_ledger.marks) == 2


def test_batch_submit_marks(populated_ledger, sample_marks_entry, sample_failing_entry):
    orphan = MarksEntry("m009", "stu002", "sub404", 1, "2024-2025", 10, 10)

    response = populated_ledger.batch_submit_marks(
        [sample_marks_entry, orphan, sample_failing_entry], graded_by="fac001"
    )

    assert not response.success
    assert response.error is ErrorCode.VALIDATION_FAILED
    assert len(response.data["saved"]) == 2
    assert response.data["skipped"][0][0] is orphan
    assert len(populated_ledger.marks) == 2


def test_batch_submit_marks_all_saved(populated_ledger, sample_marks_entry):
    response = populated_ledger.batch_submit_marks([sample_marks_entry])

    assert response.success
    assert response.data["skipped"] == []


def test_remove_marks_entry_frees_subject(
    populated_ledger, sample_subject, sample_marks_entry
):
    populated_ledger.submit_marks(sample_marks_entry)

    assert populated_ledger.remove_marks_entry(sample_marks_entry).success
    assert not populated_ledger.subject_is_graded("sub001")
    assert populated_ledger.update_subject_credits(sample_subject, 3).success

    response = populated_ledger.remove_marks_entry(sample_marks_entry)
    assert response.error is ErrorCode.NOT_FOUND


def test_publish_results(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry)
    other = MarksEntry("m004", "stu002", "sub001", 1, "2024-2025", 15, 35)
    populated_ledger.submit_marks(other)

    response = populated_ledger.publish_results("sub001", 1, "2024-2025")

    assert response.success
    assert len(response.data["published"]) == 2
    assert all(e.is_published for e in populated_ledger.marks.values())

    response = populated_ledger.publish_results("sub001", 1, "2024-2025")
    assert response.data["published"] == []


def test_publish_results_only_touches_matching_offering(
    populated_ledger, sample_marks_entry, sample_failing_entry
):
    populated_ledger.submit_marks(sample_marks_entry)
    populated_ledger.submit_marks(sample_failing_entry)

    populated_ledger.publish_results("sub001", 1, "2024-2025")

    assert populated_ledger.marks["m001"].is_published
    assert not populated_ledger.marks["m002"].is_published


def test_publish_results_unknown_subject(sample_ledger):
    response = sample_ledger.publish_results("sub404", 1, "2024-2025")

    assert response.error is ErrorCode.NOT_FOUND


# === results views ===


def test_get_student_results_for_staff(
    populated_ledger, sample_marks_entry, sample_failing_entry, faculty_session
):
    populated_ledger.submit_marks(sample_marks_entry)
    populated_ledger.submit_marks(sample_failing_entry)

    response = populated_ledger.get_student_results(faculty_session, "stu001")

    assert response.success
    transcript = response.data["transcript"]
    # A (9) over 4 credits, F (0) over 2 credits
    assert transcript.cgpa == 6.0
    assert transcript.total_credits == 6
    assert transcript.earned_credits == 4
    assert [r.grade for r in response.data["results"]] == ["A", "F"]


def test_get_student_results_hides_drafts_from_students(
    populated_ledger, sample_marks_entry, sample_failing_entry, student_session
):
    populated_ledger.submit_marks(sample_marks_entry)
    populated_ledger.submit_marks(sample_failing_entry)
    populated_ledger.publish_results("sub001", 1, "2024-2025")

    response = populated_ledger.get_student_results(student_session, "stu001")

    assert response.success
    assert [e.id for e in response.data["entries"]] == ["m001"]
    assert response.data["transcript"].cgpa == 9.0


def test_get_student_results_denies_other_students(populated_ledger, student_session):
    response = populated_ledger.get_student_results(student_session, "stu002")

    assert not response.success
    assert response.error is ErrorCode.PERMISSION_DENIED
    assert response.status_code == 403


def test_get_student_results_filters_semester(
    populated_ledger, sample_marks_entry, admin_session
):
    populated_ledger.submit_marks(sample_marks_entry)

    assert populated_ledger.get_student_results(admin_session, "stu001", 2).data[
        "entries"
    ] == []
    assert (
        len(
            populated_ledger.get_student_results(admin_session, "stu001", 1).data[
                "entries"
            ]
        )
        == 1
    )


def test_get_student_results_with_no_entries(sample_ledger, admin_session):
    response = sample_ledger.get_student_results(admin_session, "stu404")

    assert response.success
    assert response.data["transcript"].cgpa == 0


def test_get_student_results_honours_retake_policy(
    populated_ledger, sample_failing_entry, admin_session
):
    populated_ledger.submit_marks(sample_failing_entry)
    retake = MarksEntry("m005", "stu001", "sub002", 1, "2025-2026", 25, 50)
    populated_ledger.submit_marks(retake)

    all_attempts = populated_ledger.get_student_results(admin_session, "stu001")
    assert all_attempts.data["transcript"].cgpa == 4.0

    populated_ledger.set_retake_policy(RetakePolicy.LATEST_ATTEMPT)
    latest = populated_ledger.get_student_results(admin_session, "stu001")
    assert latest.data["transcript"].cgpa == 8.0


def test_get_result_statistics(populated_ledger, sample_marks_entry):
    populated_ledger.submit_marks(sample_marks_entry)
    populated_ledger.submit_marks(
        MarksEntry("m006", "stu002", "sub001", 1, "2024-2025", 10, 20)
    )
    populated_ledger.submit_marks(
        MarksEntry("m007", "stu003", "sub001", 1, "2024-2025", 5, 5)
    )
    populated_ledger.publish_results("sub001", 1, "2024-2025")
    # a later draft is not counted
    populated_ledger.submit_marks(
        MarksEntry("m008", "stu004", "sub001", 1, "2024-2025", 30, 70)
    )

    response = populated_ledger.get_result_statistics("sub001", 1, "2024-2025")

    stats = response.data["statistics"]
    assert stats["total"] == 3
    assert stats["pass"] == 1
    assert stats["fail"] == 2
    assert stats["highest_marks"] == 85
    assert stats["lowest_marks"] == 10


# === attendance methods ===


def test_record_attendance(populated_ledger, class_day):
    response = populated_ledger.record_attendance(
        "stu001", "sub001", class_day, "present", marked_by="fac001"
    )

    assert response.success
    assert response.data["record"].status is AttendanceStatus.PRESENT
    assert populated_ledger.has_unsaved_changes


def test_record_attendance_unknown_subject(sample_ledger, class_day):
    response = sample_ledger.record_attendance("stu001", "sub404", class_day, "Present")

    assert response.error is ErrorCode.NOT_FOUND


def test_record_attendance_invalid_status(populated_ledger, class_day):
    response = populated_ledger.record_attendance(
        "stu001", "sub001", class_day, "Excused"
    )

    assert not response.success
    assert response.error is ErrorCode.INVALID_STATUS
    assert populated_ledger.attendance.is_empty()


def test_clear_attendance(populated_ledger, class_day):
    populated_ledger.record_attendance("stu001", "sub001", class_day, "Absent")

    assert populated_ledger.clear_attendance("stu001", "sub001", class_day).success
    assert (
        populated_ledger.clear_attendance("stu001", "sub001", class_day).error
        is ErrorCode.NOT_FOUND
    )


def test_get_attendance_for_student(populated_ledger):
    ledger = populated_ledger
    ledger.record_attendance("stu001", "sub001", datetime.date(2025, 3, 3), "Present")
    ledger.record_attendance("stu001", "sub001", datetime.date(2025, 3, 4), "Present")
    ledger.record_attendance("stu001", "sub001", datetime.date(2025, 3, 5), "Late")
    ledger.record_attendance("stu001", "sub002", datetime.date(2025, 3, 5), "Absent")
    ledger.record_attendance("stu002", "sub001", datetime.date(2025, 3, 5), "Absent")

    response = ledger.get_attendance_for_student("stu001")

    assert response.success
    assert response.data["summary"].percentage == 75
    assert response.data["summary"].good_standing
    assert response.data["by_subject"]["sub001"].percentage == 100
    assert response.data["by_subject"]["sub002"].percentage == 0
    assert response.data["daily"][datetime.date(2025, 3, 5)] is AttendanceStatus.ABSENT
    assert response.data["marks"][0].date == datetime.date(2025, 3, 5)


def test_get_attendance_for_student_filters(populated_ledger):
    ledger = populated_ledger
    ledger.record_attendance("stu001", "sub001", datetime.date(2025, 3, 3), "Absent")
    ledger.record_attendance("stu001", "sub001", datetime.date(2025, 3, 4), "Present")
    ledger.record_attendance("stu001", "sub002", datetime.date(2025, 3, 4), "Absent")

    response = ledger.get_attendance_for_student(
        "stu001", "sub001", start=datetime.date(2025, 3, 4), end=datetime.date(2025, 3, 4)
    )

    assert response.data["summary"].total_marks == 1
    assert response.data["summary"].percentage == 100


def test_get_attendance_for_student_inverted_range(populated_ledger):
    response = populated_ledger.get_attendance_for_student(
        "stu001", start=datetime.date(2025, 3, 9), end=datetime.date(2025, 3, 1)
    )

    assert not response.success
    assert response.error is ErrorCode.INVALID_FIELD_VALUE


def test_get_attendance_for_student_without_marks(populated_ledger):
    response = populated_ledger.get_attendance_for_student("stu404")

    assert response.success
    assert response.data["summary"].percentage == 0
    assert response.data["marks"] == []


def test_get_class_attendance(populated_ledger, class_day):
    populated_ledger.record_attendance("stu002", "sub001", class_day, "Present")
    populated_ledger.record_attendance("stu001", "sub001", class_day, "Absent")
    populated_ledger.record_attendance(
        "stu001", "sub001", class_day + datetime.timedelta(days=1), "Present"
    )

    response = populated_ledger.get_class_attendance("sub001", class_day)

    assert [m.student_id for m in response.data["marks"]] == ["stu001", "stu002"]
    assert response.data["summary"].percentage == 50

    assert len(populated_ledger.get_class_attendance("sub001").data["marks"]) == 3
