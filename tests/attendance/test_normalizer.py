from __future__ import annotations

import json
from datetime import date

import pytest

from src.attendance_dashboard.attendance_dashboard.attendance.normalizer import (
    PayloadShape,
    build_bucket,
    classify_payload,
    coerce_record,
    normalize_records,
)
from src.attendance_dashboard.attendance_dashboard.core.enums import AttendanceStatus


@pytest.mark.parametrize("payload", [None, 42, "string", {}, {"foo": "bar"}])
def test_unrecognised_payloads_normalize_to_empty(payload):
    assert normalize_records(payload) == []
    assert classify_payload(payload).shape is PayloadShape.UNKNOWN


def test_bare_list_is_returned_as_records(raw):
    records = normalize_records([raw(1, "PRESENT"), raw(2, "ABSENT", "sick")])

    assert [r.student_id for r in records] == [1, 2]
    assert records[1].status is AttendanceStatus.ABSENT
    assert records[1].remarks == "sick"


def test_records_wrapper(raw):
    payload = {"records": [raw(7, "PRESENT")], "total": 1}
    assert classify_payload(payload).shape is PayloadShape.RECORDS_FIELD
    assert [r.student_id for r in normalize_records(payload)] == [7]


def test_attendance_wrapper(raw):
    payload = {"attendance": [raw(3), raw(4)]}
    assert classify_payload(payload).shape is PayloadShape.ATTENDANCE_FIELD
    assert [r.student_id for r in normalize_records(payload)] == [3, 4]


def test_records_field_wins_over_attendance_field(raw):
    payload = {"attendance": [raw(1)], "records": [raw(2)]}
    assert [r.student_id for r in normalize_records(payload)] == [2]


def test_first_list_valued_field_is_used_as_last_resort(raw):
    payload = {"meta": {"page": 1}, "count": 2, "rows": [raw(5), raw(6)], "other": [raw(9)]}
    classified = classify_payload(payload)

    assert classified.shape is PayloadShape.FIRST_LIST_FIELD
    assert [r.student_id for r in normalize_records(payload)] == [5, 6]


def test_non_list_records_field_falls_through_to_next_rule(raw):
    payload = {"records": "n/a", "attendance": [raw(1)]}
    assert classify_payload(payload).shape is PayloadShape.ATTENDANCE_FIELD


def test_malformed_elements_are_passed_through_with_defaults():
    records = normalize_records([{"studentId": "12", "status": "late"}, "garbage", None])

    assert records[0].student_id == 12
    assert records[0].student_name == "N/A"
    assert records[0].roll_number == "N/A"
    assert records[0].status is None
    assert records[1].student_id is None
    assert records[2].student_name == "N/A"


def test_snake_case_keys_and_lowercase_status_are_accepted():
    rec = coerce_record({"student_id": 4, "student_name": "Ana", "roll_number": "A-4", "status": "present"})

    assert rec.student_id == 4
    assert rec.student_name == "Ana"
    assert rec.status is AttendanceStatus.PRESENT


def test_build_bucket_keeps_first_record_per_student(record):
    bucket = build_bucket(date(2024, 6, 7), [record(1, "PRESENT"), record(2), record(1, "ABSENT")])

    assert [r.student_id for r in bucket.records] == [1, 2]
    assert bucket.records[0].status is AttendanceStatus.PRESENT


@pytest.mark.parametrize("student_id", [float("inf"), float("-inf"), float("nan"), True, [1], "12abc"])
def test_unusable_student_ids_become_none(student_id):
    records = normalize_records([{"studentId": student_id, "studentName": "Ana", "status": "PRESENT"}])

    assert records[0].student_id is None
    assert records[0].student_name == "Ana"
    assert records[0].status is AttendanceStatus.PRESENT


def test_non_finite_json_numbers_do_not_escape_normalization():
    payload = json.loads('[{"studentId": 1e999, "studentName": "Ana"}, {"studentId": 2, "studentName": "Ben"}]')

    assert [r.student_id for r in normalize_records(payload)] == [None, 2]
