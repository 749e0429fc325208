"""Tests for interview access windows, passcodes and joining."""

import re
from datetime import datetime, timedelta, timezone

import pytest

from jobportal import results
from jobportal.models import Interview
from jobportal.services import interviews
from jobportal.services.interviews import access_status, generate_meeting_url, generate_passcode, verify_passcode

from conftest import make_identity

T = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "offset,expected",
    [
        (timedelta(minutes=-31), "scheduled"),
        (timedelta(minutes=-30), "upcoming"),
        (timedelta(minutes=-15, seconds=-1), "upcoming"),
        (timedelta(minutes=-15), "live"),
        (timedelta(0), "live"),
        (timedelta(minutes=60), "live"),
        (timedelta(minutes=60, seconds=1), "past"),
        (timedelta(days=2), "past"),
    ],
)
def test_access_windows(offset, expected):
    assert access_status("scheduled", T, T + offset).status == expected


@pytest.mark.parametrize("stored", ["completed", "cancelled"])
def test_stored_status_wins_over_clock(stored):
    access = access_status(stored, T, T)
    assert access.status == stored
    assert not access.joinable


def test_messages():
    assert access_status("scheduled", T, T).message == "Interview is live - Join now!"
    assert access_status("scheduled", T, T - timedelta(minutes=20)).message == "Interview starting soon"
    assert access_status("scheduled", T, T + timedelta(hours=2)).message == "Interview has ended"


def test_joinable_states():
    assert access_status("scheduled", T, T - timedelta(days=1)).joinable
    assert access_status("scheduled", T, T).joinable
    assert not access_status("scheduled", T, T + timedelta(hours=2)).joinable


def test_aware_datetimes_compare_as_utc():
    start = datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert access_status("scheduled", start, T - timedelta(minutes=15)).status == "live"
    now = datetime(2030, 1, 1, 7, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert access_status("scheduled", T, now).status == "live"


def test_naive_datetimes_are_taken_as_utc():
    naive = datetime(2030, 1, 1, 12, 0)
    assert access_status("scheduled", naive, T - timedelta(minutes=15)).status == "live"
    assert access_status("scheduled", T, naive + timedelta(minutes=61)).status == "past"


@pytest.mark.parametrize(
    "supplied,stored,expected",
    [
        ("ABC12345", "ABC12345", True),
        ("abc12345", "ABC12345", True),
        ("  abc12345 ", "ABC12345", True),
        ("ABC1234", "ABC12345", False),
        ("", "ABC12345", False),
        (None, "ABC12345", False),
    ],
)
def test_verify_passcode(supplied, stored, expected):
    assert verify_passcode(supplied, stored) is expected


def test_generate_passcode():
    code = generate_passcode()
    assert re.fullmatch(r"[A-Z0-9]{8}", code)


def test_generate_meeting_url():
    url = generate_meeting_url()
    assert re.fullmatch(r"https://meet\.jit\.si/JobPortal-[a-z0-9]{13}", url)
    assert generate_meeting_url() != url


# ---------- joining ----------

@pytest.fixture
def interview(session, admin, student, make_job, make_application):
    application = make_application(make_job(admin), student, status="interview_scheduled")
    row = Interview(
        application_id=application.id,
        scheduled_date=T,
        passcode="ABC12345",
        meeting_url="https://meet.jit.si/JobPortal-room",
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def test_join_with_lowercase_passcode(gateway, student, interview):
    res = interviews.join_interview(gateway, student.id, interview.id, "abc12345", now=T - timedelta(minutes=15))

    assert res.ok
    assert res.data["meeting_url"] == "https://meet.jit.si/JobPortal-room"
    assert res.data["access_status"] == "live"


def test_join_with_wrong_passcode(gateway, student, interview):
    res = interviews.join_interview(gateway, student.id, interview.id, "WRONG", now=T)

    assert res.error.code == results.VALIDATION
    assert res.error.message == "Invalid passcode"


def test_join_after_the_interview_ended(gateway, student, interview):
    res = interviews.join_interview(gateway, student.id, interview.id, "ABC12345", now=T + timedelta(hours=2))

    assert res.error.code == results.VALIDATION
    assert res.error.message == "Interview has ended"


def test_join_someone_elses_interview(gateway, session, interview):
    other = make_identity(session, "other@example.com", full_name="Other Student")[1]

    res = interviews.join_interview(gateway, other.id, interview.id, "ABC12345", now=T)

    assert res.error.code == results.NOT_FOUND


def test_student_and_admin_listings(gateway, admin, student, interview):
    mine = interviews.list_student_interviews(gateway, student.id, now=T).data
    assert len(mine) == 1
    assert mine[0]["job_title"] == "Backend Intern"
    assert mine[0]["access_status"] == "live"

    theirs = interviews.list_admin_interviews(gateway, admin.id, now=T - timedelta(days=1)).data
    assert len(theirs) == 1
    assert theirs[0]["student_name"] == "Sam Student"
    assert theirs[0]["access_status"] == "scheduled"


def test_schedulable_lists_only_shortlisted(gateway, admin, student, session, make_job, make_application):
    job = make_job(admin)
    make_application(job, student)
    other = make_identity(session, "other@example.com", full_name="Other Student")[1]
    shortlisted = make_application(job, other, status="shortlisted")

    rows = interviews.schedulable_applications(gateway, admin.id).data

    assert [r["application_id"] for r in rows] == [shortlisted.id]
    assert rows[0]["student_name"] == "Other Student"
