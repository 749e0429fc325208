"""Tests for the data gateway error mapping."""

import uuid
from datetime import timedelta

from jobportal import results
from jobportal.models import Application, Job, Profile
from jobportal.utils.normalize import utcnow

from conftest import make_identity


def test_get_missing_row(gateway):
    res = gateway.get(Job, uuid.uuid4())
    assert res.error.code == results.NOT_FOUND
    assert res.error.message == "Job not found"


def test_unique_violation(gateway, admin, student, make_job, make_application):
    job = make_job(admin)
    make_application(job, student)

    res = gateway.insert(Application(job_id=job.id, student_id=student.id, resume_url="r", cover_letter="c"))

    assert res.error.code == results.UNIQUE_VIOLATION


def test_foreign_key_violation(gateway, student):
    res = gateway.insert(Application(job_id=uuid.uuid4(), student_id=student.id, resume_url="r", cover_letter="c"))
    assert res.error.code == results.FOREIGN_KEY_VIOLATION


def test_check_violation(gateway, admin):
    res = gateway.insert(
        Job(
            title="t",
            description="d",
            skills_required=["x"],
            application_deadline=utcnow() + timedelta(days=1),
            openings_count=0,
            created_by=admin.id,
        )
    )
    assert res.error.code == results.CHECK_VIOLATION


def test_session_usable_after_failure(gateway, student):
    gateway.insert(Application(job_id=uuid.uuid4(), student_id=student.id, resume_url="r", cover_letter="c"))
    assert gateway.get(Profile, student.id).ok


def test_select_and_update_in(gateway, session, admin, make_job):
    jobs = [make_job(admin, title=f"Job {i}") for i in range(3)]

    updated = gateway.update_in(Job, [j.id for j in jobs[:2]], openings_count=5)

    assert updated.data == 2
    assert sorted(j.openings_count for j in gateway.select(Job).data) == [2, 5, 5]
    assert gateway.update_in(Job, []).data == 0


def test_upsert(gateway, session):
    user, _ = make_identity(session, "ana@example.com", with_profile=False)
    first = gateway.upsert(Profile(id=user.id, email=user.email, role="student", full_name="Ana"))
    assert first.ok

    kept = gateway.upsert(
        Profile(id=user.id, email=user.email, role="student", full_name="Changed"), ignore_duplicates=True
    )
    assert kept.data.full_name == "Ana"

    replaced = gateway.upsert(Profile(id=user.id, email=user.email, role="student", full_name="Changed"))
    assert replaced.data.full_name == "Changed"


def test_select_one(gateway, admin):
    assert gateway.select_one(Profile, Profile.email == "admin@example.com").data.id == admin.id
    assert gateway.select_one(Profile, Profile.email == "nobody@example.com").error.code == results.NOT_FOUND
