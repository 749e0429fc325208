"""
Pytest configuration for the job portal tests.

The two required settings are set before anything from jobportal is
imported; every test gets a fresh in-memory database.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from jobportal.db import SessionLocal, create_db_and_tables, drop_db_and_tables
from jobportal.gateway import Gateway
from jobportal.main import app
from jobportal.models import Application, Job, Profile, User
from jobportal.security import create_access_token, hash_password
from jobportal.utils.normalize import utcnow

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fresh_db():
    create_db_and_tables()
    yield
    drop_db_and_tables()


@pytest.fixture
def session():
    with SessionLocal() as s:
        yield s


@pytest.fixture
def gateway(session):
    return Gateway(session)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_identity(session, email, full_name="Ana Student", role="student", with_profile=True, metadata=None):
    user = User(
        email=email,
        hashed_password=hash_password(PASSWORD),
        user_metadata={"full_name": full_name, "role": role} if metadata is None else metadata,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    profile = None
    if with_profile:
        profile = Profile(id=user.id, email=email, role=role, full_name=full_name)
        session.add(profile)
        session.commit()
        session.refresh(profile)
    return user, profile


def token_for(user):
    return create_access_token({"sub": str(user.id), "email": user.email})


@pytest.fixture
def admin(session):
    return make_identity(session, "admin@example.com", full_name="Ada Admin", role="admin")[1]


@pytest.fixture
def student(session):
    return make_identity(session, "student@example.com", full_name="Sam Student", role="student")[1]


@pytest.fixture
def make_job(session):
    def _make(admin, title="Backend Intern", deadline=None, skills=("Python", "SQL"), description="Build APIs"):
        job = Job(
            title=title,
            description=description,
            skills_required=list(skills),
            application_deadline=deadline or utcnow() + timedelta(days=7),
            openings_count=2,
            created_by=admin.id,
        )
        session.add(job)
        session.commit()
        session.refresh(job)
        return job

    return _make


@pytest.fixture
def make_application(session):
    def _make(job, student, status="pending"):
        application = Application(
            job_id=job.id,
            student_id=student.id,
            resume_url="https://x/r.pdf",
            cover_letter="I would love to join.",
            status=status,
        )
        session.add(application)
        session.commit()
        session.refresh(application)
        return application

    return _make
