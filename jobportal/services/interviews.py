# 🔹 FILE: jobportal/services/interviews.py
# ==============================================================
# Interview access
# - access_status(): pure classification from status + date + now
# - verify_passcode(): case-insensitive comparison. This is a usability
#   gate only: the student is shown the passcode next to the interview.
# - join_interview(): gate + meeting URL
# - generate_passcode() / generate_meeting_url()
# ==============================================================

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import select

from .. import results
from ..config import settings
from ..gateway import Gateway
from ..models import Application, ApplicationStatus, Interview, InterviewStatus, Job, Profile
from ..results import Result, fail, ok
from ..utils.normalize import as_utc, utcnow

logger = logging.getLogger(__name__)

UPCOMING_WINDOW = timedelta(minutes=30)
JOIN_WINDOW = timedelta(minutes=15)
INTERVIEW_LENGTH = timedelta(minutes=60)

PASSCODE_LENGTH = 8
ROOM_ID_LENGTH = 13

# Access states
SCHEDULED = "scheduled"
UPCOMING = "upcoming"
LIVE = "live"
PAST = "past"
COMPLETED = "completed"
CANCELLED = "cancelled"

_MESSAGES = {
    COMPLETED: "Interview completed",
    CANCELLED: "Interview cancelled",
    PAST: "Interview has ended",
    LIVE: "Interview is live - Join now!",
    UPCOMING: "Interview starting soon",
    SCHEDULED: "Interview scheduled",
}

_CLOSED = (PAST, COMPLETED, CANCELLED)


@dataclass(frozen=True)
class AccessStatus:
    status: str
    message: str

    @property
    def joinable(self) -> bool:
        return self.status not in _CLOSED


def access_status(interview_status: str, scheduled_date: datetime, now: Optional[datetime] = None) -> AccessStatus:
    """
    Classify an interview for the student view:
      - completed / cancelled come straight from the stored status
      - past      after start + 60 min
      - live      from start - 15 min to start + 60 min (inclusive)
      - upcoming  from start - 30 min up to start - 15 min
      - scheduled otherwise
    """
    if interview_status == InterviewStatus.COMPLETED.value:
        return AccessStatus(COMPLETED, _MESSAGES[COMPLETED])
    if interview_status == InterviewStatus.CANCELLED.value:
        return AccessStatus(CANCELLED, _MESSAGES[CANCELLED])

    now = as_utc(now) or utcnow()
    start = as_utc(scheduled_date)
    end = start + INTERVIEW_LENGTH

    if now > end:
        state = PAST
    elif now >= start - JOIN_WINDOW:
        state = LIVE
    elif now >= start - UPCOMING_WINDOW:
        state = UPCOMING
    else:
        state = SCHEDULED
    return AccessStatus(state, _MESSAGES[state])


def verify_passcode(supplied: Optional[str], stored: Optional[str]) -> bool:
    if supplied is None or stored is None:
        return False
    return supplied.strip().upper() == stored.strip().upper()


def generate_passcode() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(PASSCODE_LENGTH))


def generate_meeting_url() -> str:
    alphabet = string.ascii_lowercase + string.digits
    room_id = "".join(secrets.choice(alphabet) for _ in range(ROOM_ID_LENGTH))
    return f"{settings.MEETING_BASE_URL.rstrip('/')}/{settings.MEETING_ROOM_PREFIX}-{room_id}"


def _with_access(interview: Interview, now: datetime) -> Dict[str, Any]:
    d = interview.model_dump()
    access = access_status(interview.status, interview.scheduled_date, now)
    d["access_status"] = access.status
    d["access_message"] = access.message
    return d


def list_student_interviews(gateway: Gateway, student_id, now: Optional[datetime] = None) -> Result:
    """Interviews for the student's applications with job title and access status."""
    now = as_utc(now) or utcnow()
    stmt = (
        select(Interview, Application, Job)
        .join(Application, Application.id == Interview.application_id)
        .join(Job, Job.id == Application.job_id)
        .where(Application.student_id == student_id)
        .order_by(Interview.scheduled_date.asc())
    )
    found = gateway.rows(stmt)
    if found.error:
        logger.error("[INTERVIEW] Error fetching interviews: %s", found.error)
        return found
    out: List[Dict[str, Any]] = []
    for interview, application, job in found.data:
        d = _with_access(interview, now)
        d["job_id"] = application.job_id
        d["job_title"] = job.title
        out.append(d)
    return ok(out)


def list_admin_interviews(gateway: Gateway, admin_id, now: Optional[datetime] = None) -> Result:
    """Interviews on the admin's jobs with candidate name/email and job title."""
    now = as_utc(now) or utcnow()
    stmt = (
        select(Interview, Application, Job, Profile)
        .join(Application, Application.id == Interview.application_id)
        .join(Job, Job.id == Application.job_id)
        .join(Profile, Profile.id == Application.student_id)
        .where(Job.created_by == admin_id)
        .order_by(Interview.scheduled_date.asc())
    )
    found = gateway.rows(stmt)
    if found.error:
        logger.error("[INTERVIEW] Error fetching interviews: %s", found.error)
        return found
    out: List[Dict[str, Any]] = []
    for interview, application, job, student in found.data:
        d = _with_access(interview, now)
        d["student_id"] = application.student_id
        d["student_name"] = student.full_name
        d["student_email"] = student.email
        d["job_id"] = job.id
        d["job_title"] = job.title
        out.append(d)
    return ok(out)


def schedulable_applications(gateway: Gateway, admin_id) -> Result:
    """Shortlisted applications on the admin's jobs: the only ones that can get an interview."""
    stmt = (
        select(Application, Job, Profile)
        .join(Job, Job.id == Application.job_id)
        .join(Profile, Profile.id == Application.student_id)
        .where(Job.created_by == admin_id, Application.status == ApplicationStatus.SHORTLISTED.value)
        .order_by(Application.created_at.asc())
    )
    found = gateway.rows(stmt)
    if found.error:
        return found
    return ok([
        {
            "application_id": application.id,
            "job_id": job.id,
            "job_title": job.title,
            "student_id": student.id,
            "student_name": student.full_name,
            "student_email": student.email,
        }
        for application, job, student in found.data
    ])


def join_interview(gateway: Gateway, student_id, interview_id, passcode: str, now: Optional[datetime] = None) -> Result:
    """Check the passcode and hand back the meeting URL."""
    found = gateway.get(Interview, interview_id)
    if found.error:
        return found
    interview = found.data
    application = gateway.get(Application, interview.application_id)
    if application.error:
        return application
    if application.data.student_id != student_id:
        return fail(results.NOT_FOUND, "Interview not found")

    access = access_status(interview.status, interview.scheduled_date, now)
    if not access.joinable:
        return fail(results.VALIDATION, access.message)
    if not verify_passcode(passcode, interview.passcode):
        logger.info("[INTERVIEW] Wrong passcode for interview %s", interview.id)
        return fail(results.VALIDATION, "Invalid passcode")

    return ok({
        "interview_id": interview.id,
        "meeting_url": interview.meeting_url,
        "access_status": access.status,
    })
