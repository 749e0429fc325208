# 🔹 FILE: jobportal/services/applications.py
# ==============================================================
# Applications
# - submit_application(): insert the application, then the
#   confirmation notification (two writes, no rollback between them)
# - list_student_applications() / list_admin_applications(): joined reads
# - filter_applications() / application_stats(): over a loaded list
# ==============================================================

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import select

from .. import results
from ..gateway import Gateway
from ..models import Application, ApplicationStatus, Job, NotificationType, Profile
from ..results import Result, fail, ok
from ..utils.normalize import as_utc, utcnow
from .notifications import notify

logger = logging.getLogger(__name__)

ALREADY_APPLIED_MESSAGE = "You have already applied for this job."
SUBMITTED_TITLE = "Application Submitted Successfully!"
COVER_LETTER_MAX = 500
STATUS_ALL = "all"


def submit_application(
    gateway: Gateway,
    student_id,
    job_id,
    resume_url: str,
    cover_letter: str,
    now: Optional[datetime] = None,
) -> Result:
    now = as_utc(now) or utcnow()
    if not resume_url or not resume_url.strip():
        return fail(results.VALIDATION, "Resume URL is required")
    if not cover_letter or not cover_letter.strip():
        return fail(results.VALIDATION, "Cover letter is required")
    if len(cover_letter) > COVER_LETTER_MAX:
        return fail(results.VALIDATION, f"Cover letter must be at most {COVER_LETTER_MAX} characters")

    job = gateway.get(Job, job_id)
    if job.error:
        return job
    if as_utc(job.data.application_deadline) < now:
        return fail(results.VALIDATION, "The application deadline for this job has passed")

    created = gateway.insert(
        Application(
            job_id=job_id,
            student_id=student_id,
            resume_url=resume_url.strip(),
            cover_letter=cover_letter,
            status=ApplicationStatus.PENDING.value,
        )
    )
    if created.error:
        if created.error.code == results.UNIQUE_VIOLATION:
            logger.info("[APPLY] Duplicate application by %s for job %s", student_id, job_id)
            return fail(results.ALREADY_APPLIED, ALREADY_APPLIED_MESSAGE)
        logger.error("[APPLY] Error submitting application: %s", created.error)
        return created

    # a lost confirmation does not undo the application
    notify(
        gateway,
        student_id,
        SUBMITTED_TITLE,
        f'Your application for "{job.data.title}" has been submitted successfully. '
        "You will be notified of any updates.",
        NotificationType.SUCCESS,
    )
    logger.info("[APPLY] Application %s submitted for job %s", created.data.id, job_id)
    return created


def list_student_applications(gateway: Gateway, student_id) -> Result:
    """The student's applications with their job's title, description and deadline."""
    stmt = (
        select(Application, Job)
        .join(Job, Job.id == Application.job_id)
        .where(Application.student_id == student_id)
        .order_by(Application.created_at.desc())
    )
    found = gateway.rows(stmt)
    if found.error:
        logger.error("[APPLY] Error fetching applications: %s", found.error)
        return found
    out: List[Dict[str, Any]] = []
    for application, job in found.data:
        d = application.model_dump()
        d["job"] = {
            "title": job.title,
            "description": job.description,
            "application_deadline": job.application_deadline,
        }
        out.append(d)
    return ok(out)


def list_admin_applications(gateway: Gateway, admin_id, job_id=None, status: Optional[str] = None) -> Result:
    """Applications on the admin's jobs with job title and candidate name/email."""
    stmt = (
        select(Application, Job, Profile)
        .join(Job, Job.id == Application.job_id)
        .join(Profile, Profile.id == Application.student_id)
        .where(Job.created_by == admin_id)
        .order_by(Application.created_at.desc())
    )
    found = gateway.rows(stmt)
    if found.error:
        logger.error("[APPLY] Error fetching applications: %s", found.error)
        return found
    out: List[Dict[str, Any]] = []
    for application, job, student in found.data:
        d = application.model_dump()
        d["job"] = {"title": job.title, "created_by": job.created_by}
        d["student"] = {"full_name": student.full_name, "email": student.email}
        out.append(d)
    return ok(filter_applications(out, job_id=job_id, status=status))


def filter_applications(
    applications: Iterable[Dict[str, Any]],
    job_id=None,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    out = list(applications)
    if job_id is not None:
        out = [a for a in out if a["job_id"] == job_id]
    if status and status != STATUS_ALL:
        out = [a for a in out if a["status"] == status]
    return out


def application_stats(applications: Iterable[Any]) -> Dict[str, int]:
    """Count per status; accepts rows or dicts."""
    stats = {s.value: 0 for s in ApplicationStatus}
    for a in applications:
        status = a["status"] if isinstance(a, dict) else a.status
        if status in stats:
            stats[status] += 1
    return stats
