# 🔹 FILE: jobportal/services/jobs.py
# --------------------------------------------------------------
# Job catalog
# - list_open_jobs()   → what students see (deadline not passed)
# - list_admin_jobs()  → everything an admin posted
# - filter_jobs()      → free-text + skill filters over a loaded list
# No pagination: every query loads the full result set.
# --------------------------------------------------------------

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .. import results
from ..gateway import Gateway
from ..models import Application, Job
from ..results import Result, fail
from ..utils.normalize import as_utc, clean_skills, norm_text, unique_skills, utcnow

logger = logging.getLogger(__name__)


def list_open_jobs(gateway: Gateway, now: Optional[datetime] = None) -> Result:
    """Jobs still accepting applications, as of query time."""
    now = as_utc(now) or utcnow()
    return gateway.select(
        Job,
        Job.application_deadline >= now,
        order_by=(Job.created_at.desc(),),
    )


def list_admin_jobs(gateway: Gateway, admin_id) -> Result:
    return gateway.select(Job, Job.created_by == admin_id, order_by=(Job.created_at.desc(),))


def get_job(gateway: Gateway, job_id) -> Result:
    return gateway.get(Job, job_id)


def create_job(
    gateway: Gateway,
    admin_id,
    title: str,
    description: str,
    skills_required: Iterable[str],
    application_deadline: datetime,
    openings_count: int = 1,
) -> Result:
    skills = clean_skills(skills_required)
    if not title or not title.strip():
        return fail(results.VALIDATION, "Job title is required")
    if not description or not description.strip():
        return fail(results.VALIDATION, "Job description is required")
    if not skills:
        return fail(results.VALIDATION, "At least one required skill is needed")
    if openings_count is None or openings_count < 1:
        return fail(results.VALIDATION, "Number of openings must be at least 1")

    created = gateway.insert(
        Job(
            title=title.strip(),
            description=description.strip(),
            skills_required=skills,
            application_deadline=as_utc(application_deadline),
            openings_count=openings_count,
            created_by=admin_id,
        )
    )
    if created.error:
        logger.error("[JOBS] Error creating job: %s", created.error)
        return created
    logger.info("[JOBS] Job %s posted by %s", created.data.id, admin_id)
    return created


def job_matches(job: Job, search: Optional[str] = None, skill: Optional[str] = None) -> bool:
    term = norm_text(search)
    if term and term not in job.title.lower() and term not in job.description.lower():
        return False
    wanted = norm_text(skill)
    if wanted and not any(wanted in s.lower() for s in job.skills_required):
        return False
    return True


def filter_jobs(jobs: Iterable[Job], search: Optional[str] = None, skill: Optional[str] = None) -> List[Job]:
    return [j for j in jobs if job_matches(j, search, skill)]


def all_skills(jobs: Iterable[Job]) -> List[str]:
    return unique_skills(j.skills_required for j in jobs)


def decorate_for_student(
    jobs: Iterable[Job],
    applications: Iterable[Application],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Job rows plus the two flags a student listing needs."""
    now = as_utc(now) or utcnow()
    applied = {a.job_id for a in applications}
    out = []
    for j in jobs:
        d = j.model_dump()
        d["has_applied"] = j.id in applied
        d["deadline_passed"] = as_utc(j.application_deadline) < now
        out.append(d)
    return out
