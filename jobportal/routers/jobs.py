# 🔹 FILE: jobportal/routers/jobs.py
# --------------------------------------------------------------
# Jobs Router
# - GET  /jobs         → open jobs for students (q / skill filters)
# - GET  /jobs/skills  → distinct skills across open jobs
# - GET  /jobs/mine    → every job the admin posted
# - POST /jobs         → post a job (admin)
# - GET  /jobs/{id}    → one job
# --------------------------------------------------------------

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..dependencies import get_current_profile, get_gateway, require_admin, require_student, unwrap
from ..gateway import Gateway
from ..models import Application, Profile
from ..services import jobs as job_service

router = APIRouter()


@router.get("/", response_model=List[schemas.StudentJobOut])
def list_jobs(
    q: Optional[str] = Query(None, description="Search in title/description"),
    skill: Optional[str] = Query(None, description="Keep jobs requiring a matching skill"),
    gateway: Gateway = Depends(get_gateway),
    student: Profile = Depends(require_student),
):
    """Open jobs, newest first, flagged with has_applied / deadline_passed."""
    jobs = unwrap(job_service.list_open_jobs(gateway))
    mine = unwrap(gateway.select(Application, Application.student_id == student.id))
    jobs = job_service.filter_jobs(jobs, search=q, skill=skill)
    return job_service.decorate_for_student(jobs, mine)


@router.get("/skills", response_model=List[str])
def list_skills(
    gateway: Gateway = Depends(get_gateway),
    profile: Profile = Depends(get_current_profile),
):
    return job_service.all_skills(unwrap(job_service.list_open_jobs(gateway)))


@router.get("/mine", response_model=List[schemas.JobOut])
def list_my_jobs(gateway: Gateway = Depends(get_gateway), admin: Profile = Depends(require_admin)):
    return unwrap(job_service.list_admin_jobs(gateway, admin.id))


@router.post("/", response_model=schemas.JobOut)
def create_job(
    payload: schemas.JobCreate,
    gateway: Gateway = Depends(get_gateway),
    admin: Profile = Depends(require_admin),
):
    return unwrap(
        job_service.create_job(
            gateway,
            admin.id,
            title=payload.title,
            description=payload.description,
            skills_required=payload.skills_required,
            application_deadline=payload.application_deadline,
            openings_count=payload.openings_count,
        )
    )


@router.get("/{job_id}", response_model=schemas.JobOut)
def get_job(
    job_id: UUID,
    gateway: Gateway = Depends(get_gateway),
    profile: Profile = Depends(get_current_profile),
):
    return unwrap(job_service.get_job(gateway, job_id))
