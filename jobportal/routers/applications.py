# 🔹 FILE: jobportal/routers/applications.py
# ------------------------------
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from .. import schemas
from ..dependencies import get_gateway, require_admin, require_student, unwrap
from ..gateway import Gateway
from ..models import Profile
from ..services import applications as application_service
from ..services import lifecycle

router = APIRouter()

# ➕ Apply to a job (student)
@router.post("/", response_model=schemas.ApplicationOut)
def create_application(
    payload: schemas.ApplicationCreate,
    gateway: Gateway = Depends(get_gateway),
    student: Profile = Depends(require_student),
):
    return unwrap(
        application_service.submit_application(
            gateway,
            student.id,
            payload.job_id,
            resume_url=payload.resume_url,
            cover_letter=payload.cover_letter,
        )
    )

# 🗂️ My applications (student)
@router.get("/mine", response_model=List[schemas.StudentApplicationOut])
def list_my_applications(gateway: Gateway = Depends(get_gateway), student: Profile = Depends(require_student)):
    return unwrap(application_service.list_student_applications(gateway, student.id))

# 🗂️ Applications on my jobs (admin)
@router.get("/", response_model=List[schemas.AdminApplicationOut])
def list_applications(
    job_id: Optional[UUID] = None,
    status: str = Query(application_service.STATUS_ALL, description="all / pending / shortlisted / rejected / interview_scheduled"),
    gateway: Gateway = Depends(get_gateway),
    admin: Profile = Depends(require_admin),
):
    return unwrap(application_service.list_admin_applications(gateway, admin.id, job_id=job_id, status=status))

@router.get("/stats", response_model=schemas.ApplicationStats)
def application_stats(gateway: Gateway = Depends(get_gateway), admin: Profile = Depends(require_admin)):
    rows = unwrap(application_service.list_admin_applications(gateway, admin.id))
    return application_service.application_stats(rows)

# 🔀 Shortlist / reject (admin)
@router.patch("/{application_id}/status", response_model=schemas.ApplicationOut)
def update_status(
    application_id: UUID,
    payload: schemas.ApplicationStatusUpdate,
    gateway: Gateway = Depends(get_gateway),
    admin: Profile = Depends(require_admin),
):
    return unwrap(lifecycle.transition_application(gateway, admin.id, application_id, payload.status))
