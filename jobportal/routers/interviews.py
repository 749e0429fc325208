# 🔹 FILE: jobportal/routers/interviews.py
from typing import List, Union
from uuid import UUID

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_current_profile, get_gateway, require_admin, require_student, unwrap
from ..gateway import Gateway
from ..models import Profile, UserRole
from ..services import interviews as interview_service
from ..services import lifecycle

router = APIRouter()


@router.get("/", response_model=Union[List[schemas.AdminInterviewOut], List[schemas.StudentInterviewOut]])
def list_interviews(gateway: Gateway = Depends(get_gateway), profile: Profile = Depends(get_current_profile)):
    """Admins see interviews on their jobs, students their own."""
    if profile.role == UserRole.ADMIN.value:
        return unwrap(interview_service.list_admin_interviews(gateway, profile.id))
    return unwrap(interview_service.list_student_interviews(gateway, profile.id))


@router.get("/schedulable", response_model=List[schemas.SchedulableOut])
def list_schedulable(gateway: Gateway = Depends(get_gateway), admin: Profile = Depends(require_admin)):
    return unwrap(interview_service.schedulable_applications(gateway, admin.id))


@router.get("/passcode", response_model=schemas.PasscodeOut)
def new_passcode(admin: Profile = Depends(require_admin)):
    return {"passcode": interview_service.generate_passcode()}


@router.get("/meeting-url", response_model=schemas.MeetingUrlOut)
def new_meeting_url(admin: Profile = Depends(require_admin)):
    return {"meeting_url": interview_service.generate_meeting_url()}


@router.post("/", response_model=schemas.InterviewOut)
def schedule_interview(
    payload: schemas.InterviewCreate,
    gateway: Gateway = Depends(get_gateway),
    admin: Profile = Depends(require_admin),
):
    interview = unwrap(
        lifecycle.schedule_interview(
            gateway,
            admin.id,
            payload.application_id,
            scheduled_date=payload.scheduled_date,
            passcode=payload.passcode or interview_service.generate_passcode(),
            meeting_url=payload.meeting_url or interview_service.generate_meeting_url(),
        )
    )
    access = interview_service.access_status(interview.status, interview.scheduled_date)
    return {**interview.model_dump(), "access_status": access.status, "access_message": access.message}


@router.post("/{interview_id}/join", response_model=schemas.JoinOut)
def join_interview(
    interview_id: UUID,
    payload: schemas.JoinIn,
    gateway: Gateway = Depends(get_gateway),
    student: Profile = Depends(require_student),
):
    return unwrap(interview_service.join_interview(gateway, student.id, interview_id, payload.passcode))
