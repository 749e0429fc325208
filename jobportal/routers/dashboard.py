# 🔹 FILE: jobportal/routers/dashboard.py
# --------------------------------------------------------------
# Dashboard Router
# The role is looked at once, here; the builders below only get the
# profile id and return data already scoped to that role.
# --------------------------------------------------------------

from typing import Union
from uuid import UUID

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_current_profile, get_gateway, unwrap
from ..gateway import Gateway
from ..models import Profile, UserRole
from ..services import applications as application_service
from ..services import interviews as interview_service
from ..services import jobs as job_service
from ..services import notifications as notification_service

router = APIRouter()


def admin_dashboard(gateway: Gateway, admin_id: UUID) -> schemas.AdminDashboardOut:
    applications = unwrap(application_service.list_admin_applications(gateway, admin_id))
    return schemas.AdminDashboardOut(
        jobs=[schemas.JobOut.model_validate(j) for j in unwrap(job_service.list_admin_jobs(gateway, admin_id))],
        applications=applications,
        stats=application_service.application_stats(applications),
        interviews=unwrap(interview_service.list_admin_interviews(gateway, admin_id)),
    )


def student_dashboard(gateway: Gateway, student_id: UUID) -> schemas.StudentDashboardOut:
    jobs = unwrap(job_service.list_open_jobs(gateway))
    applications = unwrap(application_service.list_student_applications(gateway, student_id))
    notifications = unwrap(notification_service.list_notifications(gateway, student_id))
    applied = [schemas.ApplicationOut.model_validate(a) for a in applications]
    return schemas.StudentDashboardOut(
        jobs=job_service.decorate_for_student(jobs, applied),
        skills=job_service.all_skills(jobs),
        applications=applications,
        stats=application_service.application_stats(applications),
        interviews=unwrap(interview_service.list_student_interviews(gateway, student_id)),
        notifications=[schemas.NotificationOut.model_validate(n) for n in notifications],
        unread_count=notification_service.unread_count(notifications),
    )


_BUILDERS = {
    UserRole.ADMIN.value: admin_dashboard,
    UserRole.STUDENT.value: student_dashboard,
}


@router.get("/", response_model=Union[schemas.AdminDashboardOut, schemas.StudentDashboardOut])
def dashboard(gateway: Gateway = Depends(get_gateway), profile: Profile = Depends(get_current_profile)):
    return _BUILDERS[profile.role](gateway, profile.id)
