# 🔹 FILE: jobportal/services/lifecycle.py
# ==============================================================
# Application lifecycle
#   pending → shortlisted | rejected
#   shortlisted → interview_scheduled
# Every transition is driven by the admin who owns the application's
# job, and is a sequence of independent writes (no transaction, no
# compensating rollback):
# - shortlist / reject: update the status, then notify the student
# - schedule interview: insert the interview, then update the status,
#   then notify. The status never moves before the interview exists.
# ==============================================================

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from .. import results
from ..gateway import Gateway
from ..models import Application, ApplicationStatus, Interview, InterviewStatus, Job, NotificationType
from ..results import Result, fail, ok
from ..utils.normalize import as_utc
from .notifications import notify

logger = logging.getLogger(__name__)

StatusLike = Union[ApplicationStatus, str]


class ApplicationTransitionError(ValueError):
    """Raised when an invalid status transition is requested."""


_ALLOWED_TRANSITIONS: Dict[ApplicationStatus, Tuple[ApplicationStatus, ...]] = {
    ApplicationStatus.PENDING: (
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
    ),
    ApplicationStatus.SHORTLISTED: (
        ApplicationStatus.INTERVIEW_SCHEDULED,
    ),
    ApplicationStatus.REJECTED: (),
    ApplicationStatus.INTERVIEW_SCHEDULED: (),
}

# Admin decisions made directly on an application; scheduling goes through
# schedule_interview() because it needs an interview row first.
DECISION_STATUSES: Tuple[ApplicationStatus, ...] = (
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.REJECTED,
)

_NOTIFICATIONS: Dict[ApplicationStatus, Tuple[str, str, NotificationType]] = {
    ApplicationStatus.SHORTLISTED: (
        "Application Shortlisted!",
        "Congratulations! You have been shortlisted for the position.",
        NotificationType.SUCCESS,
    ),
    ApplicationStatus.REJECTED: (
        "Application Update",
        "Thank you for your application. We have decided to move forward with other candidates.",
        NotificationType.INFO,
    ),
}


def _coerce(status: StatusLike) -> ApplicationStatus:
    try:
        return ApplicationStatus(status)
    except ValueError as exc:
        raise ApplicationTransitionError(f"Unknown application status: {status}") from exc


def all_statuses() -> List[str]:
    return [s.value for s in ApplicationStatus]


def allowed_transitions(status: StatusLike) -> Tuple[ApplicationStatus, ...]:
    return _ALLOWED_TRANSITIONS[_coerce(status)]


def is_terminal(status: StatusLike) -> bool:
    return not allowed_transitions(status)


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    try:
        return _coerce(target) in allowed_transitions(current)
    except ApplicationTransitionError:
        return False


def validate_transition(current: StatusLike, target: StatusLike) -> None:
    if not can_transition(current, target):
        raise ApplicationTransitionError(f"Invalid application transition: {current} -> {target}")


def format_interview_date(value: datetime) -> str:
    """'Mar 05, 2031 at 2:30 PM'"""
    hour = value.hour % 12 or 12
    return f"{value:%b %d, %Y} at {hour}:{value:%M %p}"


def _owned_application(gateway: Gateway, admin_id, application_id) -> Result:
    found = gateway.get(Application, application_id)
    if found.error:
        return found
    job = gateway.get(Job, found.data.job_id)
    if job.error:
        return job
    if job.data.created_by != admin_id:
        return fail(results.FORBIDDEN, "Only the admin who posted this job can update its applications")
    return found


def _check(application: Application, target: ApplicationStatus) -> Optional[Result]:
    try:
        validate_transition(application.status, target)
    except ApplicationTransitionError as exc:
        logger.warning("[LIFECYCLE] %s rejected for %s", exc, application.id)
        return fail(
            results.INVALID_TRANSITION,
            f"Cannot move an application from {application.status} to {target.value}",
        )
    return None


def transition_application(gateway: Gateway, admin_id, application_id, status: StatusLike) -> Result:
    """Shortlist or reject a pending application and notify the student."""
    try:
        target = _coerce(status)
    except ApplicationTransitionError as exc:
        return fail(results.VALIDATION, str(exc))
    if target not in DECISION_STATUSES:
        return fail(results.VALIDATION, "Use interview scheduling to move an application to interview_scheduled")

    found = _owned_application(gateway, admin_id, application_id)
    if found.error:
        return found
    rejected = _check(found.data, target)
    if rejected:
        return rejected

    updated = gateway.update(Application, application_id, status=target.value)
    if updated.error:
        logger.error("[LIFECYCLE] Error updating application status: %s", updated.error)
        return updated

    title, message, kind = _NOTIFICATIONS[target]
    # the status change stands even if the student is not told about it
    notify(gateway, updated.data.student_id, title, message, kind)
    logger.info("[LIFECYCLE] Application %s -> %s", application_id, target.value)
    return ok(updated.data)


def schedule_interview(
    gateway: Gateway,
    admin_id,
    application_id,
    scheduled_date: datetime,
    passcode: str,
    meeting_url: str,
) -> Result:
    """Create the interview, then mark the application, then notify the student."""
    if not passcode or not passcode.strip():
        return fail(results.VALIDATION, "Meeting passcode is required")
    if not meeting_url or not meeting_url.strip():
        return fail(results.VALIDATION, "Meeting URL is required")

    found = _owned_application(gateway, admin_id, application_id)
    if found.error:
        return found
    application = found.data
    rejected = _check(application, ApplicationStatus.INTERVIEW_SCHEDULED)
    if rejected:
        return rejected

    scheduled_date = as_utc(scheduled_date)
    created = gateway.insert(
        Interview(
            application_id=application.id,
            scheduled_date=scheduled_date,
            passcode=passcode.strip(),
            meeting_url=meeting_url.strip(),
            status=InterviewStatus.SCHEDULED.value,
        )
    )
    if created.error:
        logger.error("[INTERVIEW] Error scheduling interview: %s", created.error)
        return created
    interview = created.data

    updated = gateway.update(Application, application.id, status=ApplicationStatus.INTERVIEW_SCHEDULED.value)
    if updated.error:
        # interview row exists, application still shortlisted
        logger.error(
            "[INTERVIEW] Interview %s created but application %s not updated: %s",
            interview.id, application.id, updated.error,
        )
        return Result(
            data=interview,
            error=results.ServiceError(
                results.INCONSISTENT,
                "The interview was created but the application could not be updated. Please contact support.",
            ),
        )

    notify(
        gateway,
        application.student_id,
        "Interview Scheduled!",
        f"Your interview has been scheduled for {format_interview_date(scheduled_date)}. "
        "Check your dashboard for meeting details.",
        NotificationType.SUCCESS,
    )
    logger.info("[INTERVIEW] Interview %s scheduled for application %s", interview.id, application.id)
    return ok(interview)
