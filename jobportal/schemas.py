# 🔹 FILE: jobportal/schemas.py
# -----------------------
# 🧩 Imports
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from .models import UserRole
from .utils.normalize import as_utc, clean_skills

# timestamps always leave the API as aware UTC
UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# 🧾 Auth
class CredentialsIn(BaseModel):
    model_config = ConfigDict(validate_default=True)

    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Email is required")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError("Please enter a valid email address") from exc
        return v.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class LoginIn(CredentialsIn):
    pass


class RegisterIn(CredentialsIn):
    full_name: str = ""
    role: UserRole = UserRole.STUDENT

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class UserOut(ORMModel):
    id: UUID
    email: EmailStr
    user_metadata: Dict[str, Any] = {}
    created_at: UTCDatetime
    last_sign_in_at: Optional[UTCDatetime] = None


# 👤 Profiles
class ProfileOut(ORMModel):
    id: UUID
    email: EmailStr
    role: UserRole
    full_name: str
    created_at: UTCDatetime


class SessionOut(BaseModel):
    access_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[UserOut] = None
    profile: Optional[ProfileOut] = None
    loading: bool = False
    error: Optional[str] = None


# 💼 Jobs
class JobCreate(BaseModel):
    title: str
    description: str
    skills_required: List[str]
    application_deadline: UTCDatetime
    openings_count: int = Field(default=1, ge=1)

    @field_validator("title", "description")
    @classmethod
    def _required_text(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("skills_required")
    @classmethod
    def _skills(cls, v: List[str]) -> List[str]:
        skills = clean_skills(v)
        if not skills:
            raise ValueError("At least one required skill is needed")
        return skills


class JobOut(ORMModel):
    id: UUID
    title: str
    description: str
    skills_required: List[str]
    application_deadline: UTCDatetime
    openings_count: int
    created_by: UUID
    created_at: UTCDatetime


class StudentJobOut(JobOut):
    has_applied: bool = False
    deadline_passed: bool = False


# 📨 Applications
class ApplicationCreate(BaseModel):
    job_id: UUID
    resume_url: str
    cover_letter: str

    @field_validator("resume_url")
    @classmethod
    def _resume_url(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Resume URL is required")
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("Please provide a direct link to your resume")
        return v

    @field_validator("cover_letter")
    @classmethod
    def _cover_letter(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Cover letter is required")
        if len(v) > 500:
            raise ValueError("Cover letter must be at most 500 characters")
        return v


class ApplicationOut(ORMModel):
    id: UUID
    job_id: UUID
    student_id: UUID
    resume_url: str
    cover_letter: str
    status: str
    created_at: UTCDatetime


class ApplicationJobSummary(BaseModel):
    title: str
    description: Optional[str] = None
    application_deadline: Optional[UTCDatetime] = None
    created_by: Optional[UUID] = None


class StudentSummary(BaseModel):
    full_name: str
    email: str


class StudentApplicationOut(ApplicationOut):
    job: ApplicationJobSummary


class AdminApplicationOut(ApplicationOut):
    job: ApplicationJobSummary
    student: StudentSummary


class ApplicationStatusUpdate(BaseModel):
    status: Literal["shortlisted", "rejected"]


class ApplicationStats(BaseModel):
    pending: int = 0
    shortlisted: int = 0
    rejected: int = 0
    interview_scheduled: int = 0


# 🎥 Interviews
class InterviewCreate(BaseModel):
    application_id: UUID
    scheduled_date: UTCDatetime
    # left empty → generated server-side
    passcode: Optional[str] = None
    meeting_url: Optional[str] = None


class InterviewOut(ORMModel):
    id: UUID
    application_id: UUID
    scheduled_date: UTCDatetime
    passcode: str
    meeting_url: str
    status: str
    created_at: UTCDatetime
    access_status: Optional[str] = None
    access_message: Optional[str] = None


class StudentInterviewOut(InterviewOut):
    job_id: UUID
    job_title: str


class AdminInterviewOut(InterviewOut):
    student_id: UUID
    student_name: str
    student_email: str
    job_id: UUID
    job_title: str


class SchedulableOut(BaseModel):
    application_id: UUID
    job_id: UUID
    job_title: str
    student_id: UUID
    student_name: str
    student_email: str


class JoinIn(BaseModel):
    passcode: str


class JoinOut(BaseModel):
    interview_id: UUID
    meeting_url: str
    access_status: str


class PasscodeOut(BaseModel):
    passcode: str


class MeetingUrlOut(BaseModel):
    meeting_url: str


# 🔔 Notifications
class NotificationOut(ORMModel):
    id: UUID
    user_id: UUID
    title: str
    message: str
    type: str
    read: bool
    created_at: UTCDatetime


class NotificationList(BaseModel):
    items: List[NotificationOut]
    unread_count: int


class UpdatedOut(BaseModel):
    updated: int


# 🧭 Dashboards
class AdminDashboardOut(BaseModel):
    role: Literal["admin"] = "admin"
    jobs: List[JobOut]
    applications: List[AdminApplicationOut]
    stats: ApplicationStats
    interviews: List[AdminInterviewOut]


class StudentDashboardOut(BaseModel):
    role: Literal["student"] = "student"
    jobs: List[StudentJobOut]
    skills: List[str]
    applications: List[StudentApplicationOut]
    stats: ApplicationStats
    interviews: List[StudentInterviewOut]
    notifications: List[NotificationOut]
    unread_count: int
