# --------------------------------------------------------------
# Job Portal – Data Models (SQLModel)
# - Identities (auth users + signup metadata) & revoked tokens
# - Profiles (role + display name, one per identity)
# - Jobs posted by admins
# - Applications (student ↔ job), Interviews, Notifications
# --------------------------------------------------------------

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from .utils.normalize import utcnow


class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    INTERVIEW_SCHEDULED = "interview_scheduled"


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def _check_in(table: str, column: str, enum_cls) -> CheckConstraint:
    values = ", ".join(f"'{m.value}'" for m in enum_cls)
    return CheckConstraint(f"{column} IN ({values})", name=f"ck_{table}_{column}_valid")


# 🔐 Identity (auth user)
class User(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    # signup metadata: {"full_name": ..., "role": ...}
    user_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
    last_sign_in_at: Optional[datetime] = None


class RevokedToken(SQLModel, table=True):
    jti: str = Field(primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True, ondelete="CASCADE")
    revoked_at: datetime = Field(default_factory=utcnow)


# 👤 Profile (one-to-one with an identity)
class Profile(SQLModel, table=True):
    __table_args__ = (_check_in("profile", "role", UserRole),)

    id: UUID = Field(primary_key=True, foreign_key="user.id", ondelete="CASCADE")
    email: str = Field(unique=True)
    role: str
    full_name: str
    created_at: datetime = Field(default_factory=utcnow)


# 💼 Job posting
class Job(SQLModel, table=True):
    __table_args__ = (CheckConstraint("openings_count >= 1", name="ck_openings_count_positive"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: str
    # ordered for display, matched as a set
    skills_required: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    application_deadline: datetime = Field(index=True)
    openings_count: int = 1
    created_by: UUID = Field(foreign_key="profile.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utcnow)


# 📄 Application (one per job/student pair)
class Application(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("job_id", "student_id", name="uq_application_job_student"),
        _check_in("application", "status", ApplicationStatus),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    job_id: UUID = Field(foreign_key="job.id", index=True, ondelete="CASCADE")
    student_id: UUID = Field(foreign_key="profile.id", index=True, ondelete="CASCADE")
    resume_url: str
    cover_letter: str
    status: str = Field(default=ApplicationStatus.PENDING.value, index=True)
    created_at: datetime = Field(default_factory=utcnow)


# 🎥 Interview
class Interview(SQLModel, table=True):
    __table_args__ = (_check_in("interview", "status", InterviewStatus),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    application_id: UUID = Field(foreign_key="application.id", index=True, ondelete="CASCADE")
    scheduled_date: datetime
    passcode: str
    meeting_url: str
    status: str = Field(default=InterviewStatus.SCHEDULED.value)
    created_at: datetime = Field(default_factory=utcnow)


# 🔔 Notification
class Notification(SQLModel, table=True):
    __table_args__ = (_check_in("notification", "type", NotificationType),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="profile.id", index=True, ondelete="CASCADE")
    title: str
    message: str
    type: str = Field(default=NotificationType.INFO.value)
    read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow)
