import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gpp.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    OPS_LEAD = "ops_lead"
    LEGAL_LEAD = "legal_lead"
    ADMIN = "admin"
    VIEWER = "viewer"
    ATTORNEY = "attorney"
    MEMBER = "member"


class Availability(str, enum.Enum):
    ALWAYS = "always"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    OCCASIONALLY = "occasionally"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(255))
    organization: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[UserRole] = mapped_column(SAEnum(UserRole), default=UserRole.MEMBER)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Profile fields written by the onboarding wizard (and the settings page)
    bio: Mapped[str | None] = mapped_column(Text)
    skills: Mapped[list | None] = mapped_column(JSON, default=list)
    interests: Mapped[list | None] = mapped_column(JSON, default=list)
    availability: Mapped[str | None] = mapped_column(String(20))
    onboarded: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    onboarding_sessions = relationship(
        "OnboardingSession", back_populates="user", cascade="all, delete-orphan"
    )
