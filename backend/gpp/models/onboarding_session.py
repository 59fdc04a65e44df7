"""Stores one onboarding wizard session per "mount".

A row is created each time the user starts the wizard and is never
resumed by a later start. It carries the step index, the profile form
fields collected so far, and the security acknowledgements.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gpp.database import Base
from gpp.models.user import utcnow


class OnboardingSession(Base):
    __tablename__ = "onboarding_sessions"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    current_step: Mapped[int] = mapped_column(Integer, default=0)
    collected_fields: Mapped[dict] = mapped_column(JSON, default=dict)
    acknowledgements: Mapped[dict] = mapped_column(JSON, default=dict)
    # null until the profile step has attempted its write
    profile_saved: Mapped[bool | None] = mapped_column(Boolean, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    user = relationship("User", back_populates="onboarding_sessions")
