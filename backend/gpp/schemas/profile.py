from datetime import datetime

from pydantic import BaseModel, field_validator

from gpp.models.user import Availability, UserRole
from gpp.schemas.onboarding import ProfileStepData


class ProfileOut(BaseModel):
    id: str
    email: str
    full_name: str | None
    organization: str | None
    role: UserRole
    bio: str | None
    skills: list[str]
    interests: list[str]
    availability: Availability | None
    onboarded: bool
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("skills", "interests", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return v or []


class ProfileUpdate(ProfileStepData):
    """Settings-page edit; same catalog rules as the onboarding profile step."""
    full_name: str | None = None
    organization: str | None = None
