"""Pydantic schemas for the onboarding wizard.

Profile edits are partial (PATCH): omitted fields keep their value.
Skills and interests must come from the fixed option catalogs.
"""

from datetime import datetime

from pydantic import BaseModel, field_validator

from gpp.models.user import Availability
from gpp.onboarding.steps import INTEREST_OPTIONS, SKILL_OPTIONS


def _check_catalog(values: list[str] | None, catalog: tuple[str, ...], label: str):
    if values is None:
        return None
    unknown = [v for v in values if v not in catalog]
    if unknown:
        raise ValueError(f"Unknown {label}: {', '.join(unknown)}")
    return list(dict.fromkeys(values))


# ── Form input ───────────────────────────────────────────────

class ProfileStepData(BaseModel):
    bio: str | None = None
    skills: list[str] | None = None
    interests: list[str] | None = None
    availability: Availability | None = None

    @field_validator("skills")
    @classmethod
    def _known_skills(cls, v):
        return _check_catalog(v, SKILL_OPTIONS, "skills")

    @field_validator("interests")
    @classmethod
    def _known_interests(cls, v):
        return _check_catalog(v, INTEREST_OPTIONS, "interests")


class AcknowledgementData(BaseModel):
    encryption: bool | None = None
    privacy: bool | None = None
    safety: bool | None = None

    model_config = {"extra": "forbid"}


# ── Wizard view ──────────────────────────────────────────────

class StepOut(BaseModel):
    id: int
    kind: str
    title: str
    description: str
    status: str | None = None


class ProfileFieldsOut(BaseModel):
    bio: str
    skills: list[str]
    interests: list[str]
    availability: Availability


class WizardView(BaseModel):
    session_id: str
    current_step: int
    step: StepOut
    steps: list[StepOut]
    can_advance: bool
    is_complete: bool
    display_name: str
    profile: ProfileFieldsOut
    acknowledgements: dict[str, bool]
    profile_saved: bool | None = None
    exits: dict[str, str] = {}
    created_at: datetime | None = None


class OnboardingOptions(BaseModel):
    steps: list[StepOut]
    skills: list[str]
    interests: list[str]
    availability: list[str]
    disclosures: dict[str, str]
