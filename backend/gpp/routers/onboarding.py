"""Onboarding wizard: four fixed steps, forward only.

Endpoints:
  GET    /api/onboarding/options                       → steps + option catalogs
  POST   /api/onboarding/sessions                      → start a fresh wizard (guarded)
  GET    /api/onboarding/sessions/{id}                 → current view
  PATCH  /api/onboarding/sessions/{id}/profile         → edit profile form (profile step)
  PATCH  /api/onboarding/sessions/{id}/acknowledgements → tick disclosures (security step)
  POST   /api/onboarding/sessions/{id}/advance         → "next"
  DELETE /api/onboarding/sessions/{id}                 → discard

Design:
  - Starting the wizard always creates a new session at step 0; nothing
    is resumed from an earlier session.
  - The access guard runs once, on start. Later calls only check that the
    session belongs to the caller.
  - Mutating calls lock the session row, so concurrent "next" requests
    cannot both pass the profile step.
  - The profile step's "next" writes the profile (one write per session)
    and advances even if that write fails.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.auth.deps import AuthContext, get_current_user
from gpp.config import settings
from gpp.database import async_session, get_db
from gpp.models.onboarding_session import OnboardingSession
from gpp.models.user import Availability, User
from gpp.onboarding.guard import require_onboarding_access
from gpp.onboarding.persistence import ProfileWriter, SqlProfileWriter
from gpp.onboarding.steps import (
    DISCLOSURES,
    INTEREST_OPTIONS,
    ONBOARDING_STEPS,
    SKILL_OPTIONS,
    Step,
)
from gpp.onboarding.store import get_session, load_state, save_state, start_session
from gpp.onboarding.wizard import OnboardingWizard
from gpp.schemas.onboarding import (
    AcknowledgementData,
    OnboardingOptions,
    ProfileFieldsOut,
    ProfileStepData,
    StepOut,
    WizardView,
)

router = APIRouter()


def get_profile_writer() -> ProfileWriter:
    return SqlProfileWriter(async_session, timeout=settings.profile_write_timeout_seconds)


# ── Helpers ──────────────────────────────────────────────────

def _step_out(step: Step, step_status: str | None = None) -> StepOut:
    return StepOut(
        id=step.id,
        kind=step.kind.value,
        title=step.title,
        description=step.description,
        status=step_status,
    )


def _exits() -> dict[str, str]:
    return {"resources": settings.resources_path, "dashboard": settings.dashboard_path}


def _make_view(
    row: OnboardingSession,
    wizard: OnboardingWizard,
    full_name: str | None,
) -> WizardView:
    state = wizard.state
    fields = state.collected_fields
    return WizardView(
        session_id=row.id,
        current_step=state.current_step_index,
        step=_step_out(wizard.current_step, "current"),
        steps=[_step_out(step, s) for step, s in wizard.step_statuses()],
        can_advance=wizard.can_advance(),
        is_complete=wizard.is_complete,
        display_name=full_name or "Friend",
        profile=ProfileFieldsOut(
            bio=fields.bio,
            skills=fields.skills,
            interests=fields.interests,
            availability=fields.availability,
        ),
        acknowledgements=state.acknowledgements,
        profile_saved=state.profile_saved,
        exits=_exits() if wizard.is_complete else {},
        created_at=row.created_at,
    )


async def _open(
    db: AsyncSession,
    session_id: str,
    user: User,
    writer: ProfileWriter,
    for_update: bool = False,
) -> tuple[OnboardingSession, OnboardingWizard]:
    row = await get_session(db, session_id, user.id, for_update=for_update)
    wizard = OnboardingWizard(load_state(row), writer, user.id)
    return row, wizard


async def _store(db: AsyncSession, row: OnboardingSession, wizard: OnboardingWizard) -> None:
    save_state(row, wizard.state, terminal=wizard.is_complete)
    await db.flush()


# ── GET /api/onboarding/options ──────────────────────────────

@router.get("/options", response_model=OnboardingOptions)
async def get_options():
    return OnboardingOptions(
        steps=[_step_out(step) for step in ONBOARDING_STEPS],
        skills=list(SKILL_OPTIONS),
        interests=list(INTEREST_OPTIONS),
        availability=[a.value for a in Availability],
        disclosures=DISCLOSURES,
    )


# ── POST /api/onboarding/sessions ────────────────────────────

@router.post("/sessions", response_model=WizardView, status_code=status.HTTP_201_CREATED)
async def start(
    db: AsyncSession = Depends(get_db),
    context: AuthContext = Depends(require_onboarding_access),
    writer: ProfileWriter = Depends(get_profile_writer),
):
    """Mount the wizard: a new session at the welcome step."""
    row = await start_session(db, context.user_id)
    wizard = OnboardingWizard(load_state(row), writer, context.user_id)
    return _make_view(row, wizard, context.full_name)


# ── GET /api/onboarding/sessions/{id} ────────────────────────

@router.get("/sessions/{session_id}", response_model=WizardView)
async def get_view(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    writer: ProfileWriter = Depends(get_profile_writer),
):
    row, wizard = await _open(db, session_id, user, writer)
    return _make_view(row, wizard, user.full_name)


# ── PATCH /api/onboarding/sessions/{id}/profile ──────────────

@router.patch("/sessions/{session_id}/profile", response_model=WizardView)
async def edit_profile(
    session_id: str,
    body: ProfileStepData,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    writer: ProfileWriter = Depends(get_profile_writer),
):
    row, wizard = await _open(db, session_id, user, writer, for_update=True)
    wizard.update_profile(**body.model_dump(exclude_unset=True, exclude_none=True))
    await _store(db, row, wizard)
    return _make_view(row, wizard, user.full_name)


# ── PATCH /api/onboarding/sessions/{id}/acknowledgements ─────

@router.patch("/sessions/{session_id}/acknowledgements", response_model=WizardView)
async def acknowledge(
    session_id: str,
    body: AcknowledgementData,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    writer: ProfileWriter = Depends(get_profile_writer),
):
    row, wizard = await _open(db, session_id, user, writer, for_update=True)
    wizard.set_acknowledgements(body.model_dump(exclude_unset=True, exclude_none=True))
    await _store(db, row, wizard)
    return _make_view(row, wizard, user.full_name)


# ── POST /api/onboarding/sessions/{id}/advance ───────────────

@router.post("/sessions/{session_id}/advance", response_model=WizardView)
async def advance(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    writer: ProfileWriter = Depends(get_profile_writer),
):
    """Move past the active step. A no-op once the wizard is complete."""
    row, wizard = await _open(db, session_id, user, writer, for_update=True)
    await wizard.next()
    await _store(db, row, wizard)
    return _make_view(row, wizard, user.full_name)


# ── DELETE /api/onboarding/sessions/{id} ─────────────────────

@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    row = await get_session(db, session_id, user.id)
    await db.delete(row)
    await db.flush()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
