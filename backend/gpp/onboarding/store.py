"""Load and save wizard state on `onboarding_sessions` rows."""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.middleware.exceptions import ResourceNotFoundError
from gpp.models.onboarding_session import OnboardingSession
from gpp.models.user import utcnow
from gpp.onboarding.controller import ProfileFields, WizardState, default_acknowledgements


async def start_session(db: AsyncSession, user_id: str) -> OnboardingSession:
    """Create a fresh session at step 0. Earlier sessions are never resumed."""
    state = WizardState()
    row = OnboardingSession(user_id=user_id)
    save_state(row, state)
    db.add(row)
    await db.flush()
    return row


def session_query(session_id: str, user_id: str, for_update: bool = False) -> Select:
    query = select(OnboardingSession).where(
        OnboardingSession.id == session_id,
        OnboardingSession.user_id == user_id,
    )
    if for_update:
        query = query.with_for_update()
    return query


async def get_session(
    db: AsyncSession, session_id: str, user_id: str, for_update: bool = False
) -> OnboardingSession:
    """Fetch a session owned by `user_id`; anyone else's session is a 404.

    With `for_update`, the row stays locked until the request's transaction
    ends, so concurrent edits of one session run one after the other.
    """
    result = await db.execute(session_query(session_id, user_id, for_update))
    row = result.scalar_one_or_none()
    if row is None:
        raise ResourceNotFoundError("Onboarding session", session_id)
    return row


def load_state(row: OnboardingSession) -> WizardState:
    return WizardState(
        current_step_index=row.current_step,
        collected_fields=ProfileFields.from_dict(row.collected_fields),
        acknowledgements={**default_acknowledgements(), **(row.acknowledgements or {})},
        profile_saved=row.profile_saved,
    )


def save_state(row: OnboardingSession, state: WizardState, terminal: bool = False) -> None:
    # JSON columns are reassigned, not mutated, so the ORM sees the change
    row.current_step = state.current_step_index
    row.collected_fields = state.collected_fields.to_dict()
    row.acknowledgements = dict(state.acknowledgements)
    row.profile_saved = state.profile_saved
    if terminal and row.completed_at is None:
        row.completed_at = utcnow()
