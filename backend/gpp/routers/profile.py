"""Profile routes for the settings page.

Unlike the onboarding wizard's one-shot write, errors here propagate:
the request fails and the transaction rolls back.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.auth.deps import get_current_user
from gpp.database import get_db
from gpp.models.user import User
from gpp.schemas.profile import ProfileOut, ProfileUpdate

router = APIRouter()


@router.get("/", response_model=ProfileOut)
async def get_profile(user: User = Depends(get_current_user)):
    return ProfileOut.model_validate(user)


@router.patch("/", response_model=ProfileOut)
async def update_profile(
    body: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = body.model_dump(exclude_unset=True)
    if "availability" in data and data["availability"] is not None:
        data["availability"] = data["availability"].value
    for k, v in data.items():
        setattr(user, k, v)
    await db.flush()
    await db.refresh(user)
    return ProfileOut.model_validate(user)
