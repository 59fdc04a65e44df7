"""FastAPI dependencies for authentication.

Dependencies:
  get_current_user  → decode JWT, load user from DB, return User (401 otherwise)
  get_auth_context  → same lookup, but returns None instead of raising;
                      the onboarding access guard decides what to do
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.auth.jwt import decode_token
from gpp.auth.revocation import TokenRevocation
from gpp.database import get_db
from gpp.models.user import User, UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, as seen by the access guard."""

    user_id: str
    full_name: str | None
    role: UserRole


async def _resolve_user(token: str | None, db: AsyncSession) -> User | None:
    if not token:
        return None
    payload = decode_token(token)
    user_id: str | None = payload.get("sub")
    if not user_id or payload.get("type") != "access":
        return None

    if await TokenRevocation.is_revoked(token):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        return None

    # Stash token payload for downstream use (logout reads `exp`)
    user._token_payload = payload  # type: ignore[attr-defined]
    return user


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await _resolve_user(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_auth_context(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> AuthContext | None:
    user = await _resolve_user(token, db)
    if user is None:
        return None
    return AuthContext(user_id=user.id, full_name=user.full_name, role=user.role)
