"""Auth routes: register, login, refresh, logout, me.

Route overview:
  POST /register  → self-registration (member / viewer / attorney)
  POST /login     → email + password login
  POST /refresh   → exchange a refresh token for new access + refresh tokens
  POST /logout    → revoke the presented access token (and refresh token, if sent)
  GET  /me        → current user, including where the client should go next
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.auth.deps import get_current_user, oauth2_scheme
from gpp.auth.jwt import create_access_token, create_refresh_token, decode_token
from gpp.auth.password import hash_password, verify_password
from gpp.auth.revocation import TokenRevocation
from gpp.config import settings
from gpp.database import get_db
from gpp.models.user import User, UserRole
from gpp.schemas.auth import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserOut,
)

router = APIRouter()


# ── Helpers ──────────────────────────────────────────────────

def _build_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        organization=user.organization,
        role=user.role.value,
        is_active=user.is_active,
        onboarded=bool(user.onboarded),
        # New users land in the onboarding wizard until it has saved their profile
        next_path=settings.dashboard_path if user.onboarded else settings.onboarding_path,
    )


def _build_token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(
            user_id=user.id,
            role=user.role.value,
            full_name=user.full_name,
        ),
        refresh_token=create_refresh_token(
            user_id=user.id,
            role=user.role.value,
        ),
        user=_build_user_out(user),
    )


# ── POST /register ──────────────────────────────────────────

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=body.email,
        hashed_password=hash_password(body.password),
        full_name=body.full_name,
        organization=body.organization,
        role=UserRole(body.role),
        skills=[],
        interests=[],
        onboarded=False,
        is_active=True,
    )
    db.add(user)
    await db.flush()

    return _build_token_response(user)


# ── POST /login ──────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(body.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return _build_token_response(user)


# ── POST /refresh ────────────────────────────────────────────

@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    """Exchange a refresh token for a new access + refresh token pair."""
    payload = decode_token(body.refresh_token)
    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    if await TokenRevocation.is_revoked(body.refresh_token):
        raise HTTPException(status_code=401, detail="Refresh token has been revoked")

    user_id = payload.get("sub")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")

    return _build_token_response(user)


# ── POST /logout ─────────────────────────────────────────────

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    body: LogoutRequest | None = None,
    user: User = Depends(get_current_user),
    token: str = Depends(oauth2_scheme),
):
    """Revoke the access token and, when sent, the caller's refresh token."""
    payload: dict = getattr(user, "_token_payload", {})
    await TokenRevocation.revoke_token(token, float(payload.get("exp", 0)))

    if body and body.refresh_token:
        refresh_payload = decode_token(body.refresh_token)
        if refresh_payload.get("type") == "refresh" and refresh_payload.get("sub") == user.id:
            await TokenRevocation.revoke_token(
                body.refresh_token, float(refresh_payload.get("exp", 0))
            )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── GET /me ──────────────────────────────────────────────────

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)):
    return _build_user_out(user)
