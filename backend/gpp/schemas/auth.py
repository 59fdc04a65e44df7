from pydantic import BaseModel, EmailStr, Field, field_validator

# Roles a visitor may pick when registering themselves
SELF_SERVICE_ROLES = ("member", "viewer", "attorney")


class UserOut(BaseModel):
    id: str
    email: str
    full_name: str | None
    organization: str | None = None
    role: str
    is_active: bool
    onboarded: bool = False
    next_path: str = "/dashboard"

    model_config = {"from_attributes": True}


# ── Self-registration ───────────────────────────────────────

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str
    role: str = "member"
    organization: str | None = None

    @field_validator("role")
    @classmethod
    def _self_service_role(cls, v: str) -> str:
        if v not in SELF_SERVICE_ROLES:
            raise ValueError(f"role must be one of: {', '.join(SELF_SERVICE_ROLES)}")
        return v


# ── Login ────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserOut


# ── Token refresh ────────────────────────────────────────────

class RefreshRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: str | None = None
