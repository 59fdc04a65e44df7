"""Access guard for the onboarding wizard.

Checked once, when a wizard session is started. An anonymous caller is
sent to the login page; an authenticated caller whose role is not in
`required_roles` is sent to the unauthorized page.
"""

from __future__ import annotations

import logging
from typing import Iterable

from fastapi import Depends

from gpp.auth.deps import AuthContext, get_auth_context
from gpp.config import settings
from gpp.middleware.exceptions import AccessDenied, UnauthenticatedAccess
from gpp.models.user import UserRole

logger = logging.getLogger(__name__)


def parse_roles(raw: str) -> frozenset[UserRole]:
    """Parse a comma-separated role list ("" → no restriction)."""
    return frozenset(UserRole(r.strip()) for r in raw.split(",") if r.strip())


class AccessGuard:
    def __init__(
        self,
        required_roles: Iterable[UserRole] = (),
        login_path: str = "/auth/login",
        unauthorized_path: str = "/unauthorized",
    ):
        self.required_roles = frozenset(required_roles)
        self.login_path = login_path
        self.unauthorized_path = unauthorized_path

    def check(self, context: AuthContext | None) -> AuthContext:
        if context is None:
            raise UnauthenticatedAccess(self.login_path)
        if self.required_roles and context.role not in self.required_roles:
            logger.info(
                "Denied onboarding to user %s with role %s", context.user_id, context.role.value
            )
            raise AccessDenied(self.unauthorized_path, context.role.value)
        return context


def onboarding_guard() -> AccessGuard:
    return AccessGuard(
        required_roles=parse_roles(settings.onboarding_roles),
        login_path=settings.login_path,
        unauthorized_path=settings.unauthorized_path,
    )


async def require_onboarding_access(
    context: AuthContext | None = Depends(get_auth_context),
    guard: AccessGuard = Depends(onboarding_guard),
) -> AuthContext:
    return guard.check(context)
