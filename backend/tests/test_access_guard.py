"""Access guard tests: who may start the onboarding wizard."""

import pytest
from httpx import AsyncClient

from gpp.auth.deps import AuthContext
from gpp.config import settings
from gpp.middleware.exceptions import AccessDenied, UnauthenticatedAccess
from gpp.models.user import UserRole
from gpp.onboarding.guard import AccessGuard, parse_roles


@pytest.mark.unit
class TestAccessGuard:

    def test_anonymous_sent_to_login(self):
        guard = AccessGuard(login_path="/auth/login")
        with pytest.raises(UnauthenticatedAccess) as exc_info:
            guard.check(None)
        assert exc_info.value.redirect_to == "/auth/login"
        assert exc_info.value.status_code == 401

    def test_any_role_when_unrestricted(self):
        guard = AccessGuard()
        for role in UserRole:
            context = AuthContext(user_id="u1", full_name=None, role=role)
            assert guard.check(context) is context

    def test_role_outside_required_set_denied(self):
        guard = AccessGuard(required_roles=[UserRole.ADMIN], unauthorized_path="/unauthorized")
        with pytest.raises(AccessDenied) as exc_info:
            guard.check(AuthContext(user_id="u1", full_name="Member", role=UserRole.MEMBER))
        assert exc_info.value.redirect_to == "/unauthorized"
        assert exc_info.value.status_code == 403

    def test_role_inside_required_set_allowed(self):
        guard = AccessGuard(required_roles=[UserRole.ADMIN, UserRole.OPS_LEAD])
        context = AuthContext(user_id="u1", full_name=None, role=UserRole.OPS_LEAD)
        assert guard.check(context) is context

    def test_parse_roles(self):
        assert parse_roles("") == frozenset()
        assert parse_roles(" admin , legal_lead") == {UserRole.ADMIN, UserRole.LEGAL_LEAD}
        with pytest.raises(ValueError):
            parse_roles("superuser")


@pytest.mark.api
@pytest.mark.asyncio
class TestGuardedStart:

    async def test_no_token(self, client: AsyncClient, recording_writer):
        resp = await client.post("/api/onboarding/sessions")
        assert resp.status_code == 401
        error = resp.json()["error"]
        assert error["code"] == "UNAUTHENTICATED"
        assert error["details"]["redirect_to"] == "/auth/login"

    async def test_browser_is_redirected_to_login(self, client: AsyncClient, recording_writer):
        resp = await client.post(
            "/api/onboarding/sessions", headers={"Accept": "text/html"}
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/auth/login"

    async def test_garbage_token_is_anonymous(self, client: AsyncClient, recording_writer):
        resp = await client.post(
            "/api/onboarding/sessions", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401

    async def test_role_restriction(
        self, client: AsyncClient, auth_headers, monkeypatch, recording_writer
    ):
        monkeypatch.setattr(settings, "onboarding_roles", "admin")
        resp = await client.post("/api/onboarding/sessions", headers=auth_headers)
        assert resp.status_code == 403
        error = resp.json()["error"]
        assert error["code"] == "ACCESS_DENIED"
        assert error["details"]["redirect_to"] == "/unauthorized"

        resp = await client.post(
            "/api/onboarding/sessions", headers={**auth_headers, "Accept": "text/html"}
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/unauthorized"

    async def test_allowed_role(
        self, client: AsyncClient, make_user, headers_for, monkeypatch, recording_writer
    ):
        monkeypatch.setattr(settings, "onboarding_roles", "admin,attorney")
        user = await make_user(email="counsel@example.com", role=UserRole.ATTORNEY)
        resp = await client.post("/api/onboarding/sessions", headers=headers_for(user))
        assert resp.status_code == 201

    async def test_inactive_user(
        self, client: AsyncClient, make_user, headers_for, recording_writer
    ):
        user = await make_user(email="gone@example.com", is_active=False)
        resp = await client.post("/api/onboarding/sessions", headers=headers_for(user))
        assert resp.status_code == 401

    async def test_revoked_token(self, client: AsyncClient, auth_headers, recording_writer):
        resp = await client.post("/api/auth/logout", headers=auth_headers)
        assert resp.status_code == 204
        resp = await client.post("/api/onboarding/sessions", headers=auth_headers)
        assert resp.status_code == 401
        assert resp.json()["error"]["details"]["redirect_to"] == "/auth/login"
