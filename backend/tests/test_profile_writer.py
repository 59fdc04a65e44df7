"""SqlProfileWriter tests."""

import asyncio
from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from gpp.database import async_session
from gpp.models.user import Availability, User
from gpp.onboarding.controller import ProfileFields, WizardState
from gpp.onboarding.persistence import PersistenceFailure, SqlProfileWriter
from gpp.onboarding.steps import StepKind
from gpp.onboarding.wizard import OnboardingWizard

WRITTEN_AT = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


class _StubSession:
    """Async session stand-in whose `execute` is supplied by the test."""

    def __init__(self, execute):
        self._execute = execute
        self.rolled_back = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, statement):
        return await self._execute(statement)

    async def commit(self):
        pass

    async def rollback(self):
        self.rolled_back = True


@pytest.mark.asyncio
class TestSqlProfileWriter:

    async def test_updates_user_row(self, db_session: AsyncSession, test_user: User):
        fields = ProfileFields(
            bio="Street medic",
            skills=["First Aid"],
            interests=["Civil Rights", "Immigration"],
            availability=Availability.ALWAYS,
        )
        await SqlProfileWriter(async_session).write(test_user.id, fields, WRITTEN_AT)

        result = await db_session.execute(
            select(User)
            .where(User.id == test_user.id)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one()
        assert user.onboarded is True
        assert user.bio == "Street medic"
        assert user.skills == ["First Aid"]
        assert user.interests == ["Civil Rights", "Immigration"]
        assert user.availability == "always"
        assert user.updated_at.replace(tzinfo=timezone.utc) == WRITTEN_AT

    async def test_missing_user(self, db_schema):
        with pytest.raises(PersistenceFailure):
            await SqlProfileWriter(async_session).write("no-such-user", ProfileFields(), WRITTEN_AT)

    async def test_database_error(self):
        async def _boom(statement):
            raise OperationalError("UPDATE users", {}, Exception("connection refused"))

        session = _StubSession(_boom)
        with pytest.raises(PersistenceFailure):
            await SqlProfileWriter(lambda: session).write("user-1", ProfileFields(), WRITTEN_AT)
        assert session.rolled_back

    async def test_timeout(self):
        async def _hang(statement):
            await asyncio.sleep(5)

        writer = SqlProfileWriter(lambda: _StubSession(_hang), timeout=0.05)
        with pytest.raises(PersistenceFailure, match="timed out"):
            await writer.write("user-1", ProfileFields(), WRITTEN_AT)

    async def test_driver_error_becomes_persistence_failure(self):
        async def _refused(statement):
            raise ConnectionRefusedError(111, "Connect call failed")

        with pytest.raises(PersistenceFailure) as exc_info:
            await SqlProfileWriter(lambda: _StubSession(_refused)).write(
                "user-1", ProfileFields(), WRITTEN_AT
            )
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)

    async def test_zero_timeout_is_enforced(self):
        async def _hang(statement):
            await asyncio.sleep(5)

        writer = SqlProfileWriter(lambda: _StubSession(_hang), timeout=0)
        with pytest.raises(PersistenceFailure, match="timed out"):
            await writer.write("user-1", ProfileFields(), WRITTEN_AT)


@pytest.mark.asyncio
class TestWizardWithUnreachableDatabase:

    async def test_next_still_advances(self, caplog):
        async def _refused(statement):
            raise ConnectionRefusedError(111, "Connect call failed")

        writer = SqlProfileWriter(lambda: _StubSession(_refused))
        wizard = OnboardingWizard(WizardState(), writer, "user-1")
        await wizard.next()
        with caplog.at_level("ERROR", logger="gpp.onboarding"):
            step = await wizard.next()

        assert step.kind is StepKind.SECURITY
        assert wizard.state.profile_saved is False
        assert "Error updating profile" in caplog.text
