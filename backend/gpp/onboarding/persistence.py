"""Profile writer: the boundary that stores onboarding answers on the user row.

The profile step's "Continue" issues exactly one partial update:

    bio, skills, interests, availability, onboarded=True, updated_at

`SqlProfileWriter` opens its own session for the write, so the update
commits (or fails) independently of the request that triggered it.
Any failure surfaces as `PersistenceFailure`; deciding what to do about
it is the caller's job.
"""

from __future__ import annotations

import abc
import asyncio
import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gpp.models.user import User
from gpp.onboarding.controller import ProfileFields

logger = logging.getLogger(__name__)


class PersistenceFailure(Exception):
    """The profile write was rejected, failed, or timed out."""


class ProfileWriter(abc.ABC):
    @abc.abstractmethod
    async def write(self, user_id: str, fields: ProfileFields, timestamp: datetime) -> None:
        ...


class SqlProfileWriter(ProfileWriter):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: float | None = None,
    ):
        self.session_factory = session_factory
        self.timeout = timeout

    async def _update(self, user_id: str, values: dict) -> None:
        async with self.session_factory() as session:
            try:
                result = await session.execute(
                    update(User).where(User.id == user_id).values(**values)
                )
                matched = result.rowcount
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        if matched == 0:
            raise PersistenceFailure(f"No user row for id {user_id}")

    async def write(self, user_id: str, fields: ProfileFields, timestamp: datetime) -> None:
        values = {**fields.to_dict(), "onboarded": True, "updated_at": timestamp}
        try:
            if self.timeout is not None:
                await asyncio.wait_for(self._update(user_id, values), self.timeout)
            else:
                await self._update(user_id, values)
        except PersistenceFailure:
            raise
        except asyncio.TimeoutError as exc:
            raise PersistenceFailure(
                f"Profile write timed out after {self.timeout}s"
            ) from exc
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Profile write failed: {exc}") from exc
        except Exception as exc:
            # Driver-level errors (e.g. connection refused) escape SQLAlchemy's wrapping
            raise PersistenceFailure(f"Profile write failed: {exc!r}") from exc
        logger.info("Stored onboarding profile for user %s", user_id)
