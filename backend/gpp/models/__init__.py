"""Aggregate model imports for Alembic auto-detection."""

from gpp.models.user import Availability, User, UserRole  # noqa: F401
from gpp.models.onboarding_session import OnboardingSession  # noqa: F401
