"""Management CLI.

Usage:
    python -m gpp.cli create-tables             # Create any missing tables
    python -m gpp.cli list-users                # Show users and onboarding status
    python -m gpp.cli reset-onboarding EMAIL    # Send a user back through onboarding
"""

import sys

from sqlalchemy import create_engine, delete, select, update

from gpp.config import settings
from gpp.database import Base
from gpp.models import OnboardingSession, User


def _engine():
    return create_engine(settings.database_url_sync)


def create_tables():
    Base.metadata.create_all(_engine())
    print("Tables created.")


def list_users():
    with _engine().connect() as conn:
        rows = conn.execute(
            select(User.email, User.role, User.onboarded).order_by(User.created_at)
        ).all()
    for email, role, onboarded in rows:
        print(f"  {email:<40} {role.value:<12} {'onboarded' if onboarded else 'pending'}")
    print(f"\n{len(rows)} user(s)")


def reset_onboarding(email: str):
    with _engine().begin() as conn:
        user_id = conn.execute(select(User.id).where(User.email == email)).scalar_one_or_none()
        if user_id is None:
            print(f"No user with email {email}")
            return
        conn.execute(update(User).where(User.id == user_id).values(onboarded=False))
        conn.execute(delete(OnboardingSession).where(OnboardingSession.user_id == user_id))
    print(f"  Reset onboarding for {email}")


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "create-tables":
        create_tables()
    elif cmd == "list-users":
        list_users()
    elif cmd == "reset-onboarding" and len(sys.argv) > 2:
        reset_onboarding(sys.argv[2])
    else:
        print("Usage: python -m gpp.cli [create-tables|list-users|reset-onboarding EMAIL]")
