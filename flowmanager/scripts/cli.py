"""
Shared plumbing for the command line tools.

The tools need DATABASE_URL (environment or .env); without it they stop
with a readable message instead of a settings traceback.
"""

import sys
from pydantic import ValidationError


def load_session_factory():
    """Return the configured AsyncSessionLocal, or exit when DATABASE_URL is missing."""
    try:
        from flowmanager.app.db.session import AsyncSessionLocal
    except ValidationError:
        print("❌ DATABASE_URL is not set. Export it or add it to .env and try again.")
        sys.exit(1)
    return AsyncSessionLocal


async def prepare_database(session_factory) -> dict:
    """Create missing tables and lookup rows. Returns the seed_lookups() counts."""
    from flowmanager.app.db.session import engine
    from flowmanager.app.models.registry import Base
    from flowmanager.app.services.lookups import seed_lookups

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with session_factory() as db:
        return await seed_lookups(db)


def ask_yes_no(question: str) -> bool:
    """Anything but y/yes (case-insensitive) counts as no."""
    answer = input(f"{question} (y/N): ").strip().lower()
    return answer in ("y", "yes")
