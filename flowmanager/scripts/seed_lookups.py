"""
Create missing tables and insert the lookup rows (roles, vacation types and
statuses, expense categories and statuses). Safe to run repeatedly.
"""

import asyncio
from flowmanager.scripts.cli import load_session_factory, prepare_database


async def seed(session_factory) -> dict:
    added = await prepare_database(session_factory)
    for table, count in added.items():
        print(f"✅ {table}: {count} added")
    return added


def main():
    asyncio.run(seed(load_session_factory()))


if __name__ == "__main__":
    main()
