"""
Print every user with its role.
"""

import asyncio
from flowmanager.scripts.cli import load_session_factory


async def list_all_users(session_factory) -> list[dict]:
    from flowmanager.app.services.users import list_users

    async with session_factory() as db:
        users = await list_users(db)

    if not users:
        print("ℹ️  No users in the database.")
        return users

    print(f"{'ID':>5}  {'Email':<40} {'Role':<15} Name")
    for user in users:
        profile = user["profile"] or {}
        name = " ".join(part for part in (profile.get("first_name"), profile.get("last_name")) if part)
        print(f"{user['id']:>5}  {user['email']:<40} {user['role_name'] or '-':<15} {name}")
    print(f"\nTotal: {len(users)}")
    return users


def main():
    asyncio.run(list_all_users(load_session_factory()))


if __name__ == "__main__":
    main()
