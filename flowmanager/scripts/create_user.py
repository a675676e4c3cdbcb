"""
Interactive creation of a single user.

Prompts for email, role (Enter for the default role), password and an
optional profile, then creates everything in one transaction.
"""

import asyncio
import getpass
import sys
from decimal import Decimal, InvalidOperation
from flowmanager.scripts.cli import load_session_factory, prepare_database, ask_yes_no


async def prompt_for_email(db) -> str:
    from flowmanager.app.core.email import normalize_email, is_email_format_valid
    from flowmanager.scripts.delete_user import find_user_by_email

    while True:
        email = normalize_email(input("Email: "))
        if not is_email_format_valid(email):
            print("❌ Invalid email format, try again.")
            continue
        if await find_user_by_email(db, email) is not None:
            print(f"❌ User with email {email} already exists, try again.")
            continue
        return email


async def prompt_for_role(db):
    from flowmanager.app.core.config import settings
    from flowmanager.app.services.lookups import get_role_by_name, list_roles

    names = ", ".join(role.name for role in await list_roles(db))
    while True:
        name = input(f"Role [{names}] (Enter = {settings.default_role_name}): ").strip()
        role = await get_role_by_name(db, name or settings.default_role_name)
        if role is None:
            print(f"❌ Role '{name}' does not exist, try again.")
            continue
        return role


def prompt_for_password() -> str:
    while True:
        password = getpass.getpass("Password: ")
        if not password:
            print("❌ Password is required.")
            continue
        if getpass.getpass("Repeat password: ") != password:
            print("❌ Passwords do not match, try again.")
            continue
        return password


def prompt_for_profile() -> dict:
    profile = {
        "first_name": input("First name: ").strip() or None,
        "last_name": input("Last name: ").strip() or None,
        "position": input("Position: ").strip() or None,
        "employment_type": input("Employment type (Enter = full-time): ").strip() or "full-time",
    }
    rate = input("Hourly salary rate (Enter = 0): ").strip()
    try:
        profile["salary_rate"] = Decimal(rate) if rate else Decimal("0")
    except InvalidOperation:
        print("⚠️  Not a number, using 0.")
        profile["salary_rate"] = Decimal("0")
    days = input("Vacation days per year (Enter = 20): ").strip()
    profile["vacation_days_total"] = int(days) if days.isdigit() else 20
    return profile


async def create_user_interactively(session_factory):
    from flowmanager.app.services.audit import log_admin_action, AuditAction
    from flowmanager.app.services.users import create_user

    async with session_factory() as db:
        email = await prompt_for_email(db)
        role = await prompt_for_role(db)
        password = prompt_for_password()
        profile = prompt_for_profile() if ask_yes_no("Add a profile?") else None

        user, _ = await create_user(db, email, password, role_id=role.id, profile=profile)
        await log_admin_action(
            db, None, AuditAction.USER_CREATED,
            target_id=user.id, target_email=user.email, metadata={"source": "cli"},
        )
        print(f"✅ Created {user.email} (ID: {user.id}, role: {role.name})")
        return user


def main():
    session_factory = load_session_factory()

    async def run():
        await prepare_database(session_factory)
        await create_user_interactively(session_factory)

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nℹ️  Aborted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
