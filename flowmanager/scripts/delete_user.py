"""
Interactive user deletion.

Asks for an email until it matches an existing user, shows how many related
records will go with it and deletes only after an explicit "y".
"""

import asyncio
import sys
from sqlalchemy import select
from flowmanager.scripts.cli import load_session_factory, ask_yes_no


async def find_user_by_email(db, email: str):
    from flowmanager.app.models.user import User

    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def prompt_for_user(db):
    """Loop until the entered email is valid and belongs to a user."""
    from flowmanager.app.core.email import normalize_email, is_email_format_valid

    while True:
        email = normalize_email(input("Email of the user to delete: "))
        if not is_email_format_valid(email):
            print("❌ Invalid email format, try again.")
            continue
        user = await find_user_by_email(db, email)
        if user is None:
            print(f"❌ No user with email {email}, try again.")
            continue
        return user


def print_preview(user, preview: dict) -> None:
    print(f"\nUser: {user.email} (ID: {user.id})")
    print("Related records that will be deleted:")
    print(f"  - profile:             {'yes' if preview['profile'] else 'no'}")
    print(f"  - credentials:         {'yes' if preview['credential'] else 'no'}")
    print(f"  - project assignments: {preview['assignments']}")
    print(f"  - work logs:           {preview['work_logs']}")
    print(f"  - vacations:           {preview['vacations']}\n")


async def delete_user_interactively(session_factory) -> bool:
    """
    Run the prompt / preview / confirm / delete flow.

    Returns:
        True when the user was deleted, False when the operator aborted
    """
    from flowmanager.app.services.audit import log_admin_action, AuditAction
    from flowmanager.app.services.deletion import preview_user_deletion, delete_user

    async with session_factory() as db:
        user = await prompt_for_user(db)
        preview = await preview_user_deletion(db, user.id)
        print_preview(user, preview)

        if not ask_yes_no("Delete this user and all related records?"):
            print("ℹ️  Aborted, nothing was deleted.")
            return False

        outcome = await delete_user(db, user.id)
        await log_admin_action(
            db, None, AuditAction.USER_DELETED,
            target_id=user.id, target_email=outcome["email"],
            metadata={"removed": outcome["removed"], "source": "cli"},
        )
        print(f"✅ Deleted {outcome['email']}")
        return True


def main():
    session_factory = load_session_factory()
    try:
        asyncio.run(delete_user_interactively(session_factory))
    except KeyboardInterrupt:
        print("\nℹ️  Aborted, nothing was deleted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
