"""
Database seeding script for test users.

Creates ten employees with profiles, all sharing TEST_PASSWORD. The first
one is a board member and becomes the supervisor of the other nine.
Users whose email already exists are skipped, so the script can be re-run.
"""

import asyncio
from decimal import Decimal
from flowmanager.scripts.cli import load_session_factory, prepare_database

TEST_PASSWORD = "Test123!"

TEST_USERS = [
    ("jan.kowalski@test.pl", "Jan", "Kowalski", "Kierownik Projektu", "full-time", "150.00", 26),
    ("anna.nowak@test.pl", "Anna", "Nowak", "Senior Developer", "full-time", "180.00", 26),
    ("piotr.wisniewski@test.pl", "Piotr", "Wiśniewski", "Junior Developer", "part-time", "80.00", 20),
    ("maria.wojcik@test.pl", "Maria", "Wójcik", "UX Designer", "full-time", "120.00", 26),
    ("tomasz.kaminski@test.pl", "Tomasz", "Kamiński", "DevOps Engineer", "full-time", "160.00", 26),
    ("katarzyna.lewandowska@test.pl", "Katarzyna", "Lewandowska", "QA Tester", "contract", "60.00", 0),
    ("michal.zielinski@test.pl", "Michał", "Zieliński", "Backend Developer", "full-time", "140.00", 26),
    ("agnieszka.szymanska@test.pl", "Agnieszka", "Szymańska", "Frontend Developer", "part-time", "90.00", 20),
    ("krzysztof.wozniak@test.pl", "Krzysztof", "Woźniak", "Database Administrator", "full-time", "155.00", 26),
    ("ewa.kowalczyk@test.pl", "Ewa", "Kowalczyk", "Business Analyst", "full-time", "135.00", 26),
]


async def seed_test_users(session_factory) -> dict:
    """
    Create the test users.

    Returns:
        {"created": [...emails], "skipped": [...emails], "failed": [...emails]}
    """
    from flowmanager.app.core.exceptions import AppException
    from flowmanager.app.models.enums import RoleName
    from flowmanager.app.services.users import create_user
    from flowmanager.scripts.delete_user import find_user_by_email

    summary = {"created": [], "skipped": [], "failed": []}
    supervisor_id = None

    async with session_factory() as db:
        print("🌱 Starting test user seeding...")

        for index, (email, first, last, position, employment, rate, days) in enumerate(TEST_USERS):
            is_supervisor = index == 0
            existing = await find_user_by_email(db, email)
            if existing is not None:
                print(f"⊘ Skipped: {first} {last} ({email}) - already exists")
                if is_supervisor:
                    supervisor_id = existing.id
                summary["skipped"].append(email)
                continue

            profile = {
                "first_name": first,
                "last_name": last,
                "position": position,
                "employment_type": employment,
                "supervisor_id": None if is_supervisor else supervisor_id,
                "salary_rate": Decimal(rate),
                "vacation_days_total": days,
            }
            role_name = RoleName.BOARD.value if is_supervisor else RoleName.USER.value
            try:
                user, _ = await create_user(db, email, TEST_PASSWORD, role_name=role_name, profile=profile)
            except AppException as exc:
                print(f"✗ Failed to create: {email} - {exc.message}")
                summary["failed"].append(email)
                continue

            if is_supervisor:
                supervisor_id = user.id
            print(f"✅ Created: {first} {last} ({email})")
            summary["created"].append(email)

    print("\n--- Summary ---")
    print(f"Created: {len(summary['created'])}")
    print(f"Skipped: {len(summary['skipped'])}")
    print(f"Failed:  {len(summary['failed'])}")
    print(f"\nPassword for all test users: {TEST_PASSWORD}")
    return summary


def main():
    session_factory = load_session_factory()

    async def run():
        await prepare_database(session_factory)
        await seed_test_users(session_factory)

    asyncio.run(run())


if __name__ == "__main__":
    main()
