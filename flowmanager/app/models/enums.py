"""
Domain name enumerations.

Role, vacation and task names are stored as rows in lookup tables; these
enums carry the names the application logic relies on.
"""

import enum


class RoleName(str, enum.Enum):
    """
    User role names (rows of user_roles).

    Roles:
        ADMINISTRATOR: Full system access
        BOARD: Management board ("Zarząd")
        HR: Human resources
        ACCOUNTING: Finance department ("Księgowość")
        USER: Regular employee (default role)
    """
    ADMINISTRATOR = "Administrator"
    BOARD = "Zarząd"
    HR = "HR"
    ACCOUNTING = "Księgowość"
    USER = "Użytkownik"


# Roles allowed to supervise other employees
ADMIN_TIER_ROLES = (RoleName.ADMINISTRATOR, RoleName.BOARD)

# Roles allowed to manage accounts and read the audit trail
ACCOUNT_MANAGER_ROLES = (RoleName.ADMINISTRATOR, RoleName.BOARD, RoleName.HR)


class VacationTypeName(str, enum.Enum):
    """Vacation type names (rows of vacation_types)."""
    ANNUAL = "Wypoczynkowy"
    ON_DEMAND = "Na żądanie"
    SPECIAL = "Okolicznościowy"
    UNPAID = "Bezpłatny"
    SICK = "Chorobowy"


# Types that draw from the employee's vacation day balance
BALANCE_VACATION_TYPES = (VacationTypeName.ANNUAL, VacationTypeName.ON_DEMAND)


class VacationStatusName(str, enum.Enum):
    """Vacation status names (rows of vacation_statuses)."""
    PENDING = "Oczekujący"
    APPROVED = "Zatwierdzony"
    REJECTED = "Odrzucony"


class TaskStatus(str, enum.Enum):
    """Task status values stored in tasks.status."""
    TODO = "Do zrobienia"
    IN_PROGRESS = "W trakcie"
    DONE = "Zakończone"


# Role on project that a project may hold only once
PROJECT_MANAGER_ROLE = "Manager"

DEFAULT_EXPENSE_CATEGORIES = ("Sprzęt", "Oprogramowanie", "Podróże", "Szkolenia", "Inne")
DEFAULT_EXPENSE_STATUSES = ("Oczekujący", "Zatwierdzony", "Odrzucony", "Opłacony")
