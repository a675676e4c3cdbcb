"""
Import every model so Base.metadata knows all tables.

Used by the app lifespan, the CLI tools and the test suite before
create_all / drop_all.
"""

from flowmanager.app.db.session import Base
from flowmanager.app.models.user_role import UserRole
from flowmanager.app.models.user import User
from flowmanager.app.models.user_credential import UserCredential
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.project import Project
from flowmanager.app.models.project_assignment import ProjectAssignment
from flowmanager.app.models.task import Task
from flowmanager.app.models.work_log import WorkLog
from flowmanager.app.models.lookups import VacationType, VacationStatus, ExpenseCategory, ExpenseStatus
from flowmanager.app.models.vacation import Vacation
from flowmanager.app.models.project_finance import ProjectCost, FinancialReport
from flowmanager.app.models.expense import Expense
from flowmanager.app.models.audit_log import AuditLog

__all__ = [
    "Base",
    "UserRole",
    "User",
    "UserCredential",
    "UserProfile",
    "Project",
    "ProjectAssignment",
    "Task",
    "WorkLog",
    "VacationType",
    "VacationStatus",
    "ExpenseCategory",
    "ExpenseStatus",
    "Vacation",
    "ProjectCost",
    "FinancialReport",
    "Expense",
    "AuditLog",
]
