"""
Security guards for role-based access control.

Any valid session may use the API; account management and the audit
trail are additionally limited to ACCOUNT_MANAGER_ROLES.
"""

from typing import Iterable
from fastapi import Depends
from flowmanager.app.models.enums import RoleName, ACCOUNT_MANAGER_ROLES
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.core.exceptions import InsufficientPermissionsError


def require_role(allowed_roles: Iterable[RoleName]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/users/{user_id}")
        async def delete_user(current_user: dict = Depends(require_role([RoleName.ADMINISTRATOR]))):
            ...

    Args:
        allowed_roles: RoleName values that may access the endpoint

    Returns:
        FastAPI dependency function that validates the session role

    Raises:
        InsufficientPermissionsError (403) if the user's current role is not in allowed_roles
    """
    allowed = tuple(allowed_roles)

    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_role_str = current_user.get("role")

        if not user_role_str:
            raise InsufficientPermissionsError("User has no role assigned")

        try:
            user_role = RoleName(user_role_str)
        except ValueError:
            raise InsufficientPermissionsError(f"Unknown role: {user_role_str}")

        if user_role not in allowed:
            raise InsufficientPermissionsError(
                f"Access denied. Required role: {', '.join([r.value for r in allowed])}",
                details={"role": user_role.value},
            )

        return current_user

    return role_checker


require_account_manager = require_role(ACCOUNT_MANAGER_ROLES)
