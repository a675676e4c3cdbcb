"""
User, credential and profile management.

create_user() and update_user() run inside one database transaction, so the
user row, its credential and its profile commit or roll back together.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from flowmanager.app.core.config import settings
from flowmanager.app.core.email import normalize_email, is_email_format_valid
from flowmanager.app.core.exceptions import ValidationError, ConflictError, ResourceNotFoundError
from flowmanager.app.core.security import get_password_hash
from flowmanager.app.models.enums import ADMIN_TIER_ROLES
from flowmanager.app.models.user import User
from flowmanager.app.models.user_role import UserRole
from flowmanager.app.models.user_credential import UserCredential
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.project import Project
from flowmanager.app.models.project_assignment import ProjectAssignment
from flowmanager.app.services.lookups import get_role_by_name

logger = logging.getLogger("flowmanager.users")

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "position",
    "employment_type",
    "supervisor_id",
    "salary_rate",
    "vacation_days_total",
)

MIN_REGISTER_PASSWORD_LENGTH = 8

REGISTER_DEFAULTS = {
    "employment_type": "full-time",
    "salary_rate": Decimal("0"),
    "vacation_days_total": 20,
}


async def _check_email_available(db: AsyncSession, email: str, exclude_user_id: Optional[int] = None) -> None:
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db.execute(query)
    existing_id = result.scalars().first()
    if existing_id is not None:
        raise ConflictError(
            f"User with email {email} already exists (ID: {existing_id})",
            conflicting_id=existing_id,
        )


def _clean_email(email: Optional[str]) -> str:
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    if not is_email_format_valid(normalized):
        raise ValidationError("Invalid email format")
    return normalized


async def resolve_role(db: AsyncSession, role_id: Optional[int] = None, role_name: Optional[str] = None) -> UserRole:
    """
    Resolve a role by id, else by name (case-insensitive), else the default role.

    Raises:
        ValidationError: unknown role id or name
    """
    if role_id is not None:
        result = await db.execute(select(UserRole).where(UserRole.id == role_id))
        role = result.scalar_one_or_none()
        if role is None:
            raise ValidationError(f"Role with ID {role_id} does not exist")
        return role

    name = (role_name or "").strip() or settings.default_role_name
    role = await get_role_by_name(db, name)
    if role is None:
        raise ValidationError(f"Role '{name}' does not exist")
    return role


async def validate_supervisor(db: AsyncSession, supervisor_id: int) -> User:
    """
    A supervisor must be an existing user holding an administrative-tier role.

    Raises:
        ValidationError: otherwise
    """
    result = await db.execute(
        select(User, UserRole.name)
        .outerjoin(UserRole, User.role_id == UserRole.id)
        .where(User.id == supervisor_id)
    )
    row = result.first()
    if row is None:
        raise ValidationError(f"Supervisor with ID {supervisor_id} does not exist")
    supervisor, role_name = row
    if role_name not in [r.value for r in ADMIN_TIER_ROLES]:
        raise ValidationError(
            f"User with ID {supervisor_id} cannot be a supervisor "
            f"(required role: {', '.join(r.value for r in ADMIN_TIER_ROLES)})"
        )
    return supervisor


def _profile_values(profile: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}


async def create_user(
    db: AsyncSession,
    email: Optional[str],
    password: Optional[str],
    role_id: Optional[int] = None,
    role_name: Optional[str] = None,
    profile: Optional[Dict[str, Any]] = None,
) -> tuple[User, Optional[UserProfile]]:
    """
    Create a user, its hashed credential and (optionally) its profile.

    Args:
        email: Any case, surrounding whitespace allowed; stored normalized
        password: Plaintext, hashed with bcrypt before storage
        role_id / role_name: Role selection, see resolve_role()
        profile: Profile column values (PROFILE_FIELDS)

    Returns:
        (user, profile or None)

    Raises:
        ValidationError: bad email format, missing password, unknown role, bad supervisor
        ConflictError: email already used; details carry the existing user id
    """
    normalized = _clean_email(email)
    if not password:
        raise ValidationError("Password is required")

    await _check_email_available(db, normalized)
    role = await resolve_role(db, role_id, role_name)

    profile_values = _profile_values(profile)
    if profile_values.get("supervisor_id") is not None:
        await validate_supervisor(db, profile_values["supervisor_id"])

    new_profile = None
    try:
        user = User(email=normalized, role_id=role.id)
        db.add(user)
        await db.flush()

        db.add(UserCredential(user_id=user.id, password_hash=get_password_hash(password)))

        if profile is not None:
            new_profile = UserProfile(user_id=user.id, **profile_values)
            db.add(new_profile)

        await db.commit()
    except IntegrityError:
        await db.rollback()
        # Lost a race with a concurrent insert of the same email
        raise ConflictError(f"User with email {normalized} already exists")
    except Exception:
        await db.rollback()
        raise

    await db.refresh(user)
    logger.info("Created user %s (ID: %s, role: %s)", user.email, user.id, role.name)
    return user, new_profile


async def register_user(db: AsyncSession, data: Dict[str, Any]) -> User:
    """
    Self-service registration.

    Requires email, password (min 8 characters), first and last name and
    position; the remaining profile fields get REGISTER_DEFAULTS.
    """
    required = ("email", "password", "first_name", "last_name", "position")
    missing = [field for field in required if not (data.get(field) or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})

    if len(data["password"]) < MIN_REGISTER_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_REGISTER_PASSWORD_LENGTH} characters long")

    profile = dict(REGISTER_DEFAULTS)
    profile.update(
        first_name=data["first_name"].strip(),
        last_name=data["last_name"].strip(),
        position=data["position"].strip(),
    )
    user, _ = await create_user(db, data["email"], data["password"], profile=profile)
    return user


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    email: Optional[str] = None,
    password: Optional[str] = None,
    role_id: Optional[int] = None,
    role_name: Optional[str] = None,
    profile: Optional[Dict[str, Any]] = None,
) -> User:
    """
    Update a user and upsert its profile.

    Only the arguments that are not None are applied. All checks run before
    any change is written.

    Raises:
        ResourceNotFoundError: no such user
        ValidationError / ConflictError: as in create_user()
    """
    user = await get_user_or_404(db, user_id)

    new_email = None
    if email is not None:
        new_email = _clean_email(email)
        if new_email != user.email:
            await _check_email_available(db, new_email, exclude_user_id=user.id)

    role = None
    if role_id is not None or (role_name or "").strip():
        role = await resolve_role(db, role_id, role_name)

    profile_values = _profile_values(profile)
    if profile_values.get("supervisor_id") is not None:
        if profile_values["supervisor_id"] == user.id:
            raise ValidationError("A user cannot be their own supervisor")
        await validate_supervisor(db, profile_values["supervisor_id"])

    now = datetime.now(timezone.utc)
    try:
        if new_email is not None:
            user.email = new_email
        if role is not None:
            user.role_id = role.id

        if password:
            result = await db.execute(select(UserCredential).where(UserCredential.user_id == user.id))
            credential = result.scalar_one_or_none()
            if credential is None:
                db.add(UserCredential(user_id=user.id, password_hash=get_password_hash(password)))
            else:
                credential.password_hash = get_password_hash(password)
                credential.password_updated_at = now

        if profile is not None:
            result = await db.execute(select(UserProfile).where(UserProfile.user_id == user.id))
            existing_profile = result.scalar_one_or_none()
            if existing_profile is None:
                db.add(UserProfile(user_id=user.id, **profile_values))
            else:
                for field, value in profile_values.items():
                    setattr(existing_profile, field, value)

        user.updated_at = now
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"User with email {new_email} already exists")
    except Exception:
        await db.rollback()
        raise

    await db.refresh(user)
    logger.info("Updated user %s (ID: %s)", user.email, user.id)
    return user


def _profile_dict(profile: Optional[UserProfile]) -> Optional[dict]:
    if profile is None:
        return None
    data = {"id": profile.id, "user_id": profile.user_id}
    data.update({field: getattr(profile, field) for field in PROFILE_FIELDS})
    return data


def _user_dict(user: User, role_name: Optional[str], profile: Optional[UserProfile]) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "role_id": user.role_id,
        "role_name": role_name,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "profile": _profile_dict(profile),
    }


def _user_query():
    return (
        select(User, UserRole.name, UserProfile)
        .outerjoin(UserRole, User.role_id == UserRole.id)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
    )


async def get_user_detail(db: AsyncSession, user_id: int) -> dict:
    """User with role name and profile, or 404."""
    result = await db.execute(_user_query().where(User.id == user_id))
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("User", user_id)
    return _user_dict(*row)


async def list_users(
    db: AsyncSession,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
    role_name: Optional[str] = None,
    employment_type: Optional[str] = None,
) -> list[dict]:
    """Users joined with role and profile; every filter is a case-insensitive substring match."""
    query = _user_query()
    if first_name:
        query = query.where(UserProfile.first_name.ilike(f"%{first_name}%"))
    if last_name:
        query = query.where(UserProfile.last_name.ilike(f"%{last_name}%"))
    if email:
        query = query.where(User.email.ilike(f"%{email}%"))
    if role_name:
        query = query.where(UserRole.name.ilike(f"%{role_name}%"))
    if employment_type:
        query = query.where(UserProfile.employment_type.ilike(f"%{employment_type}%"))

    result = await db.execute(query.order_by(User.id))
    return [_user_dict(*row) for row in result.all()]


async def list_supervisors(db: AsyncSession) -> list[dict]:
    """Users eligible as supervisors (administrative tier)."""
    result = await db.execute(
        select(User.id, User.email, UserProfile.first_name, UserProfile.last_name, UserRole.name)
        .join(UserRole, User.role_id == UserRole.id)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .where(UserRole.name.in_([r.value for r in ADMIN_TIER_ROLES]))
        .order_by(UserProfile.last_name, User.id)
    )
    return [
        {"id": id_, "email": email, "first_name": first, "last_name": last, "role_name": role}
        for id_, email, first, last, role in result.all()
    ]


async def list_employees(db: AsyncSession) -> list[dict]:
    """Users with profile fields and the supervisor's full name."""
    supervisor_profile = aliased(UserProfile)
    result = await db.execute(
        select(User, UserRole.name, UserProfile, supervisor_profile.first_name, supervisor_profile.last_name)
        .outerjoin(UserRole, User.role_id == UserRole.id)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .outerjoin(supervisor_profile, supervisor_profile.user_id == UserProfile.supervisor_id)
        .order_by(User.id)
    )
    employees = []
    for user, role_name, profile, sup_first, sup_last in result.all():
        supervisor_name = " ".join(part for part in (sup_first, sup_last) if part) or None
        item = {"id": user.id, "email": user.email, "role_name": role_name, "supervisor_name": supervisor_name}
        if profile is not None:
            item.update({field: getattr(profile, field) for field in PROFILE_FIELDS})
        employees.append(item)
    return employees


async def list_user_projects(db: AsyncSession, user_id: int) -> list[dict]:
    """Projects the user is assigned to."""
    await get_user_or_404(db, user_id)
    result = await db.execute(
        select(ProjectAssignment, Project)
        .join(Project, ProjectAssignment.project_id == Project.id)
        .where(ProjectAssignment.user_id == user_id)
        .order_by(Project.id)
    )
    return [
        {
            "project_id": project.id,
            "name": project.name,
            "progress": project.progress,
            "is_archived": project.is_archived,
            "role_on_project": assignment.role_on_project,
            "assigned_at": assignment.assigned_at,
        }
        for assignment, project in result.all()
    ]
