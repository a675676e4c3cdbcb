"""
Email utilities: normalization and format validation.

Syntax checks are delegated to email-validator (the library behind pydantic's
EmailStr); the stricter business rules are applied on top of it.
"""

from email_validator import validate_email, EmailNotValidError

MAX_EMAIL_LENGTH = 255  # matches users.email String(255)


def normalize_email(value: str) -> str:
    """Canonical form used for storage and lookup: trimmed and lowercased."""
    return (value or "").strip().lower()


def is_email_format_valid(email: str) -> bool:
    """
    Business-grade email check.

    Requires local@domain.tld with a TLD of at least two letters. On top of
    the RFC syntax check, double dots and a leading or trailing dot are
    rejected anywhere in the address. No DNS lookups are made.
    """
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    if ".." in email or email.startswith(".") or email.endswith("."):
        return False

    try:
        validated = validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False

    tld = validated.ascii_domain.rsplit(".", 1)[-1]
    return len(tld) >= 2 and tld.isalpha()
