import re
from datetime import date, datetime

from taskmanager.errors import ValidationError
from taskmanager.models import PRIORITIES

PASSWORD_SPECIALS = "@$!%*#?&"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters with one letter, one number, and one special character"
)
INVALID_DUE_DATE_MESSAGE = "Invalid due date format"
INVALID_PRIORITY_MESSAGE = "Invalid priority. Must be high, medium, or low"


# -------------------------
# VALIDATORS
# -------------------------
def password_requirement_errors(password: str | None) -> list[str]:
    password = password or ""
    errors = []

    if len(password) < 8:
        errors.append("At least 8 characters")
    if not re.search(r"[A-Za-z]", password):
        errors.append("At least one letter")
    if not re.search(r"\d", password):
        errors.append("At least one number")
    if not any(ch in PASSWORD_SPECIALS for ch in password):
        errors.append(f"At least one special character ({PASSWORD_SPECIALS})")

    return errors


def validate_password(password: str | None) -> bool:
    return not password_requirement_errors(password)


def validate_email(email: str | None) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def validate_task_title(title: str | None) -> bool:
    return bool(title and title.strip())


# -------------------------
# PARSERS
# -------------------------
def parse_due_date(value: str | None) -> date | None:
    """
    Blank means "no due date". Accepts YYYY-MM-DD or an ISO date-time,
    keeping only its calendar date.
    """
    if value is None or not value.strip():
        return None

    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        raise ValidationError(INVALID_DUE_DATE_MESSAGE) from None


def parse_priority(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None

    priority = value.strip().lower()
    if priority not in PRIORITIES:
        raise ValidationError(INVALID_PRIORITY_MESSAGE)
    return priority
