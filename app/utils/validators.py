"""Input checks shared by the record services."""
import re
from datetime import date
from typing import Optional

from app.core.errors import ValidationError

# local@domain.tld with no whitespace or extra '@'; permissive on purpose
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def clean(value: Optional[str]) -> Optional[str]:
    """Trim a string input; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD, raising ValidationError for anything else."""
    try:
        if len(value) != 10:
            raise ValueError(value)
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("date must be an ISO calendar date (YYYY-MM-DD)")
