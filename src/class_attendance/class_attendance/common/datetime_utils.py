from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string into a date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def require_iso_date(value: Any) -> date:
    text = str(value or "").strip()
    # strptime accepts "2024-3-1"; the wire format requires zero padding
    if len(text) != 10:
        raise ValidationError("Formato de fecha inválido. Use YYYY-MM-DD.")
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError("Formato de fecha inválido. Use YYYY-MM-DD.")


def to_iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    return value


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()
