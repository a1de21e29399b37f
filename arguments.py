"""Validate and normalize primitive tool arguments before they reach YNAB."""

import re
from datetime import datetime
from typing import Any, Dict, Iterable

DATE_FIELDS = ("date", "since_date")
MILLIUNIT_FIELDS = ("amount", "balance", "budgeted")
MAX_LIMIT = 500

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ArgumentError(ValueError):
    """A tool argument is missing or malformed."""


def validate_date(value: Any, field: str = "date") -> str:
    """Accept ``YYYY-MM-DD`` strings naming a real calendar date."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ArgumentError(f"Invalid date format for {field}: {value}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ArgumentError(
            f"Invalid date for {field}: {value}. Not a valid calendar date"
        ) from None
    return value


def validate_month(value: Any) -> str:
    """Accept an ISO month date (``2025-01-01``) or the literal ``current``."""
    if value == "current":
        return value
    return validate_date(value, "month")


def validate_milliunits(value: Any, field: str = "amount") -> int:
    """Accept a number of milliunits and return it as an int."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArgumentError(f"Invalid {field}: {value}. Expected a number of milliunits")
    if isinstance(value, float):
        if not value.is_integer():
            raise ArgumentError(
                f"Invalid {field}: {value}. Milliunit amounts must be whole numbers "
                "(1000 milliunits = $1)"
            )
        value = int(value)
    return value


def validate_limit(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_LIMIT:
        raise ArgumentError(f"Invalid limit: {value}. Expected an integer from 1 to {MAX_LIMIT}")
    return value


def normalize_arguments(
    arguments: Dict[str, Any],
    required: Iterable[str] = (),
    default_budget_id: str = "last-used",
) -> Dict[str, Any]:
    """Return a validated copy of ``arguments``.

    ``budget_id`` falls back to ``default_budget_id``. Dates, months,
    milliunit amounts and ``limit`` are checked, and a null ``limit`` is
    dropped so the summarizer default applies. Any other argument is
    passed through untouched.
    """
    normalized = dict(arguments or {})
    if not normalized.get("budget_id"):
        normalized["budget_id"] = default_budget_id

    missing = [name for name in required if normalized.get(name) is None]
    if missing:
        raise ArgumentError(f"Missing required argument(s): {', '.join(missing)}")

    for field in DATE_FIELDS:
        if normalized.get(field) is not None:
            normalized[field] = validate_date(normalized[field], field)
    if normalized.get("month") is not None:
        normalized["month"] = validate_month(normalized["month"])
    for field in MILLIUNIT_FIELDS:
        if normalized.get(field) is not None:
            normalized[field] = validate_milliunits(normalized[field], field)
    if normalized.get("limit") is None:
        normalized.pop("limit", None)
    else:
        normalized["limit"] = validate_limit(normalized["limit"])

    return normalized
