"""UTC datetime utilities."""

from datetime import date, datetime, timezone

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def month_label(d: date) -> str:
    """date(2025, 1, 15) -> 'January 2025'."""
    return f"{_MONTHS[d.month - 1]} {d.year}"


def format_day(d: date) -> str:
    """date(2025, 1, 15) -> '15/01/2025'."""
    return d.strftime("%d/%m/%Y")


def iso_or_none(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None
