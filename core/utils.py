# core/utils.py

"""
Repository for program-wide utilities.
"""

import datetime
import uuid

# school years start in September
SCHOOL_YEAR_START_MONTH = 9


def generate_uuid() -> str:
    return str(uuid.uuid4())


def now() -> datetime.datetime:
    return datetime.datetime.now()


def normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def current_school_year(today: datetime.date | None = None) -> str:
    """
    Returns the school year label for a date, e.g. "2025/2026".

    Args:
        today (datetime.date | None): The reference date. Defaults to the current date.

    Returns:
        The label "<start>/<start + 1>", where the year starts on September 1st.
    """
    today = today or datetime.date.today()

    if today.month >= SCHOOL_YEAR_START_MONTH:
        return f"{today.year}/{today.year + 1}"

    return f"{today.year - 1}/{today.year}"


def parse_datetime(value: str | datetime.datetime | None) -> datetime.datetime | None:
    if value is None or isinstance(value, datetime.datetime):
        return value

    return datetime.datetime.fromisoformat(value)


def parse_date(value: str | datetime.date | None) -> datetime.date | None:
    if value is None:
        return None

    if isinstance(value, datetime.datetime):
        return value.date()

    if isinstance(value, datetime.date):
        return value

    return datetime.date.fromisoformat(value)
