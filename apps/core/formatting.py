"""Value parsing and display helpers shared by the record types and templates."""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def format_thousands(value) -> str:
    """Indonesian grouping: ``92714567`` -> ``92.714.567``."""
    amount = to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{int(amount):,}".replace(",", ".")


def format_rupiah(value) -> str:
    return f"Rp {format_thousands(value)}"


def parse_api_datetime(value) -> Optional[datetime]:
    """Accept RFC 3339 timestamps as well as bare ``YYYY-MM-DD`` dates."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.get_current_timezone())
    text = str(value).strip()
    parsed = parse_datetime(text)
    if parsed is None:
        day = parse_date(text[:10]) if len(text) >= 10 else None
        if day is None:
            return None
        parsed = datetime(day.year, day.month, day.day)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())
    return parsed


def to_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
