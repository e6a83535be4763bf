"""
Numeric and date helpers for report generation

Monetary and quantity columns arrive as ``Decimal`` (or ``None``) from the
ORM. Everything is coerced once with ``to_decimal`` and kept at full
precision until the CSV projection formats it. All datetimes are compared as
naive UTC so SQLite (naive) and PostgreSQL (aware) rows mix safely.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, TypeVar

T = TypeVar("T")
A = TypeVar("A")

ZERO = Decimal("0")
ONE_DAY = timedelta(days=1)


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric column value to Decimal; None reads as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def safe_divide(numerator: Any, denominator: Any) -> Decimal:
    """Divide, returning 0 when the denominator is 0."""
    denominator = to_decimal(denominator)
    if denominator == 0:
        return ZERO
    return to_decimal(numerator) / denominator


def round_half_up(value: Any) -> int:
    """Round to the nearest integer with halves going toward +infinity."""
    return int((to_decimal(value) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def quantize(value: Any, places: int = 2) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_floor(later: datetime, earlier: datetime) -> int:
    """Whole days from `earlier` to `later`, rounded down."""
    return (to_utc_naive(later) - to_utc_naive(earlier)) // ONE_DAY


def days_ceil(later: datetime, earlier: datetime) -> int:
    """Whole days from `earlier` to `later`, rounded up."""
    return -((to_utc_naive(earlier) - to_utc_naive(later)) // ONE_DAY)


def end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def iso_day(value: Optional[datetime]) -> Optional[str]:
    """UTC calendar day as YYYY-MM-DD."""
    if value is None:
        return None
    return to_utc_naive(value).date().isoformat()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO date or datetime query parameter.

    Bare dates read as midnight UTC. Raises ValueError on malformed input.
    """
    if not value:
        return None
    return to_utc_naive(datetime.fromisoformat(value))


def parse_end_of_day(value: Optional[str]) -> Optional[datetime]:
    """Parse an inclusive upper bound, stretched to the last millisecond of its day."""
    parsed = parse_iso_datetime(value)
    return end_of_day(parsed) if parsed is not None else None


def group_and_reduce(
    items: Iterable[T],
    key: Callable[[T], Optional[Hashable]],
    initial: Callable[[T], A],
    accumulate: Callable[[A, T], A],
) -> Dict[Hashable, A]:
    """
    Fold items into one accumulator per key, preserving first-seen key order.

    `initial` builds the accumulator from the first item of a group, then
    `accumulate` folds every item of the group (the first one included).
    Items whose key is None are skipped.
    """
    groups: Dict[Hashable, A] = {}
    for item in items:
        group_key = key(item)
        if group_key is None:
            continue
        if group_key not in groups:
            groups[group_key] = initial(item)
        groups[group_key] = accumulate(groups[group_key], item)
    return groups


def count_by(items: Iterable[T], key: Callable[[T], Optional[Hashable]]) -> Dict[Hashable, int]:
    return group_and_reduce(items, key, lambda _: 0, lambda count, _: count + 1)


def sum_by(
    items: Iterable[T],
    key: Callable[[T], Optional[Hashable]],
    value: Callable[[T], Any],
) -> Dict[Hashable, Decimal]:
    return group_and_reduce(items, key, lambda _: ZERO, lambda total, item: total + to_decimal(value(item)))


def sum_field(rows: Iterable[Dict[str, Any]], field: str, start: Any = ZERO) -> Any:
    """Sum one field over report rows; pass start=0 for integer fields."""
    return sum((row[field] for row in rows), start)
