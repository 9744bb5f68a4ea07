"""
Registration and subscription analytics for the dashboard.
"""

from collections import Counter
from datetime import date
from typing import Iterable, Optional

MONTHS_SHOWN = 6


def _month_key(value: date) -> tuple[int, int]:
    return value.year, value.month


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def month_label(year: int, month: int) -> str:
    """Label like "Oct 2026"."""
    return date(year, month, 1).strftime("%b %Y")


def monthly_registrations(
    created_on: Iterable[date], today: date, months: int = MONTHS_SHOWN
) -> list[dict]:
    """
    Count registrations per calendar month.

    Args:
        created_on: Organization creation dates
        today: Reference date (its month is the last bucket)
        months: Number of buckets

    Returns:
        Buckets ``{"month": "Oct 2026", "count": 3}``, oldest first, months
        without registrations included with count 0
    """
    counts = Counter(_month_key(value) for value in created_on)

    keys = [_month_key(today)]
    while len(keys) < months:
        keys.append(_previous_month(*keys[-1]))

    return [{"month": month_label(*key), "count": counts.get(key, 0)} for key in reversed(keys)]


def growth_rate(buckets: list[dict]) -> int:
    """Percent change of the last bucket against the one before.

    A previous month with no registrations counts as one.
    """
    this_month = buckets[-1]["count"] if buckets else 0
    last_month = (buckets[-2]["count"] if len(buckets) > 1 else 0) or 1
    return round((this_month - last_month) / last_month * 100)


def plan_distribution(plan_names: Iterable[Optional[str]]) -> list[dict]:
    """Subscriptions per plan name; subscriptions without a plan count as "Unknown"."""
    counts = Counter(name or "Unknown" for name in plan_names)
    return [{"plan": plan, "count": count} for plan, count in counts.most_common()]
