# pocketpal/core/streaks.py
"""
Hustle streaks.

A day is active when at least one gig income was logged on it (viewer's local
calendar day). The streak is anchored to today, or to yesterday when nothing
has been logged yet today, and runs backwards until the first inactive day.
"""
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set

from pocketpal.core.aggregation import ZERO, local_date
from pocketpal.core.models import HUSTLE_CATEGORY, Income, MoneyRecord

WEEK_DAYS = 7


def is_hustle(record: MoneyRecord) -> bool:
    return isinstance(record, Income) and record.category == HUSTLE_CATEGORY


def active_dates(records: Iterable[MoneyRecord], tz: Optional[tzinfo] = None) -> Set[date]:
    return {local_date(r.created_at, tz) for r in records if is_hustle(r)}


def current_streak(active: Set[date], today: date) -> int:
    day = today if today in active else today - timedelta(days=1)
    streak = 0
    while day in active:
        streak += 1
        day -= timedelta(days=1)
    return streak


def week_mask(active: Set[date], today: date) -> List[Dict[str, object]]:
    """The last 7 days ending today, oldest first, with a weekday label and active flag."""
    mask = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        mask.append({"date": day, "label": day.strftime("%a"), "active": day in active})
    return mask


def hustle_summary(records: Iterable[MoneyRecord]) -> Dict[str, object]:
    """Count, gross, costs and profit of gig income, overall and per hustle type."""
    gigs = [r for r in records if is_hustle(r)]
    by_type: Dict[str, Dict[str, Decimal]] = {}
    for gig in gigs:
        hustle_type = gig.hustle_type or "other"
        bucket = by_type.setdefault(hustle_type, {"earned": ZERO, "costs": ZERO, "profit": ZERO})
        bucket["earned"] += gig.amount
        bucket["costs"] += gig.cost or ZERO
        bucket["profit"] += gig.profit

    earned = sum((g.amount for g in gigs), ZERO)
    costs = sum((g.cost or ZERO for g in gigs), ZERO)
    return {
        "count": len(gigs),
        "earned": earned,
        "costs": costs,
        "profit": earned - costs,
        "by_type": by_type,
    }
