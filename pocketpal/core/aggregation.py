# pocketpal/core/aggregation.py
"""Derived values for the dashboard, analytics and profile, computed from typed records."""
from collections import OrderedDict
from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from pocketpal.core.errors import ValidationError
from pocketpal.core.models import Expense, Goal, Income, MoneyRecord

ZERO = Decimal("0")

RECENT_ACTIVITY_LIMIT = 5

Number = Union[Decimal, int, str]


def _sum(records: Iterable[MoneyRecord]) -> Decimal:
    return sum((r.amount for r in records), ZERO)


def total_income(records: Iterable[MoneyRecord]) -> Decimal:
    return _sum(r for r in records if isinstance(r, Income))


def total_expenses(records: Iterable[MoneyRecord]) -> Decimal:
    return _sum(r for r in records if isinstance(r, Expense))


def net_balance(records: Sequence[MoneyRecord]) -> Decimal:
    """Income minus expenses. May be negative."""
    return total_income(records) - total_expenses(records)


def budget_remaining(monthly_budget: Number, total_spent: Number) -> Decimal:
    """May be negative when over budget."""
    return Decimal(monthly_budget) - Decimal(total_spent)


def budget_status(remaining: Decimal, warning_threshold: Number = 20) -> str:
    """'over' once the budget is exceeded, 'low' under the warning threshold, else 'ok'."""
    if remaining < 0:
        return "over"
    if remaining < Decimal(warning_threshold):
        return "low"
    return "ok"


def goal_progress_percent(goal: Goal) -> int:
    """Progress rounded to a whole percent. Not capped: 100 or more means complete."""
    if goal.target_amount <= 0:
        raise ValidationError("Goal target must be greater than zero")
    percent = goal.current_amount / goal.target_amount * 100
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def total_saved(goals: Iterable[Goal]) -> Decimal:
    return sum((g.current_amount for g in goals), ZERO)


def goals_completed(goals: Iterable[Goal]) -> int:
    return sum(1 for g in goals if g.is_complete)


def recent_activity(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> List[MoneyRecord]:
    """Newest first. Records with the same timestamp keep their input order."""
    merged = list(incomes) + list(expenses)
    merged = sorted(merged, key=lambda r: r.created_at, reverse=True)
    return merged[:limit]


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a timestamp in the given zone. Naive timestamps are taken as-is."""
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def records_in_month(records: Iterable[MoneyRecord], year: int, month: int,
                     tz: Optional[tzinfo] = None) -> List[MoneyRecord]:
    result = []
    for record in records:
        day = local_date(record.created_at, tz)
        if day.year == year and day.month == month:
            result.append(record)
    return result


def weekly_rollup(records: Iterable[MoneyRecord], today: date,
                  tz: Optional[tzinfo] = None) -> List[Dict[str, object]]:
    """Income and expenses per day for the 7 days ending today, oldest first."""
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    rows = OrderedDict(
        (day, {"day": day.strftime("%a"), "date": day, "income": ZERO, "expenses": ZERO})
        for day in days
    )
    for record in records:
        row = rows.get(local_date(record.created_at, tz))
        if row is None:
            continue
        key = "income" if isinstance(record, Income) else "expenses"
        row[key] += record.amount
    return list(rows.values())


def monthly_rollup(records: Iterable[MoneyRecord], today: date, months: int = 6,
                   tz: Optional[tzinfo] = None) -> List[Dict[str, object]]:
    """Income, expenses and net per calendar month for the last `months` months, oldest first."""
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    keys.reverse()

    rows = OrderedDict(
        (key, {"month": date(key[0], key[1], 1).strftime("%b %Y"),
               "income": ZERO, "expenses": ZERO})
        for key in keys
    )
    for record in records:
        day = local_date(record.created_at, tz)
        row = rows.get((day.year, day.month))
        if row is None:
            continue
        key = "income" if isinstance(record, Income) else "expenses"
        row[key] += record.amount

    for row in rows.values():
        row["net"] = row["income"] - row["expenses"]
    return list(rows.values())


def category_breakdown(records: Iterable[MoneyRecord]) -> Dict[str, Decimal]:
    """Total per category, largest first."""
    totals: Dict[str, Decimal] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, ZERO) + record.amount
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))
