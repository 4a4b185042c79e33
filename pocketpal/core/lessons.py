# pocketpal/core/lessons.py
from typing import Optional

from pocketpal.core.models import LessonCatalogEntry

# Fixed, process-wide catalog. Order matters: it is the tie-break for matching.
LESSON_CATALOG = (
    LessonCatalogEntry(
        id=1,
        title="Money Basics",
        keywords=("money", "currency", "basics", "fundamentals", "cash", "dollar"),
    ),
    LessonCatalogEntry(
        id=2,
        title="Earning vs. Spending",
        keywords=("income", "expenses", "spending", "earning", "salary", "wages", "paycheck"),
    ),
    LessonCatalogEntry(
        id=3,
        title="The Power of Saving",
        keywords=("saving", "savings", "emergency fund", "piggy bank", "save", "accumulate"),
    ),
    LessonCatalogEntry(
        id=4,
        title="Setting Financial Goals",
        keywords=("goals", "planning", "targets", "objectives", "milestones", "achieve"),
    ),
    LessonCatalogEntry(
        id=5,
        title="Budgeting Like a Pro",
        keywords=("budget", "budgeting", "planning", "allocation", "expenses", "spending plan"),
    ),
    LessonCatalogEntry(
        id=6,
        title="Understanding Credit",
        keywords=("credit", "loans", "debt", "credit score", "borrowing", "interest rate", "apr"),
    ),
    LessonCatalogEntry(
        id=7,
        title="Investing Basics",
        keywords=(
            "investing", "stocks", "bonds", "markets", "portfolio",
            "dividends", "returns", "etf", "mutual fund",
        ),
    ),
)


def get_lesson(lesson_id: int) -> Optional[LessonCatalogEntry]:
    """Returns the catalog entry with this id, or None."""
    for lesson in LESSON_CATALOG:
        if lesson.id == lesson_id:
            return lesson
    return None
