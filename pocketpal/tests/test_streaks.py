import unittest
from datetime import date, datetime, timezone
from decimal import Decimal

from pocketpal.core import streaks
from pocketpal.core.models import Expense, Income

TODAY = date(2025, 7, 7)


def gig(day, amount="20", cost=None, hustle_type=None, category="gig"):
    return Income(user_id="u1", amount=Decimal(amount), title="Gig", category=category,
                  cost=Decimal(cost) if cost else None, hustle_type=hustle_type,
                  created_at=datetime(2025, 7, day, 15, tzinfo=timezone.utc))


class TestStreaks(unittest.TestCase):

    def test_streak_counts_back_from_today(self):
        active = streaks.active_dates([gig(7), gig(6), gig(5), gig(3)])
        self.assertEqual(streaks.current_streak(active, TODAY), 3)

    def test_streak_anchors_to_yesterday_when_nothing_today(self):
        active = streaks.active_dates([gig(6), gig(5)])
        self.assertEqual(streaks.current_streak(active, TODAY), 2)

    def test_gap_before_yesterday_means_no_streak(self):
        active = streaks.active_dates([gig(5), gig(4)])
        self.assertEqual(streaks.current_streak(active, TODAY), 0)
        self.assertEqual(streaks.current_streak(set(), TODAY), 0)

    def test_only_gig_income_is_active(self):
        records = [
            gig(7, category="allowance"),
            Expense(user_id="u1", amount=Decimal("5"), title="Snack", category="food",
                    created_at=datetime(2025, 7, 6, 15, tzinfo=timezone.utc)),
        ]
        self.assertEqual(streaks.active_dates(records), set())

    def test_several_gigs_on_one_day_count_once(self):
        active = streaks.active_dates([gig(7), gig(7), gig(7)])
        self.assertEqual(streaks.current_streak(active, TODAY), 1)

    def test_week_mask(self):
        active = streaks.active_dates([gig(7), gig(1), gig(5)])
        mask = streaks.week_mask(active, TODAY)

        self.assertEqual(len(mask), 7)
        self.assertEqual(mask[0]["date"], date(2025, 7, 1))
        self.assertEqual(mask[0]["label"], "Tue")
        self.assertEqual([day["active"] for day in mask],
                         [True, False, False, False, True, False, True])


class TestHustleSummary(unittest.TestCase):

    def test_profit_per_type(self):
        records = [
            gig(1, "50", cost="10", hustle_type="lawn"),
            gig(2, "30", hustle_type="lawn"),
            gig(3, "25", cost="5", hustle_type="tutoring"),
            gig(4, "100", category="job"),
        ]
        summary = streaks.hustle_summary(records)

        self.assertEqual(summary["count"], 3)
        self.assertEqual(summary["earned"], Decimal("105"))
        self.assertEqual(summary["costs"], Decimal("15"))
        self.assertEqual(summary["profit"], Decimal("90"))
        self.assertEqual(summary["by_type"]["lawn"]["profit"], Decimal("70"))
        self.assertEqual(summary["by_type"]["tutoring"]["costs"], Decimal("5"))

    def test_untyped_gigs_are_grouped_as_other(self):
        summary = streaks.hustle_summary([gig(1)])
        self.assertIn("other", summary["by_type"])


if __name__ == '__main__':
    unittest.main()
