import io
import unittest
from datetime import datetime, timezone
from decimal import Decimal

from pocketpal.core import charts
from pocketpal.core.models import Expense


def make_expense(amount, category="food"):
    return Expense(user_id="u1", amount=Decimal(amount), title="Expense", category=category,
                   created_at=datetime(2025, 7, 7, 12, tzinfo=timezone.utc))


class TestBreakdownChart(unittest.TestCase):

    def test_no_records_gives_no_chart(self):
        self.assertIsNone(charts.generate_breakdown_chart([], "Where your money goes"))

    def test_zero_amounts_give_no_chart(self):
        records = [make_expense("0"), make_expense("0.00", "tech")]
        self.assertIsNone(charts.generate_breakdown_chart(records, "Where your money goes"))

    def test_chart_is_png(self):
        records = [make_expense("12.50"), make_expense("0", "tech"), make_expense("30", "shopping")]

        chart = charts.generate_breakdown_chart(records, "Where your money goes")

        self.assertIsInstance(chart, io.BytesIO)
        self.assertTrue(chart.getvalue().startswith(b"\x89PNG"))


if __name__ == '__main__':
    unittest.main()
