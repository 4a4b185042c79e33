import unittest
from decimal import Decimal

from pocketpal.core import splits
from pocketpal.core.errors import ValidationError
from pocketpal.core.models import Participant, SplitExpense


class TestSplitEvenly(unittest.TestCase):

    def test_three_way_split_rounds_each_share(self):
        shares = splits.split_evenly("100", ["Ana", "Ben", "Cal"])
        self.assertEqual(shares, {"Ana": Decimal("33.33"), "Ben": Decimal("33.33"), "Cal": Decimal("33.33")})

    def test_half_cent_rounds_up(self):
        shares = splits.split_evenly(Decimal("0.05"), ["Ana", "Ben"])
        self.assertEqual(shares["Ana"], Decimal("0.03"))

    def test_blank_names_are_skipped(self):
        shares = splits.split_evenly(60, ["Ana", "  ", "", "Ben"])
        self.assertEqual(shares, {"Ana": Decimal("30.00"), "Ben": Decimal("30.00")})

    def test_needs_two_names(self):
        with self.assertRaisesRegex(ValidationError, "Add at least 2 participant names first"):
            splits.split_evenly(100, ["Ana"])
        with self.assertRaises(ValidationError):
            splits.split_evenly(100, [])

    def test_needs_a_positive_total(self):
        for total in (None, "", "abc", 0, -5, "nan", "inf"):
            with self.subTest(total=total):
                with self.assertRaisesRegex(ValidationError, "Enter a total amount to split"):
                    splits.split_evenly(total, ["Ana", "Ben"])

    def test_duplicate_names_are_rejected(self):
        with self.assertRaises(ValidationError):
            splits.split_evenly(10, ["Ana", "Ana"])


class TestBuildSplit(unittest.TestCase):

    def test_total_is_sum_of_valid_rows(self):
        split = splits.build_split(
            "u1", " Pizza night ",
            [("Ana", "12.50"), ("Ben", Decimal("7.50")), ("", "3"), ("Cal", None)],
            description="  ",
        )
        self.assertEqual(split.title, "Pizza night")
        self.assertEqual(split.total_amount, Decimal("20.00"))
        self.assertEqual([p.name for p in split.participants], ["Ana", "Ben"])
        self.assertIsNone(split.description)
        self.assertFalse(any(p.is_paid for p in split.participants))

    def test_requires_title_and_two_participants(self):
        with self.assertRaisesRegex(ValidationError, "Please enter a title"):
            splits.build_split("u1", " ", [("Ana", 1), ("Ben", 1)])
        with self.assertRaisesRegex(ValidationError, "Add at least 2 participants with amounts"):
            splits.build_split("u1", "Movie", [("Ana", 1), ("Ben", "")])

    def test_negative_amount_is_rejected(self):
        with self.assertRaises(ValidationError):
            splits.build_split("u1", "Movie", [("Ana", "-1"), ("Ben", "5")])

    def test_outstanding_amount(self):
        split = SplitExpense(
            user_id="u1", title="Trip", total_amount=Decimal("30"),
            participants=[
                Participant(name="Ana", amount=Decimal("10"), is_paid=True),
                Participant(name="Ben", amount=Decimal("20")),
            ],
        )
        self.assertEqual(splits.outstanding_amount(split), Decimal("20"))
        self.assertEqual(split.paid_count, 1)


if __name__ == '__main__':
    unittest.main()
