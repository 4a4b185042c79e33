import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from supabase import Client

from pocketpal.core import db
from pocketpal.core.errors import RemoteReadError, RemoteWriteError, ValidationError
from pocketpal.core.models import Expense, Goal, Income, SplitExpense, Participant

INCOME_ROW = {
    "id": "i1",
    "user_id": "u1",
    "amount": "40.00",
    "title": "Lawn mowing",
    "category": "gig",
    "hustle_type": "lawn",
    "cost": "5.00",
    "created_at": "2025-07-07T10:00:00+00:00",
}


class TestDatabase(unittest.TestCase):

    def setUp(self):
        self.mock_supabase_client = MagicMock(spec=Client)

        # Chainable query builder: .select().eq().order().execute()
        self.mock_table_methods = MagicMock()
        for method in ("insert", "select", "update", "delete", "eq", "order", "limit"):
            getattr(self.mock_table_methods, method).return_value = self.mock_table_methods
        self.mock_table_methods.execute.return_value = MagicMock(data=[])

        self.mock_supabase_client.table.return_value = self.mock_table_methods

    def set_rows(self, rows):
        self.mock_table_methods.execute.return_value = MagicMock(data=rows)

    # --- income and expenses ---
    def test_add_income(self):
        self.set_rows([INCOME_ROW])

        income = db.add_income(self.mock_supabase_client, "u1", Decimal("40"), "Lawn mowing", "gig",
                               hustle_type="lawn", cost=Decimal("5"))

        self.mock_supabase_client.table.assert_called_with("incomes")
        inserted = self.mock_table_methods.insert.call_args[0][0]
        self.assertEqual(inserted["amount"], "40")
        self.assertEqual(inserted["cost"], "5")
        self.assertEqual(inserted["category"], "gig")
        self.assertNotIn("kind", inserted)
        self.assertNotIn("id", inserted)
        self.assertIsInstance(income, Income)
        self.assertEqual(income.profit, Decimal("35.00"))

    def test_add_expense_rejects_bad_input_before_writing(self):
        for amount, category, title in (("-1", "food", "Snack"), ("5", "cars", "Gas"), ("5", "food", "")):
            with self.subTest(amount=amount, category=category, title=title):
                with self.assertRaises(ValidationError):
                    db.add_expense(self.mock_supabase_client, "u1", amount, title, category)
        self.mock_table_methods.insert.assert_not_called()

    def test_add_expense_store_failure(self):
        self.mock_table_methods.execute.side_effect = Exception("insert failed")
        with self.assertRaises(RemoteWriteError):
            db.add_expense(self.mock_supabase_client, "u1", "5", "Snack", "food")

    def test_add_expense_without_returned_row(self):
        self.set_rows([])
        with self.assertRaises(RemoteWriteError):
            db.add_expense(self.mock_supabase_client, "u1", "5", "Snack", "food")

    def test_get_incomes_newest_first_for_user(self):
        self.set_rows([INCOME_ROW])

        incomes = db.get_incomes(self.mock_supabase_client, "u1")

        self.mock_table_methods.select.assert_called_with("*")
        self.mock_table_methods.eq.assert_called_with("user_id", "u1")
        self.mock_table_methods.order.assert_called_with("created_at", desc=True)
        self.assertEqual(incomes[0].amount, Decimal("40.00"))

    def test_read_failure(self):
        self.mock_table_methods.execute.side_effect = Exception("timeout")
        with self.assertRaises(RemoteReadError):
            db.get_expenses(self.mock_supabase_client, "u1")

    def test_unreadable_row_is_a_read_error(self):
        self.set_rows([dict(INCOME_ROW, category="transport")])
        with self.assertRaises(RemoteReadError):
            db.get_incomes(self.mock_supabase_client, "u1")

        self.set_rows([dict(INCOME_ROW, amount="lots")])
        with self.assertRaises(RemoteReadError):
            db.get_incomes(self.mock_supabase_client, "u1")

    def test_unreadable_saved_row_is_a_write_error(self):
        self.set_rows([dict(INCOME_ROW, amount=None)])
        with self.assertRaises(RemoteWriteError):
            db.add_income(self.mock_supabase_client, "u1", "40", "Lawn mowing", "gig")

    def test_non_finite_amounts_never_reach_the_store(self):
        for amount in ("NaN", "Infinity", "-Infinity"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    db.add_income(self.mock_supabase_client, "u1", amount, "Allowance", "allowance")
                with self.assertRaises(ValidationError):
                    db.add_expense(self.mock_supabase_client, "u1", amount, "Snack", "food")
        self.mock_table_methods.insert.assert_not_called()

    def test_update_record_validates_amounts(self):
        with self.assertRaises(ValidationError):
            db.update_record(self.mock_supabase_client, Expense, "e1", {"amount": "-3"})
        self.mock_table_methods.update.assert_not_called()

    def test_update_and_delete_record(self):
        self.set_rows([dict(INCOME_ROW, amount="45.00")])

        updated = db.update_record(self.mock_supabase_client, Income, "i1", {"amount": Decimal("45")})
        self.mock_table_methods.update.assert_called_with({"amount": "45"})
        self.mock_table_methods.eq.assert_called_with("id", "i1")
        self.assertEqual(updated.amount, Decimal("45.00"))

        db.delete_record(self.mock_supabase_client, Expense, "e1")
        self.mock_supabase_client.table.assert_called_with("expenses")
        self.mock_table_methods.delete.assert_called_once()

    # --- goals ---
    def test_contribute_to_goal(self):
        goal = Goal(id="g1", user_id="u1", title="Bike", target_amount=Decimal("100"),
                    current_amount=Decimal("10"))
        self.set_rows([{"id": "g1", "user_id": "u1", "title": "Bike",
                        "target_amount": "100", "current_amount": "35"}])

        updated = db.contribute_to_goal(self.mock_supabase_client, goal, 25)

        self.mock_table_methods.update.assert_called_with({"current_amount": "35"})
        self.mock_table_methods.eq.assert_called_with("id", "g1")
        self.assertEqual(updated.current_amount, Decimal("35"))

    def test_contribution_must_be_a_fixed_step(self):
        goal = Goal(id="g1", user_id="u1", title="Bike", target_amount=Decimal("100"))
        with self.assertRaises(ValidationError):
            db.contribute_to_goal(self.mock_supabase_client, goal, 15)
        self.mock_table_methods.update.assert_not_called()

    def test_add_goal_requires_positive_target(self):
        with self.assertRaises(ValidationError):
            db.add_goal(self.mock_supabase_client, "u1", "Bike", 0)

    # --- splits ---
    def make_split(self):
        return SplitExpense(
            user_id="u1", title="Pizza", total_amount=Decimal("20"),
            participants=[Participant(name="Ana", amount=Decimal("10")),
                          Participant(name="Ben", amount=Decimal("10"))],
        )

    def test_create_split_links_participants(self):
        split_row = {"id": "s1", "user_id": "u1", "title": "Pizza", "total_amount": "20"}
        participant_rows = [
            {"id": "p1", "participant_name": "Ana", "amount": "10", "is_paid": False, "split_expense_id": "s1"},
            {"id": "p2", "participant_name": "Ben", "amount": "10", "is_paid": False, "split_expense_id": "s1"},
        ]
        self.mock_table_methods.execute.side_effect = [
            MagicMock(data=[split_row]),
            MagicMock(data=participant_rows),
        ]

        saved = db.create_split(self.mock_supabase_client, self.make_split())

        split_payload = self.mock_table_methods.insert.call_args_list[0][0][0]
        self.assertNotIn("participants", split_payload)
        self.assertEqual(split_payload["total_amount"], "20")
        rows = self.mock_table_methods.insert.call_args_list[1][0][0]
        self.assertEqual([r["participant_name"] for r in rows], ["Ana", "Ben"])
        self.assertTrue(all(r["split_expense_id"] == "s1" for r in rows))
        self.assertEqual(saved.id, "s1")
        self.assertEqual([p.name for p in saved.participants], ["Ana", "Ben"])

    def test_create_split_removes_orphan_on_participant_failure(self):
        self.mock_table_methods.execute.side_effect = [
            MagicMock(data=[{"id": "s1", "user_id": "u1", "title": "Pizza", "total_amount": "20"}]),
            Exception("participants failed"),
            MagicMock(data=[]),
        ]

        with self.assertRaises(RemoteWriteError):
            db.create_split(self.mock_supabase_client, self.make_split())

        self.mock_table_methods.delete.assert_called_once()
        self.mock_table_methods.eq.assert_called_with("id", "s1")

    def test_get_splits_embeds_participants(self):
        self.set_rows([{
            "id": "s1", "user_id": "u1", "title": "Pizza", "total_amount": "20",
            "created_at": "2025-07-07T10:00:00+00:00",
            "participants": [{"id": "p1", "participant_name": "Ana", "amount": "10", "is_paid": True}],
        }])

        splits = db.get_splits(self.mock_supabase_client, "u1")

        self.mock_table_methods.select.assert_called_with("*, participants:split_participants(*)")
        self.assertEqual(splits[0].paid_count, 1)

    def test_set_participant_paid(self):
        db.set_participant_paid(self.mock_supabase_client, "p1", True)
        self.mock_supabase_client.table.assert_called_with("split_participants")
        self.mock_table_methods.update.assert_called_with({"is_paid": True})

    def test_delete_goal(self):
        db.delete_goal(self.mock_supabase_client, "g1")
        self.mock_supabase_client.table.assert_called_with("goals")
        self.mock_table_methods.delete.assert_called_once()
        self.mock_table_methods.eq.assert_called_with("id", "g1")

    # --- storage ---
    @patch('pocketpal.core.db.time.time', return_value=1700000000.0)
    def test_upload_image(self, _mock_time):
        storage = MagicMock()
        storage.get_public_url.return_value = "https://cdn.test/receipts/u1/1700000000000.png"
        self.mock_supabase_client.storage = MagicMock()
        self.mock_supabase_client.storage.from_.return_value = storage

        url = db.upload_image(self.mock_supabase_client, db.RECEIPTS_BUCKET, "u1", "photo.PNG", b"data")

        self.mock_supabase_client.storage.from_.assert_called_with("receipts")
        storage.upload.assert_called_once_with("u1/1700000000000.png", b"data")
        self.assertEqual(url, "https://cdn.test/receipts/u1/1700000000000.png")

    def test_upload_failure(self):
        storage = MagicMock()
        storage.upload.side_effect = Exception("bucket missing")
        self.mock_supabase_client.storage = MagicMock()
        self.mock_supabase_client.storage.from_.return_value = storage
        with self.assertRaises(RemoteWriteError):
            db.upload_image(self.mock_supabase_client, db.RECEIPTS_BUCKET, "u1", "r.jpg", b"x")


if __name__ == '__main__':
    unittest.main()
