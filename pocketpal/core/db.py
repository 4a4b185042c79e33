# pocketpal/core/db.py
import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Type, Union

import pydantic
from supabase import Client, create_client

from pocketpal.config import SUPABASE_KEY, SUPABASE_URL
from pocketpal.core.errors import RemoteReadError, RemoteWriteError, ValidationError
from pocketpal.core.models import (
    Expense,
    Goal,
    Income,
    MoneyRecord,
    SplitExpense,
    StoredRecord,
    build,
)

logger = logging.getLogger(__name__)

INCOMES_TABLE = "incomes"
EXPENSES_TABLE = "expenses"
GOALS_TABLE = "goals"
SPLITS_TABLE = "split_expenses"
PARTICIPANTS_TABLE = "split_participants"

RECEIPTS_BUCKET = "receipts"

# Goals only grow through these fixed contribution steps
CONTRIBUTION_STEPS = (Decimal("10"), Decimal("25"))

_RECORD_TABLES = {Income: INCOMES_TABLE, Expense: EXPENSES_TABLE}


def get_supabase_client() -> Client:
    """Returns a Supabase client instance."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def _first_row(response) -> Dict[str, Any]:
    if not response.data:
        raise RemoteWriteError("The store did not return the saved record")
    return response.data[0]


def _parse_rows(model: Type[StoredRecord], rows: List[Dict[str, Any]], table: str) -> List[Any]:
    try:
        return [model.from_row(row) for row in rows]
    except pydantic.ValidationError as e:
        logger.error("Unreadable row in %s: %s", table, e)
        raise RemoteReadError(f"Unreadable record in {table}") from e


def _parse_saved(model: Type[StoredRecord], row: Dict[str, Any]) -> Any:
    try:
        return model.from_row(row)
    except pydantic.ValidationError as e:
        logger.error("Store returned an unreadable %s: %s", model.__name__, e)
        raise RemoteWriteError(f"The store returned an unreadable {model.__name__}") from e


# --- Income and expenses ---
def _check_amounts(changes: Dict[str, Any]) -> None:
    for field in ("amount", "cost"):
        if changes.get(field) is None:
            continue
        try:
            value = Decimal(str(changes[field]))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid {field}") from e
        if not value.is_finite() or value < 0:
            raise ValidationError(f"Invalid {field}")


def _insert_record(supabase_client: Client, record: MoneyRecord) -> MoneyRecord:
    table = _RECORD_TABLES[type(record)]
    try:
        response = supabase_client.table(table).insert(record.to_row()).execute()
    except Exception as e:
        logger.error("Error inserting into %s: %s", table, e)
        raise RemoteWriteError(str(e)) from e
    return _parse_saved(type(record), _first_row(response))


def add_income(supabase_client: Client, user_id: str, amount: Any, title: str, category: str,
               hustle_type: Optional[str] = None, cost: Any = None, note: Optional[str] = None,
               screenshot_url: Optional[str] = None) -> Income:
    """Validates and stores an income record."""
    income = build(Income, user_id=user_id, amount=amount, title=title, category=category,
                   hustle_type=hustle_type, cost=cost, note=note, screenshot_url=screenshot_url)
    return _insert_record(supabase_client, income)


def add_expense(supabase_client: Client, user_id: str, amount: Any, title: str, category: str,
                note: Optional[str] = None) -> Expense:
    """Validates and stores an expense record."""
    expense = build(Expense, user_id=user_id, amount=amount, title=title, category=category, note=note)
    return _insert_record(supabase_client, expense)


def _select_for_user(supabase_client: Client, table: str, user_id: str, columns: str = "*") -> List[Dict[str, Any]]:
    try:
        response = (
            supabase_client.table(table)
            .select(columns)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.error("Error reading %s: %s", table, e)
        raise RemoteReadError(str(e)) from e
    return response.data or []


def get_incomes(supabase_client: Client, user_id: str) -> List[Income]:
    """Income records of a user, newest first."""
    return _parse_rows(Income, _select_for_user(supabase_client, INCOMES_TABLE, user_id), INCOMES_TABLE)


def get_expenses(supabase_client: Client, user_id: str) -> List[Expense]:
    """Expense records of a user, newest first."""
    return _parse_rows(Expense, _select_for_user(supabase_client, EXPENSES_TABLE, user_id), EXPENSES_TABLE)


def update_record(supabase_client: Client, record_type: Type[MoneyRecord], record_id: str,
                  changes: Dict[str, Any]) -> MoneyRecord:
    """Edits an income or expense. The changed fields are validated before the update."""
    table = _RECORD_TABLES[record_type]
    _check_amounts(changes)
    payload = {k: (str(v) if isinstance(v, Decimal) else v) for k, v in changes.items()}
    try:
        response = supabase_client.table(table).update(payload).eq("id", record_id).execute()
    except Exception as e:
        logger.error("Error updating %s %s: %s", table, record_id, e)
        raise RemoteWriteError(str(e)) from e
    return _parse_saved(record_type, _first_row(response))


def delete_record(supabase_client: Client, record_type: Type[MoneyRecord], record_id: str) -> None:
    table = _RECORD_TABLES[record_type]
    try:
        supabase_client.table(table).delete().eq("id", record_id).execute()
    except Exception as e:
        logger.error("Error deleting %s %s: %s", table, record_id, e)
        raise RemoteWriteError(str(e)) from e


# --- Goals ---
def add_goal(supabase_client: Client, user_id: str, title: str, target_amount: Any) -> Goal:
    goal = build(Goal, user_id=user_id, title=title, target_amount=target_amount,
                 current_amount=Decimal("0"))
    try:
        response = supabase_client.table(GOALS_TABLE).insert(goal.to_row()).execute()
    except Exception as e:
        logger.error("Error creating goal: %s", e)
        raise RemoteWriteError(str(e)) from e
    return _parse_saved(Goal, _first_row(response))


def get_goals(supabase_client: Client, user_id: str) -> List[Goal]:
    return _parse_rows(Goal, _select_for_user(supabase_client, GOALS_TABLE, user_id), GOALS_TABLE)


def contribute_to_goal(supabase_client: Client, goal: Goal, amount: Union[Decimal, int, str]) -> Goal:
    """
    Adds a fixed contribution to a goal. The new amount is computed from the
    goal as last read, so concurrent contributions are last-writer-wins.
    """
    step = Decimal(str(amount))
    if step not in CONTRIBUTION_STEPS:
        raise ValidationError("Contributions must be 10 or 25")
    new_amount = goal.current_amount + step
    try:
        response = (
            supabase_client.table(GOALS_TABLE)
            .update({"current_amount": str(new_amount)})
            .eq("id", goal.id)
            .execute()
        )
    except Exception as e:
        logger.error("Error updating goal %s: %s", goal.id, e)
        raise RemoteWriteError(str(e)) from e
    return _parse_saved(Goal, _first_row(response))


def delete_goal(supabase_client: Client, goal_id: str) -> None:
    try:
        supabase_client.table(GOALS_TABLE).delete().eq("id", goal_id).execute()
    except Exception as e:
        logger.error("Error deleting goal %s: %s", goal_id, e)
        raise RemoteWriteError(str(e)) from e


# --- Split expenses ---
def create_split(supabase_client: Client, split: SplitExpense) -> SplitExpense:
    """
    Stores a split and then its participants. If the participants cannot be
    stored, the split row is removed again so no empty split is left behind.
    """
    try:
        response = supabase_client.table(SPLITS_TABLE).insert(split.to_row()).execute()
    except Exception as e:
        logger.error("Error creating split expense: %s", e)
        raise RemoteWriteError(str(e)) from e
    split_row = _first_row(response)
    split_id = split_row["id"]

    participant_rows = []
    for participant in split.participants:
        row = participant.to_row()
        row["split_expense_id"] = split_id
        participant_rows.append(row)

    saved_participants = []
    if participant_rows:
        try:
            saved_participants = (
                supabase_client.table(PARTICIPANTS_TABLE).insert(participant_rows).execute().data or []
            )
        except Exception as e:
            logger.error("Error adding participants to split %s: %s", split_id, e)
            try:
                supabase_client.table(SPLITS_TABLE).delete().eq("id", split_id).execute()
            except Exception as cleanup_error:
                logger.error("Could not remove split %s after failure: %s", split_id, cleanup_error)
            raise RemoteWriteError(str(e)) from e

    split_row = dict(split_row)
    split_row["participants"] = saved_participants
    return _parse_saved(SplitExpense, split_row)


def get_splits(supabase_client: Client, user_id: str) -> List[SplitExpense]:
    """Splits of a user with their participants, newest first."""
    rows = _select_for_user(
        supabase_client, SPLITS_TABLE, user_id, "*, participants:split_participants(*)"
    )
    return _parse_rows(SplitExpense, rows, SPLITS_TABLE)


def set_participant_paid(supabase_client: Client, participant_id: str, is_paid: bool) -> None:
    try:
        supabase_client.table(PARTICIPANTS_TABLE).update({"is_paid": is_paid}).eq("id", participant_id).execute()
    except Exception as e:
        logger.error("Error updating participant %s: %s", participant_id, e)
        raise RemoteWriteError(str(e)) from e


def delete_split(supabase_client: Client, split_id: str) -> None:
    """Deletes a split. Participants are removed with it by the foreign-key cascade."""
    try:
        supabase_client.table(SPLITS_TABLE).delete().eq("id", split_id).execute()
    except Exception as e:
        logger.error("Error deleting split %s: %s", split_id, e)
        raise RemoteWriteError(str(e)) from e


# --- Images (receipts, screenshots) ---
def upload_image(supabase_client: Client, bucket: str, user_id: str, filename: str, data: bytes) -> str:
    """Uploads an image under {user_id}/{millis}.{ext} and returns its public URL."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    path = f"{user_id}/{int(time.time() * 1000)}.{extension}"
    storage = supabase_client.storage.from_(bucket)
    try:
        storage.upload(path, data)
    except Exception as e:
        logger.error("Upload error: %s", e)
        raise RemoteWriteError(str(e)) from e
    return storage.get_public_url(path)
