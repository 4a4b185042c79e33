# pocketpal/core/splits.py
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pocketpal.core.errors import ValidationError
from pocketpal.core.models import Participant, SplitExpense, build

CENT = Decimal("0.01")
MIN_PARTICIPANTS = 2


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def split_evenly(total: Any, participant_names: Sequence[str]) -> Dict[str, Decimal]:
    """
    Divides `total` across the named participants, rounding each share to cents.

    Blank names are empty slots and get nothing. The rounding remainder is not
    redistributed, so 100 split three ways gives 33.33 each (99.99 overall).
    """
    amount = _to_decimal(total)
    if amount is None or amount <= 0:
        raise ValidationError("Enter a total amount to split")

    names = [name.strip() for name in participant_names if name and name.strip()]
    if len(names) < MIN_PARTICIPANTS:
        raise ValidationError("Add at least 2 participant names first")
    if len(set(names)) != len(names):
        raise ValidationError("Participant names must be unique")

    per_person = (amount / len(names)).quantize(CENT, rounding=ROUND_HALF_UP)
    return {name: per_person for name in names}


def build_split(
    user_id: str,
    title: str,
    participants: Iterable[Tuple[str, Any]],
    description: Optional[str] = None,
    receipt_url: Optional[str] = None,
) -> SplitExpense:
    """
    Builds an unsaved split from the final (possibly hand-edited) participant amounts.

    Rows missing a name or an amount are ignored. The total is the sum of the
    amounts that remain, not whatever was typed into the quick-split field.
    """
    if not title or not title.strip():
        raise ValidationError("Please enter a title")

    valid: List[Participant] = []
    for name, raw_amount in participants:
        name = (name or "").strip()
        if not name or raw_amount in (None, ""):
            continue
        amount = _to_decimal(raw_amount)
        if amount is None or amount < 0:
            raise ValidationError(f"Invalid amount for {name}")
        valid.append(build(Participant, name=name, amount=amount))

    if len(valid) < MIN_PARTICIPANTS:
        raise ValidationError("Add at least 2 participants with amounts")

    total = sum((p.amount for p in valid), Decimal("0"))
    return build(
        SplitExpense,
        user_id=user_id,
        title=title.strip(),
        description=(description or "").strip() or None,
        total_amount=total,
        receipt_url=receipt_url,
        participants=valid,
    )


def outstanding_amount(split: SplitExpense) -> Decimal:
    """What is still owed by participants not yet marked as paid."""
    return sum((p.amount for p in split.participants if not p.is_paid), Decimal("0"))
