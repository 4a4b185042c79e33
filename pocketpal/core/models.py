# pocketpal/core/models.py
"""
Typed records for everything the app stores or produces.

Rows coming back from Supabase are parsed with ``from_row`` and rows going in
are produced with ``to_row``, so the rest of the code never has to trust the
shape of a raw dictionary.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Tuple, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from pocketpal.core.errors import ValidationError

IncomeCategory = Literal["gig", "allowance", "job", "other"]
ExpenseCategory = Literal["food", "shopping", "tech", "entertainment"]

INCOME_CATEGORIES = ("gig", "allowance", "job", "other")
EXPENSE_CATEGORIES = ("food", "shopping", "tech", "entertainment")

# Gig income is the only kind that feeds hustle streaks and stats
HUSTLE_CATEGORY = "gig"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build(model_cls: Type[ModelT], **fields: Any) -> ModelT:
    """Builds a record from form input, turning pydantic errors into ValidationError."""
    try:
        return model_cls(**fields)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "record"
        raise ValidationError(f"Invalid {location}: {first.get('msg')}") from e


class StoredRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_row(cls: Type[ModelT], row: Dict[str, Any]) -> ModelT:
        return cls.model_validate(row)

    def to_row(self) -> Dict[str, Any]:
        """JSON-safe payload for an insert. Decimals travel as strings."""
        return self.model_dump(mode="json", exclude_none=True)


class MoneyRecord(StoredRecord):
    id: Optional[str] = None
    user_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    title: str = Field(..., min_length=1)
    category: str
    created_at: datetime = Field(default_factory=_now)
    hustle_type: Optional[str] = None
    cost: Optional[Decimal] = Field(None, ge=0)
    note: Optional[str] = None
    screenshot_url: Optional[str] = None


class Income(MoneyRecord):
    kind: Literal["income"] = Field("income", exclude=True)
    category: IncomeCategory

    @property
    def profit(self) -> Decimal:
        return self.amount - (self.cost or Decimal("0"))


class Expense(MoneyRecord):
    kind: Literal["expense"] = Field("expense", exclude=True)
    category: ExpenseCategory


class Goal(StoredRecord):
    id: Optional[str] = None
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)
    created_at: datetime = Field(default_factory=_now)

    @property
    def is_complete(self) -> bool:
        return self.current_amount >= self.target_amount


class Participant(StoredRecord):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, alias="participant_name")
    amount: Decimal = Field(..., ge=0)
    is_paid: bool = False

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class SplitExpense(StoredRecord):
    id: Optional[str] = None
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    total_amount: Decimal = Field(..., ge=0)
    receipt_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)
    participants: List[Participant] = Field(default_factory=list)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, exclude={"participants"})

    @property
    def paid_count(self) -> int:
        return sum(1 for p in self.participants if p.is_paid)


class LessonCatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    keywords: Tuple[str, ...]


class ContentItem(BaseModel):
    """An AI-generated card enriched with its related lesson. Serialized in camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None
    related_lesson_id: Optional[int] = Field(None, alias="relatedLessonId")
    related_lesson_title: Optional[str] = Field(None, alias="relatedLessonTitle")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Insight(ContentItem):
    title: Optional[str] = None
    impact: Optional[str] = None


class NewsItem(ContentItem):
    headline: Optional[str] = None
    sentiment: Optional[str] = None
    related_topic: Optional[str] = Field(None, alias="relatedTopic")
