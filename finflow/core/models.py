"""Domain models for FinFlow.

All financial data structures are defined here using Pydantic v2 for validation.
Normalized records are frozen: the engine reads them, it never mutates them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

UNCATEGORIZED = "uncategorized"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class TransactionKind(str, Enum):
    """Canonical transaction direction.

    Replaces the mixed "credit/debit" and "income/expense" vocabularies
    found in raw records.
    """

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class BudgetPeriod(str, Enum):
    """Period a budget amount is declared for."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetState(str, Enum):
    """Budget utilization status.

    ON_TRACK: spent at most 80% of the monthly budget.
    WARNING:  above 80%, at most 100%.
    OVER:     above 100%.
    """

    ON_TRACK = "on_track"
    WARNING = "warning"
    OVER = "over"


class RejectionReason(str, Enum):
    """Why a raw record was dropped during normalization."""

    INVALID_KIND = "invalid_kind"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"
    INVALID_PERIOD = "invalid_period"
    MISSING_DESCRIPTION = "missing_description"
    INVALID_RECORD = "invalid_record"


# -----------------------------------------------------------------------------
# Normalized records
# -----------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single normalized financial transaction.

    Attributes:
        id: Opaque identifier, unique within a snapshot.
        description: Free text, never empty.
        amount: Positive amount; direction is carried by ``kind``.
        category: Category identifier (``uncategorized`` when unknown).
        date: Transaction date-time (naive; aware inputs are converted to UTC).
        kind: Inflow or Outflow.
        created_at: Audit timestamp, not used in aggregation.
        updated_at: Audit timestamp, not used in aggregation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    description: str = Field(min_length=1)
    amount: Annotated[Decimal, Field(gt=0)]
    category: str = Field(min_length=1)
    date: datetime
    kind: TransactionKind
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def convert_to_naive_utc(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v) if v is not None else v

    @property
    def is_inflow(self) -> bool:
        return self.kind == TransactionKind.INFLOW

    @property
    def is_outflow(self) -> bool:
        return self.kind == TransactionKind.OUTFLOW


class Budget(BaseModel):
    """Spending limit declared for one category.

    At most one budget per category is active; the evaluator keeps the most
    recently updated one when a snapshot contains duplicates.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    category: str = Field(min_length=1)
    amount: Annotated[Decimal, Field(gt=0)]
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def convert_to_naive_utc(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v) if v is not None else v

    @computed_field  # type: ignore[misc]
    @property
    def monthly_amount(self) -> Decimal:
        """Monthly-equivalent amount (yearly budgets divided by 12)."""
        if self.period == BudgetPeriod.YEARLY:
            return self.amount / 12
        return self.amount

    @property
    def last_modified(self) -> datetime | None:
        return self.updated_at or self.created_at


class Category(BaseModel):
    """Presentational category. Aggregation only uses ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: str = "bg-gray-500"
    icon: str | None = None


DEFAULT_CATEGORIES: list[Category] = [
    Category(id="food", name="Food", color="bg-red-500"),
    Category(id="rent", name="Rent", color="bg-blue-500"),
    Category(id="entertainment", name="Entertainment", color="bg-green-500"),
    Category(id="utilities", name="Utilities", color="bg-yellow-500"),
    Category(id="other", name="Other", color="bg-gray-500"),
]


# -----------------------------------------------------------------------------
# Normalization results
# -----------------------------------------------------------------------------


class Rejection(BaseModel):
    """A raw record dropped by the normalizer."""

    model_config = ConfigDict(frozen=True)

    index: int | None = None  # Position in the input batch
    record_id: str | None = None
    reason: RejectionReason
    detail: str
    record: Any = None


RecordT = TypeVar("RecordT", bound=BaseModel)


class NormalizedBatch(BaseModel, Generic[RecordT]):
    """Valid records plus the rejections produced alongside them."""

    records: list[RecordT] = Field(default_factory=list)
    rejections: list[Rejection] = Field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejections)


# -----------------------------------------------------------------------------
# Derived aggregates (computed, never persisted)
# -----------------------------------------------------------------------------


class CategorySpend(BaseModel):
    """Summed amount for one category over a selected window."""

    category: str
    amount: Decimal = Decimal(0)


class MonthlyBucket(BaseModel):
    """Summed amount for one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    amount: Decimal = Decimal(0)

    @computed_field  # type: ignore[misc]
    @property
    def key(self) -> str:
        """Sortable month key, e.g. ``2025-01``."""
        return f"{self.year:04d}-{self.month:02d}"

    @computed_field  # type: ignore[misc]
    @property
    def label(self) -> str:
        """Display label, e.g. ``Jan 2025``."""
        return f"{MONTH_ABBREVIATIONS[self.month - 1]} {self.year}"


class MonthlyFlow(BaseModel):
    """Inflow and outflow totals for one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    inflow: Decimal = Decimal(0)
    outflow: Decimal = Decimal(0)

    @computed_field  # type: ignore[misc]
    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow

    @computed_field  # type: ignore[misc]
    @property
    def label(self) -> str:
        return f"{MONTH_ABBREVIATIONS[self.month - 1]} {self.year}"


class BudgetUtilization(BaseModel):
    """Budget vs actual for one category in the reference month.

    Attributes:
        budget_amount: Monthly-normalized budget.
        spent_amount: Outflow spent in the category.
        remaining: budget_amount - spent_amount (negative when over).
        percentage: spent / budget * 100, or 0 when the budget is not positive.
    """

    category: str
    budget_amount: Decimal
    spent_amount: Decimal = Decimal(0)
    remaining: Decimal = Decimal(0)
    percentage: Decimal = Decimal(0)
    status: BudgetState = BudgetState.ON_TRACK


class BudgetStatus(BaseModel):
    """Aggregate budget position for the reference month."""

    total_budget: Decimal = Decimal(0)
    total_spent: Decimal = Decimal(0)
    percentage: Decimal = Decimal(0)
    over_budget_categories: int = 0


class BudgetAlert(BaseModel):
    """A category that needs attention (Warning or Over)."""

    category: str
    status: BudgetState
    percentage: Decimal
    message: str


class DashboardSnapshot(BaseModel):
    """Point-in-time dashboard figures for one reference date."""

    reference_date: datetime

    total_inflow: Decimal = Decimal(0)
    total_outflow: Decimal = Decimal(0)
    net_balance: Decimal = Decimal(0)  # total_inflow - total_outflow
    monthly_inflow: Decimal = Decimal(0)
    monthly_outflow: Decimal = Decimal(0)

    budget_status: BudgetStatus = Field(default_factory=BudgetStatus)
    top_categories: list[CategorySpend] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)

    budgets: list[BudgetUtilization] = Field(default_factory=list)
    alerts: list[BudgetAlert] = Field(default_factory=list)
