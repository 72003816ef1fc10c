"""Dashboard data provider.

Collects and transforms all data needed for dashboard rendering.
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from finflow.core.config import FinflowConfig
from finflow.core.models import (
    Budget,
    Category,
    CategorySpend,
    DashboardSnapshot,
    MonthlyBucket,
    MonthlyFlow,
    Rejection,
    Transaction,
    TransactionKind,
)
from finflow.dashboard.source import SnapshotSource
from finflow.engine.aggregator import (
    calculate_category_share,
    filter_current_month,
    group_by_category,
    group_by_month,
    monthly_cash_flow,
)
from finflow.engine.normalizer import (
    normalize_budgets,
    normalize_category_record,
    normalize_transactions,
)
from finflow.engine.periods import coerce_reference_date
from finflow.engine.summarizer import summarize

logger = logging.getLogger(__name__)


class CategoryBreakdownItem(BaseModel):
    """One slice of the category chart."""

    category: str
    name: str
    color: str | None = None
    amount: Decimal
    share: Decimal = Decimal(0)  # Percent of total outflow in the window


class DashboardData(BaseModel):
    """Complete data container for dashboard rendering."""

    currency: str
    generated_at: datetime

    snapshot: DashboardSnapshot
    monthly_trend: list[MonthlyBucket] = Field(default_factory=list)
    cash_flow: list[MonthlyFlow] = Field(default_factory=list)
    category_breakdown: list[CategoryBreakdownItem] = Field(default_factory=list)

    categories: list[Category] = Field(default_factory=list)
    rejections: list[Rejection] = Field(default_factory=list)


class DashboardDataProvider:
    """Provides all data needed for dashboard rendering.

    Fetches the raw snapshot once, normalizes it, and derives every
    figure from that single copy.
    """

    def __init__(self, source: SnapshotSource, config: FinflowConfig | None = None):
        """Initialize data provider.

        Args:
            source: Where raw records come from.
            config: Display settings (defaults apply when omitted).
        """
        self.source = source
        self.config = config or FinflowConfig()
        self._loaded: tuple[list[Transaction], list[Budget], list[Category], list[Rejection]] | None = None

    def load(self) -> tuple[list[Transaction], list[Budget], list[Category], list[Rejection]]:
        """Fetch and normalize the snapshot (cached after the first call).

        Returns:
            (transactions, budgets, categories, rejections)
        """
        if self._loaded is not None:
            return self._loaded

        raw = self.source.fetch_snapshot()
        tx_batch = normalize_transactions(raw.transactions)
        budget_batch = normalize_budgets(raw.budgets)

        categories: list[Category] = []
        for index, record in enumerate(raw.categories):
            result = normalize_category_record(record, index=index)
            if isinstance(result, Category):
                categories.append(result)
        if not categories:
            categories = list(self.config.categories)

        rejections = tx_batch.rejections + budget_batch.rejections
        if rejections:
            logger.warning("%d records rejected during normalization", len(rejections))

        self._loaded = (tx_batch.records, budget_batch.records, categories, rejections)
        return self._loaded

    def get_dashboard_data(self, reference_date: date | datetime | str) -> DashboardData:
        """Get complete dashboard data.

        Args:
            reference_date: Date defining the current month.

        Returns:
            DashboardData with snapshot, trends and category breakdown.
        """
        reference = coerce_reference_date(reference_date)
        transactions, budgets, categories, rejections = self.load()

        snapshot = summarize(
            transactions,
            budgets,
            reference,
            top_n=self.config.top_categories,
            recent_n=self.config.recent_transactions,
        )

        return DashboardData(
            currency=self.config.currency,
            generated_at=datetime.now(),
            snapshot=snapshot,
            monthly_trend=group_by_month(
                transactions,
                TransactionKind.OUTFLOW,
                fill_gaps=self.config.fill_trend_gaps,
            ),
            cash_flow=monthly_cash_flow(transactions, fill_gaps=self.config.fill_trend_gaps),
            category_breakdown=self._build_category_breakdown(
                group_by_category(
                    filter_current_month(transactions, reference),
                    TransactionKind.OUTFLOW,
                ),
                categories,
            ),
            categories=categories,
            rejections=rejections,
        )

    def _build_category_breakdown(
        self,
        spend: list[CategorySpend],
        categories: list[Category],
    ) -> list[CategoryBreakdownItem]:
        """Attach display names, colors and shares to category totals."""
        by_id = {c.id: c for c in categories}
        total = sum((item.amount for item in spend), Decimal(0))

        breakdown: list[CategoryBreakdownItem] = []
        for item in spend:
            category = by_id.get(item.category)
            breakdown.append(
                CategoryBreakdownItem(
                    category=item.category,
                    name=category.name if category else self.config.category_name(item.category),
                    color=category.color if category else None,
                    amount=item.amount,
                    share=calculate_category_share(item.amount, total),
                )
            )
        return breakdown
