"""Budget evaluation.

Joins budgets against per-category outflow for the reference month and
classifies utilization.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal

from finflow.core.models import (
    Budget,
    BudgetAlert,
    BudgetPeriod,
    BudgetState,
    BudgetStatus,
    BudgetUtilization,
    CategorySpend,
)

logger = logging.getLogger(__name__)

# Status thresholds, in percent of the monthly budget.
WARNING_THRESHOLD = Decimal(80)
OVER_THRESHOLD = Decimal(100)


def _is_valid(budget: object) -> bool:
    return (
        isinstance(budget, Budget)
        and isinstance(budget.amount, Decimal)
        and budget.amount.is_finite()
        and isinstance(budget.period, BudgetPeriod)
    )


def deduplicate_budgets(budgets: Iterable[Budget]) -> list[Budget]:
    """Keep one budget per category.

    The most recently updated budget wins (``updated_at``, falling back to
    ``created_at``). Without timestamps, or on equal timestamps, the later
    record in the input wins. Output keeps first-seen category order.
    """
    chosen: dict[str, tuple[tuple[bool, datetime, int], Budget]] = {}

    for position, budget in enumerate(budgets):
        if not _is_valid(budget):
            logger.warning("Skipping malformed budget: %r", budget)
            continue

        modified = budget.last_modified
        rank = (modified is not None, modified or datetime.min, position)
        current = chosen.get(budget.category)
        if current is None or rank >= current[0]:
            if current is not None:
                logger.debug(
                    "Budget %s supersedes %s for category %s",
                    budget.id,
                    current[1].id,
                    budget.category,
                )
            chosen[budget.category] = (rank, budget)

    return [budget for _, budget in chosen.values()]


def to_monthly_amount(amount: Decimal, period: BudgetPeriod) -> Decimal:
    """Monthly-equivalent of a budget amount."""
    if period == BudgetPeriod.YEARLY:
        return amount / 12
    return amount


def calculate_percentage(spent: Decimal, budget_amount: Decimal) -> Decimal:
    """Spent as a percentage of budget; 0 when the budget is not positive."""
    if budget_amount <= 0:
        return Decimal(0)
    return spent / budget_amount * 100


def classify_utilization(percentage: Decimal) -> BudgetState:
    """Map a utilization percentage to a status.

    <= 80 is on track, (80, 100] is a warning, > 100 is over.
    """
    if percentage > OVER_THRESHOLD:
        return BudgetState.OVER
    if percentage > WARNING_THRESHOLD:
        return BudgetState.WARNING
    return BudgetState.ON_TRACK


def evaluate_budget(budget: Budget, spent: Decimal) -> BudgetUtilization:
    """Budget vs actual for a single budget."""
    monthly = to_monthly_amount(budget.amount, budget.period)
    percentage = calculate_percentage(spent, monthly)
    return BudgetUtilization(
        category=budget.category,
        budget_amount=monthly,
        spent_amount=spent,
        remaining=monthly - spent,
        percentage=percentage,
        status=classify_utilization(percentage),
    )


def evaluate_budgets(
    budgets: Iterable[Budget],
    category_spend: Mapping[str, Decimal] | Iterable[CategorySpend],
) -> list[BudgetUtilization]:
    """Evaluate every budget against outflow per category.

    Args:
        budgets: Budgets, possibly with duplicates per category.
        category_spend: Outflow per category for the period, either as a
            mapping or as CategorySpend entries.

    Returns:
        Utilizations ordered by spent descending, ties by category ascending.
    """
    if isinstance(category_spend, Mapping):
        spend = dict(category_spend)
    else:
        spend = {}
        for entry in category_spend:
            spend[entry.category] = spend.get(entry.category, Decimal(0)) + entry.amount

    utilizations = [
        evaluate_budget(budget, spend.get(budget.category, Decimal(0)))
        for budget in deduplicate_budgets(budgets)
    ]
    utilizations.sort(key=lambda u: (-u.spent_amount, u.category))
    return utilizations


def summarize_budget_status(
    budgets: Iterable[Budget],
    utilizations: Iterable[BudgetUtilization],
    total_spent: Decimal,
) -> BudgetStatus:
    """Aggregate budget position.

    Args:
        budgets: Budgets to total (deduplicated here).
        utilizations: Evaluated utilizations, used to count overruns.
        total_spent: All outflow for the period, budgeted or not.
    """
    total_budget = sum(
        (to_monthly_amount(b.amount, b.period) for b in deduplicate_budgets(budgets)),
        Decimal(0),
    )
    over = sum(1 for u in utilizations if u.status == BudgetState.OVER)
    return BudgetStatus(
        total_budget=total_budget,
        total_spent=total_spent,
        percentage=calculate_percentage(total_spent, total_budget),
        over_budget_categories=over,
    )


def build_budget_alerts(utilizations: Iterable[BudgetUtilization]) -> list[BudgetAlert]:
    """Alerts for categories in Warning or Over, in input order."""
    alerts: list[BudgetAlert] = []
    for u in utilizations:
        if u.status == BudgetState.OVER:
            message = f"{u.category}: over budget by {abs(u.remaining):.2f}"
        elif u.status == BudgetState.WARNING:
            message = f"{u.category}: {u.percentage:.1f}% of budget used"
        else:
            continue
        alerts.append(
            BudgetAlert(
                category=u.category,
                status=u.status,
                percentage=u.percentage,
                message=message,
            )
        )
    return alerts
