"""Dashboard summarizer.

Composes the aggregator and budget evaluator into one snapshot for a
reference date.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from finflow.core.models import Budget, DashboardSnapshot, Transaction, TransactionKind
from finflow.engine.aggregator import (
    filter_current_month,
    group_by_category,
    sum_by,
    valid_transactions,
)
from finflow.engine.budgets import (
    build_budget_alerts,
    evaluate_budgets,
    summarize_budget_status,
)
from finflow.engine.periods import coerce_reference_date

logger = logging.getLogger(__name__)

DEFAULT_TOP_CATEGORIES = 5
DEFAULT_RECENT_TRANSACTIONS = 5


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = DEFAULT_RECENT_TRANSACTIONS,
) -> list[Transaction]:
    """Most recent transactions by date.

    The sort is stable: transactions with the same date keep their input
    order.
    """
    ordered = sorted(valid_transactions(transactions), key=lambda tx: tx.date, reverse=True)
    return ordered[:limit]


def summarize(
    transactions: Iterable[Transaction],
    budgets: Iterable[Budget],
    reference_date: date | datetime | str,
    *,
    top_n: int = DEFAULT_TOP_CATEGORIES,
    recent_n: int = DEFAULT_RECENT_TRANSACTIONS,
) -> DashboardSnapshot:
    """Build the dashboard snapshot.

    Totals cover all time; monthly figures, top categories and budget
    utilization cover the reference date's month. Empty input produces a
    zero-valued snapshot.

    Args:
        transactions: Normalized transactions.
        budgets: Normalized budgets.
        reference_date: Date defining the "current" month.
        top_n: Number of top spending categories.
        recent_n: Number of recent transactions.

    Returns:
        DashboardSnapshot.

    Raises:
        InvalidReferenceDateError: If reference_date cannot be parsed.
    """
    reference = coerce_reference_date(reference_date)
    all_transactions = list(valid_transactions(transactions))
    budget_list = list(budgets)

    total_inflow = sum_by(all_transactions, TransactionKind.INFLOW)
    total_outflow = sum_by(all_transactions, TransactionKind.OUTFLOW)

    month_transactions = filter_current_month(all_transactions, reference)
    monthly_inflow = sum_by(month_transactions, TransactionKind.INFLOW)
    monthly_outflow = sum_by(month_transactions, TransactionKind.OUTFLOW)

    month_spend = group_by_category(month_transactions, TransactionKind.OUTFLOW)
    utilizations = evaluate_budgets(budget_list, month_spend)
    budget_status = summarize_budget_status(budget_list, utilizations, monthly_outflow)

    logger.debug(
        "Summarized %d transactions, %d budgets for %04d-%02d",
        len(all_transactions),
        len(utilizations),
        reference.year,
        reference.month,
    )

    return DashboardSnapshot(
        reference_date=reference,
        total_inflow=total_inflow,
        total_outflow=total_outflow,
        net_balance=total_inflow - total_outflow,
        monthly_inflow=monthly_inflow,
        monthly_outflow=monthly_outflow,
        budget_status=budget_status,
        top_categories=month_spend[:top_n],
        recent_transactions=recent_transactions(all_transactions, recent_n),
        budgets=utilizations,
        alerts=build_budget_alerts(utilizations),
    )
