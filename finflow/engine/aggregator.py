"""Transaction aggregation.

Sums, filters and groupings over normalized transactions. Nothing here
reads the clock: "current month" is always relative to an explicit
reference date.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import date, datetime
from decimal import Decimal

from finflow.core.models import (
    CategorySpend,
    MonthlyBucket,
    MonthlyFlow,
    Transaction,
    TransactionKind,
)
from finflow.engine.periods import MonthKey, is_same_month, iterate_months, month_key

logger = logging.getLogger(__name__)


def _is_valid(tx: object) -> bool:
    return (
        isinstance(tx, Transaction)
        and isinstance(tx.kind, TransactionKind)
        and isinstance(tx.amount, Decimal)
        and tx.amount.is_finite()
        and tx.amount > 0
        and isinstance(tx.date, datetime)
    )


def valid_transactions(transactions: Iterable[Transaction]) -> Iterator[Transaction]:
    """Yield well-formed transactions, skipping anything else.

    Malformed elements should have been rejected by the normalizer; if one
    slips through it is logged and left out of every total.
    """
    for tx in transactions:
        if _is_valid(tx):
            yield tx
        else:
            logger.warning("Skipping malformed transaction: %r", tx)


def _matching(
    transactions: Iterable[Transaction],
    kind: TransactionKind | None,
) -> Iterator[Transaction]:
    for tx in valid_transactions(transactions):
        if kind is None or tx.kind == kind:
            yield tx


def sum_by(
    transactions: Iterable[Transaction],
    kind: TransactionKind | None = None,
) -> Decimal:
    """Sum amounts of transactions of the given kind.

    Args:
        transactions: Normalized transactions.
        kind: INFLOW, OUTFLOW, or None for both.

    Returns:
        Total amount; 0 for empty input.
    """
    return sum((tx.amount for tx in _matching(transactions, kind)), Decimal(0))


def category_spend_map(
    transactions: Iterable[Transaction],
    kind: TransactionKind | None = TransactionKind.OUTFLOW,
) -> dict[str, Decimal]:
    """Category -> summed amount, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for tx in _matching(transactions, kind):
        totals[tx.category] = totals.get(tx.category, Decimal(0)) + tx.amount
    return totals


def group_by_category(
    transactions: Iterable[Transaction],
    kind: TransactionKind | None = None,
) -> list[CategorySpend]:
    """Group matching transactions by category.

    Returns:
        CategorySpend list ordered by amount descending, ties broken by
        category id ascending.
    """
    totals = category_spend_map(transactions, kind)
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [CategorySpend(category=cat, amount=amount) for cat, amount in ranked]


def group_by_month(
    transactions: Iterable[Transaction],
    kind: TransactionKind | None = None,
    fill_gaps: bool = False,
) -> list[MonthlyBucket]:
    """Group matching transactions by their own calendar month.

    Buckets are ordered by (year, month), so December 2024 comes before
    January 2025 regardless of how the labels would sort.

    Args:
        transactions: Normalized transactions.
        kind: INFLOW, OUTFLOW, or None for both.
        fill_gaps: Insert zero buckets for months without activity between
            the first and last month.

    Returns:
        MonthlyBucket list in chronological order.
    """
    totals: dict[MonthKey, Decimal] = {}
    for tx in _matching(transactions, kind):
        key = month_key(tx.date)
        totals[key] = totals.get(key, Decimal(0)) + tx.amount

    if not totals:
        return []

    keys = sorted(totals)
    if fill_gaps:
        keys = iterate_months(keys[0], keys[-1])

    return [
        MonthlyBucket(year=key.year, month=key.month, amount=totals.get(key, Decimal(0)))
        for key in keys
    ]


def monthly_cash_flow(
    transactions: Iterable[Transaction],
    fill_gaps: bool = False,
) -> list[MonthlyFlow]:
    """Inflow and outflow per calendar month, chronologically.

    With ``fill_gaps``, months without activity between the first and last
    month get zero rows.
    """
    inflow: dict[MonthKey, Decimal] = {}
    outflow: dict[MonthKey, Decimal] = {}

    for tx in valid_transactions(transactions):
        key = month_key(tx.date)
        target = inflow if tx.is_inflow else outflow
        target[key] = target.get(key, Decimal(0)) + tx.amount

    keys = sorted(set(inflow) | set(outflow))
    if fill_gaps and keys:
        keys = iterate_months(keys[0], keys[-1])

    return [
        MonthlyFlow(
            year=key.year,
            month=key.month,
            inflow=inflow.get(key, Decimal(0)),
            outflow=outflow.get(key, Decimal(0)),
        )
        for key in keys
    ]


def is_in_current_month(transaction: Transaction, reference_date: date | datetime) -> bool:
    """True if the transaction falls in the reference date's month."""
    return is_same_month(transaction.date, reference_date)


def filter_current_month(
    transactions: Iterable[Transaction],
    reference_date: date | datetime,
) -> list[Transaction]:
    """Transactions in the reference date's month, input order preserved."""
    return [
        tx for tx in valid_transactions(transactions)
        if is_in_current_month(tx, reference_date)
    ]


def calculate_category_share(amount: Decimal, total: Decimal) -> Decimal:
    """Category's share of total as a percentage (25 = 25%).

    Returns 0 when total is not positive.
    """
    if total <= 0:
        return Decimal(0)
    return (amount / total * 100).quantize(Decimal("0.1"))
