"""Shared fixtures for FinFlow tests."""

import json
from datetime import datetime
from decimal import Decimal
from itertools import count
from pathlib import Path

import pytest

from finflow.core.models import Budget, BudgetPeriod, Transaction, TransactionKind


@pytest.fixture
def make_transaction():
    """Factory for normalized transactions with sensible defaults."""
    ids = count(1)

    def _make(
        amount: str | int = "10.00",
        kind: TransactionKind = TransactionKind.OUTFLOW,
        category: str = "food",
        date: datetime = datetime(2025, 1, 15),
        description: str = "test",
        id: str | None = None,
    ) -> Transaction:
        return Transaction(
            id=id or f"tx-{next(ids)}",
            description=description,
            amount=Decimal(str(amount)),
            category=category,
            date=date,
            kind=kind,
        )

    return _make


@pytest.fixture
def make_budget():
    """Factory for normalized budgets."""
    ids = count(1)

    def _make(
        category: str = "food",
        amount: str | int = "100",
        period: BudgetPeriod = BudgetPeriod.MONTHLY,
        updated_at: datetime | None = None,
        created_at: datetime | None = None,
        id: str | None = None,
    ) -> Budget:
        return Budget(
            id=id or f"budget-{next(ids)}",
            category=category,
            amount=Decimal(str(amount)),
            period=period,
            updated_at=updated_at,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Snapshot export mixing vocabularies and one bad record."""
    payload = {
        "transactions": {
            "success": True,
            "transactions": [
                {
                    "_id": "a1",
                    "description": "Groceries",
                    "amount": 100,
                    "category": "food",
                    "type": "debit",
                    "date": "2025-01-05T10:00:00.000Z",
                },
                {
                    "_id": "a2",
                    "description": "Salary",
                    "amount": "50",
                    "category": "salary",
                    "type": "credit",
                    "date": "2025-01-01",
                },
                {
                    "id": "a3",
                    "description": "Cinema",
                    "amount": 30,
                    "category": "entertainment",
                    "type": "expense",
                    "date": "2024-12-20",
                },
                {
                    "_id": "bad",
                    "description": "Broken",
                    "amount": 10,
                    "category": "food",
                    "type": "debit",
                    "date": "not a date",
                },
            ],
        },
        "budgets": [
            {"_id": "b1", "category": "food", "amount": 80, "period": "monthly"},
            {"_id": "b2", "category": "rent", "amount": 1200, "period": "yearly"},
        ],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
