"""Tests for budget evaluation."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from finflow.core.models import BudgetPeriod, BudgetState, BudgetUtilization, CategorySpend
from finflow.engine.budgets import (
    OVER_THRESHOLD,
    WARNING_THRESHOLD,
    build_budget_alerts,
    calculate_percentage,
    classify_utilization,
    deduplicate_budgets,
    evaluate_budget,
    evaluate_budgets,
    summarize_budget_status,
    to_monthly_amount,
)


class TestClassifyUtilization:
    """Status thresholds."""

    def test_thresholds_are_named_constants(self) -> None:
        assert WARNING_THRESHOLD == Decimal(80)
        assert OVER_THRESHOLD == Decimal(100)

    @pytest.mark.parametrize(
        ("percentage", "expected"),
        [
            (Decimal(0), BudgetState.ON_TRACK),
            (Decimal("80.0"), BudgetState.ON_TRACK),
            (Decimal("80.0000000001"), BudgetState.WARNING),
            (Decimal("100.0"), BudgetState.WARNING),
            (Decimal("100.0000000001"), BudgetState.OVER),
            (Decimal(250), BudgetState.OVER),
        ],
    )
    def test_boundaries(self, percentage: Decimal, expected: BudgetState) -> None:
        assert classify_utilization(percentage) == expected


class TestCalculatePercentage:
    """Percentage and division by zero."""

    def test_basic(self) -> None:
        assert calculate_percentage(Decimal(100), Decimal(80)) == Decimal(125)

    def test_zero_budget(self) -> None:
        assert calculate_percentage(Decimal(50), Decimal(0)) == Decimal(0)

    def test_negative_budget(self) -> None:
        assert calculate_percentage(Decimal(50), Decimal(-10)) == Decimal(0)

    def test_monotonic_in_spent(self) -> None:
        budget = Decimal("333.33")
        values = [calculate_percentage(Decimal(s), budget) for s in range(0, 1000, 7)]
        assert values == sorted(values)


class TestToMonthlyAmount:
    """Period normalization."""

    def test_monthly_unchanged(self) -> None:
        assert to_monthly_amount(Decimal(80), BudgetPeriod.MONTHLY) == Decimal(80)

    def test_yearly_divided_by_twelve(self) -> None:
        assert to_monthly_amount(Decimal(1200), BudgetPeriod.YEARLY) == Decimal(100)


class TestDeduplicateBudgets:
    """One budget per category."""

    def test_most_recently_updated_wins(self, make_budget) -> None:
        newer = make_budget("food", "200", updated_at=datetime(2025, 3, 1))
        older = make_budget("food", "100", updated_at=datetime(2025, 1, 1))
        result = deduplicate_budgets([newer, older])
        assert result == [newer]

    def test_created_at_used_when_no_update(self, make_budget) -> None:
        a = make_budget("food", "200", created_at=datetime(2025, 2, 1))
        b = make_budget("food", "100", created_at=datetime(2025, 1, 1))
        assert deduplicate_budgets([a, b]) == [a]

    def test_later_record_wins_without_timestamps(self, make_budget) -> None:
        first = make_budget("food", "100")
        second = make_budget("food", "150")
        assert deduplicate_budgets([first, second]) == [second]

    def test_timestamped_beats_untimestamped(self, make_budget) -> None:
        stamped = make_budget("food", "100", updated_at=datetime(2025, 1, 1))
        bare = make_budget("food", "150")
        assert deduplicate_budgets([stamped, bare]) == [stamped]

    def test_mixed_naive_and_aware_timestamps(self, make_budget) -> None:
        aware = make_budget("food", "200", updated_at=datetime(2025, 3, 1, tzinfo=timezone.utc))
        naive = make_budget("food", "100", updated_at=datetime(2025, 2, 1))
        assert aware.updated_at == datetime(2025, 3, 1)
        assert deduplicate_budgets([aware, naive]) == [aware]

    def test_keeps_distinct_categories(self, make_budget) -> None:
        budgets = [make_budget("food"), make_budget("rent"), make_budget("food")]
        assert [b.category for b in deduplicate_budgets(budgets)] == ["food", "rent"]


class TestEvaluateBudgets:
    """Budget vs actual."""

    def test_scenario_over_budget(self, make_budget) -> None:
        result = evaluate_budget(make_budget("food", "80"), Decimal(100))
        assert result.budget_amount == Decimal(80)
        assert result.spent_amount == Decimal(100)
        assert result.percentage == Decimal(125)
        assert result.remaining == Decimal(-20)
        assert result.status == BudgetState.OVER

    def test_scenario_yearly_warning(self, make_budget) -> None:
        budget = make_budget("rent", "1200", BudgetPeriod.YEARLY)
        result = evaluate_budget(budget, Decimal(90))
        assert result.budget_amount == Decimal(100)
        assert result.percentage == Decimal(90)
        assert result.status == BudgetState.WARNING

    def test_exact_boundaries(self, make_budget) -> None:
        assert evaluate_budget(make_budget(amount="100"), Decimal(80)).status == BudgetState.ON_TRACK
        assert evaluate_budget(make_budget(amount="100"), Decimal(100)).status == BudgetState.WARNING
        assert evaluate_budget(make_budget(amount="100"), Decimal("100.01")).status == BudgetState.OVER

    def test_missing_spend_is_zero(self, make_budget) -> None:
        result = evaluate_budgets([make_budget("travel", "50")], {})
        assert result[0].spent_amount == Decimal(0)
        assert result[0].remaining == Decimal(50)
        assert result[0].status == BudgetState.ON_TRACK

    def test_ordered_by_spent_desc(self, make_budget) -> None:
        budgets = [make_budget("a"), make_budget("b"), make_budget("c"), make_budget("d")]
        spend = {"a": Decimal(10), "b": Decimal(50), "c": Decimal(10)}
        result = evaluate_budgets(budgets, spend)
        assert [u.category for u in result] == ["b", "a", "c", "d"]

    def test_accepts_category_spend_list(self, make_budget) -> None:
        spend = [CategorySpend(category="food", amount=Decimal(40))]
        result = evaluate_budgets([make_budget("food", "50")], spend)
        assert result[0].percentage == Decimal(80)

    def test_deduplicates(self, make_budget) -> None:
        budgets = [make_budget("food", "100"), make_budget("food", "50")]
        result = evaluate_budgets(budgets, {"food": Decimal(40)})
        assert len(result) == 1
        assert result[0].budget_amount == Decimal(50)


class TestBudgetStatus:
    """Aggregate budget status and alerts."""

    def test_summary(self, make_budget) -> None:
        budgets = [
            make_budget("food", "80"),
            make_budget("rent", "1200", BudgetPeriod.YEARLY),
        ]
        utilizations = evaluate_budgets(budgets, {"food": Decimal(100)})
        status = summarize_budget_status(budgets, utilizations, Decimal(120))
        assert status.total_budget == Decimal(180)
        assert status.total_spent == Decimal(120)
        assert status.percentage == Decimal(120) / Decimal(180) * 100
        assert status.over_budget_categories == 1

    def test_empty(self) -> None:
        status = summarize_budget_status([], [], Decimal(0))
        assert status.total_budget == Decimal(0)
        assert status.percentage == Decimal(0)
        assert status.over_budget_categories == 0

    def test_alerts_only_for_warning_and_over(self) -> None:
        utilizations = [
            BudgetUtilization(category="food", budget_amount=Decimal(80), spent_amount=Decimal(100),
                              remaining=Decimal(-20), percentage=Decimal(125), status=BudgetState.OVER),
            BudgetUtilization(category="rent", budget_amount=Decimal(100), spent_amount=Decimal(90),
                              remaining=Decimal(10), percentage=Decimal(90), status=BudgetState.WARNING),
            BudgetUtilization(category="fun", budget_amount=Decimal(100), spent_amount=Decimal(10),
                              remaining=Decimal(90), percentage=Decimal(10), status=BudgetState.ON_TRACK),
        ]
        alerts = build_budget_alerts(utilizations)
        assert [(a.category, a.status) for a in alerts] == [
            ("food", BudgetState.OVER),
            ("rent", BudgetState.WARNING),
        ]
        assert alerts[0].message == "food: over budget by 20.00"
        assert alerts[1].message == "rent: 90.0% of budget used"
