"""Dashboard module: data collection and JSON export.

This module provides the data layer for the dashboard:
    1. Overview - totals, monthly inflow/outflow, budget status
    2. Categories - top categories and breakdown for the month
    3. Budgets - budget vs actual, alerts
    4. Trends - monthly outflow and cash flow series
    5. Transactions - most recent activity
"""

from finflow.dashboard.data_provider import DashboardData, DashboardDataProvider
from finflow.dashboard.export import generate_dashboard_json, save_dashboard, to_wire
from finflow.dashboard.source import JsonSnapshotSource, RawSnapshot, SnapshotSource

__all__ = [
    "DashboardData",
    "DashboardDataProvider",
    "JsonSnapshotSource",
    "RawSnapshot",
    "SnapshotSource",
    "generate_dashboard_json",
    "save_dashboard",
    "to_wire",
]
