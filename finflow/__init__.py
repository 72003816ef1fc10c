"""FinFlow: budget and analytics aggregation for personal finance data."""

__version__ = "0.1.0"
