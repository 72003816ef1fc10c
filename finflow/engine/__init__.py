"""Aggregation engine: normalizer, aggregator, budgets, summarizer.

Every function here is pure and synchronous.
"""
