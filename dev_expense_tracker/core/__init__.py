"""
Core modules for Dev Expense Tracker.

This package contains the ledger mutations, cost normalization, spend
aggregation, display sorting and feedback handling.
"""
