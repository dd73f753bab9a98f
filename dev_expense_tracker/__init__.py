"""
Dev Expense Tracker.

Local ledger of recurring developer subscriptions with spend summaries,
waste detection and CSV export.
"""

__version__ = "0.1.0"
