"""
Analytics for Dev Expense Tracker.

Best-effort event emission that never affects control flow.
"""

from .tracker import AnalyticsEvent, AnalyticsTracker, disabled_tracker

__all__ = ["AnalyticsEvent", "AnalyticsTracker", "disabled_tracker"]
