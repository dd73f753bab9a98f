"""
Best-effort usage analytics.

Events are handed to a sink and forgotten. A missing sink or a failing
sink never changes what the caller does.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from dev_expense_tracker.utils.logging import get_logger

logger = get_logger(__name__)

SUBSCRIPTION_ADDED = "subscription_added"
SUBSCRIPTION_MARKED_UNUSED = "subscription_marked_unused"
CSV_EXPORTED = "csv_exported"
CTA_CLICK = "cta_click"


@dataclass(frozen=True)
class AnalyticsEvent:
    """A single analytics ping."""
    action: str
    label: Optional[str] = None
    category: str = "engagement"


EventSink = Callable[[AnalyticsEvent], None]


def log_sink(event: AnalyticsEvent) -> None:
    """Default sink: write the event to the structured log."""
    logger.info(
        "analytics_event",
        action=event.action,
        event_category=event.category,
        event_label=event.label,
    )


class AnalyticsTracker:
    """Fire-and-forget event emitter.

    Args:
        sink: Receives each event; None disables analytics
    """

    def __init__(self, sink: Optional[EventSink] = log_sink):
        self.sink = sink

    def track(self, action: str, label: Optional[str] = None) -> None:
        """Emit an event if a sink is configured. Never raises."""
        if self.sink is None:
            return
        try:
            self.sink(AnalyticsEvent(action=action, label=label))
        except Exception as e:
            logger.debug("analytics_sink_failed", action=action, error=str(e))


def disabled_tracker() -> AnalyticsTracker:
    """Tracker that drops every event."""
    return AnalyticsTracker(sink=None)
