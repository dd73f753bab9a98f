"""
Subscription ledger mutations.

Add, toggle and delete are total: invalid input is rejected silently and
unknown ids are ignored. Every applied change is persisted immediately
with exactly one write; rejected and no-op calls write nothing.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple, Union

from dev_expense_tracker.analytics.tracker import (
    SUBSCRIPTION_ADDED,
    SUBSCRIPTION_MARKED_UNUSED,
    AnalyticsTracker,
    disabled_tracker,
)
from dev_expense_tracker.storage.models import BillingCycle, Category, Subscription
from dev_expense_tracker.storage.repository import LedgerRepository
from dev_expense_tracker.utils.logging import get_logger

from .pricing import monthly_cost, parse_cost

logger = get_logger(__name__)


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _clean(text) -> str:
    return text.strip() if isinstance(text, str) else ""


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


class Ledger:
    """In-memory ledger bound to a repository.

    The ledger is loaded once at construction and saved after every
    applied change.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        tracker: Optional[AnalyticsTracker] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], str] = utc_timestamp,
    ):
        self.repository = repository
        self.tracker = tracker or disabled_tracker()
        self._id_factory = id_factory
        self._clock = clock
        self._subscriptions: List[Subscription] = repository.load()

    @property
    def subscriptions(self) -> Tuple[Subscription, ...]:
        """Snapshot of the ledger in insertion order."""
        return tuple(self._subscriptions)

    def __len__(self) -> int:
        return len(self._subscriptions)

    def get(self, subscription_id: str) -> Optional[Subscription]:
        """Return the subscription with this id, if any."""
        for sub in self._subscriptions:
            if sub.id == subscription_id:
                return sub
        return None

    def _commit(self, subscriptions: List[Subscription]) -> None:
        self._subscriptions = subscriptions
        self.repository.save(self._subscriptions)

    def add(
        self,
        name: str,
        raw_cost: Union[str, int, float],
        cycle: Union[BillingCycle, str] = BillingCycle.MONTHLY,
        category: Union[Category, str] = Category.SAAS,
        project: str = "",
        notes: str = "",
        unused: bool = False,
    ) -> Optional[Subscription]:
        """Validate and append a new subscription.

        Args:
            name: Display name; must be non-empty after trimming
            raw_cost: Cost as entered for one billing cycle
            cycle: Billing cycle the cost refers to
            category: Subscription category
            project: Optional project label
            notes: Optional notes
            unused: Whether the subscription starts flagged as unused

        Returns:
            The new subscription, or None if the input was rejected
        """
        name = _clean(name)
        cost = parse_cost(raw_cost)
        billing_cycle = _coerce_enum(BillingCycle, cycle)
        category_value = _coerce_enum(Category, category)
        if not name or cost is None or billing_cycle is None or category_value is None:
            logger.debug("subscription_rejected", name=name, raw_cost=str(raw_cost))
            return None

        subscription = Subscription(
            id=self._id_factory(),
            name=name,
            cost_monthly=monthly_cost(cost, billing_cycle.months),
            billing_cycle=billing_cycle,
            original_cost=cost,
            category=category_value,
            project=_clean(project),
            notes=_clean(notes),
            unused=bool(unused),
            created_at=self._clock(),
        )
        self._commit([*self._subscriptions, subscription])
        self.tracker.track(SUBSCRIPTION_ADDED)
        return subscription

    def toggle_unused(self, subscription_id: str) -> None:
        """Flip the unused flag of the matching subscription.

        Does nothing if the id is unknown.
        """
        updated = []
        marked_unused = None
        for sub in self._subscriptions:
            if sub.id == subscription_id and marked_unused is None:
                marked_unused = not sub.unused
                sub = sub.with_unused(marked_unused)
            updated.append(sub)

        if marked_unused is None:
            return
        self._commit(updated)
        if marked_unused:
            self.tracker.track(SUBSCRIPTION_MARKED_UNUSED)

    def delete(self, subscription_id: str) -> None:
        """Remove the matching subscription. Does nothing if the id is unknown."""
        remaining = [s for s in self._subscriptions if s.id != subscription_id]
        if len(remaining) == len(self._subscriptions):
            return
        self._commit(remaining)
