"""
Spend aggregation over the subscription ledger.

All functions are pure and recompute from the snapshot they are given;
the same ledger always produces the same results.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

from dev_expense_tracker.storage.models import Subscription

UNASSIGNED_PROJECT = "Unassigned"


@dataclass(frozen=True)
class LedgerTotals:
    """Headline burn figures for the dashboard."""
    total_monthly: float
    total_annual: float
    active_count: int
    unused_count: int
    wasted_monthly: float


@dataclass(frozen=True)
class BreakdownEntry:
    """Monthly spend for one group of a breakdown."""
    key: str
    monthly: float


def compute_totals(subscriptions: Sequence[Subscription]) -> LedgerTotals:
    """Compute burn, active count and wasted spend.

    Args:
        subscriptions: Ledger snapshot

    Returns:
        LedgerTotals for the snapshot
    """
    total_monthly = 0.0
    wasted_monthly = 0.0
    unused_count = 0
    for sub in subscriptions:
        total_monthly += sub.cost_monthly
        if sub.unused:
            wasted_monthly += sub.cost_monthly
            unused_count += 1

    return LedgerTotals(
        total_monthly=total_monthly,
        total_annual=total_monthly * 12,
        active_count=len(subscriptions) - unused_count,
        unused_count=unused_count,
        wasted_monthly=wasted_monthly,
    )


def _breakdown(
    subscriptions: Iterable[Subscription],
    key_of: Callable[[Subscription], str],
) -> List[BreakdownEntry]:
    # dicts keep first-encounter order and sorted() is stable, so ties
    # stay in the order their group first appeared
    sums: Dict[str, float] = {}
    for sub in subscriptions:
        key = key_of(sub)
        sums[key] = sums.get(key, 0.0) + sub.cost_monthly
    ordered = sorted(sums.items(), key=lambda item: item[1], reverse=True)
    return [BreakdownEntry(key=key, monthly=monthly) for key, monthly in ordered]


def category_breakdown(subscriptions: Sequence[Subscription]) -> List[BreakdownEntry]:
    """Monthly spend per category, largest first."""
    return _breakdown(subscriptions, lambda sub: sub.category.value)


def project_breakdown(subscriptions: Sequence[Subscription]) -> List[BreakdownEntry]:
    """Monthly spend per project, largest first.

    Subscriptions without a project are grouped under "Unassigned".
    """
    return _breakdown(subscriptions, lambda sub: sub.project or UNASSIGNED_PROJECT)


def distinct_projects(subscriptions: Sequence[Subscription]) -> List[str]:
    """Non-empty project labels in first-seen order."""
    return list(dict.fromkeys(sub.project for sub in subscriptions if sub.project))
