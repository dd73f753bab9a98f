"""
Unit tests for spend aggregation.

Tests totals, breakdown grouping and ordering, and distinct projects.
"""

import random

import pytest

from dev_expense_tracker.core.aggregation import (
    UNASSIGNED_PROJECT,
    BreakdownEntry,
    category_breakdown,
    compute_totals,
    distinct_projects,
    project_breakdown,
)
from dev_expense_tracker.storage.models import BillingCycle, Category, Subscription


def sub(sub_id, cost, category=Category.SAAS, project="", unused=False) -> Subscription:
    """Build a monthly subscription."""
    return Subscription(
        id=sub_id,
        name=f"Service {sub_id}",
        cost_monthly=cost,
        billing_cycle=BillingCycle.MONTHLY,
        original_cost=cost,
        category=category,
        project=project,
        notes="",
        unused=unused,
        created_at="2024-01-01T12:00:00.000Z",
    )


@pytest.fixture
def ledger():
    return [
        sub("1", 1.67),
        sub("2", 15.0, Category.API, "proj-a", unused=True),
        sub("3", 12.0, Category.INFRASTRUCTURE, "proj-a"),
        sub("4", 40.0, Category.API, "my-saas-app"),
        sub("5", 1.25, Category.OTHER, "my-saas-app", unused=True),
    ]


class TestTotals:
    """Test headline totals."""

    def test_empty_ledger(self):
        """Verify an empty ledger totals zero."""
        totals = compute_totals([])
        assert totals.total_monthly == 0
        assert totals.total_annual == 0
        assert totals.active_count == 0
        assert totals.unused_count == 0
        assert totals.wasted_monthly == 0

    def test_totals(self, ledger):
        """Verify burn, active count and waste."""
        totals = compute_totals(ledger)
        assert totals.total_monthly == pytest.approx(69.92)
        assert totals.total_annual == pytest.approx(69.92 * 12)
        assert totals.active_count == 3
        assert totals.unused_count == 2
        assert totals.wasted_monthly == pytest.approx(16.25)

    def test_no_waste_without_unused(self, ledger):
        """Verify wasted spend is exactly zero when nothing is unused."""
        active_only = [s for s in ledger if not s.unused]
        assert compute_totals(active_only).wasted_monthly == 0

    def test_total_is_order_independent(self, ledger):
        """Verify shuffling the ledger does not change the total."""
        shuffled = list(ledger)
        random.Random(7).shuffle(shuffled)
        assert compute_totals(shuffled).total_monthly == pytest.approx(
            compute_totals(ledger).total_monthly
        )

    def test_repeatable(self, ledger):
        """Verify repeated calls give identical results."""
        assert compute_totals(ledger) == compute_totals(ledger)


class TestBreakdowns:
    """Test category and project breakdowns."""

    def test_category_breakdown(self, ledger):
        """Verify grouping by category, largest first."""
        breakdown = category_breakdown(ledger)
        assert [e.key for e in breakdown] == ["API", "Infrastructure", "SaaS", "Other"]
        assert breakdown[0].monthly == pytest.approx(55.0)

    def test_project_breakdown_groups_unassigned(self, ledger):
        """Verify empty projects are grouped as Unassigned."""
        breakdown = project_breakdown(ledger)
        assert breakdown == [
            BreakdownEntry("my-saas-app", pytest.approx(41.25)),
            BreakdownEntry("proj-a", pytest.approx(27.0)),
            BreakdownEntry(UNASSIGNED_PROJECT, pytest.approx(1.67)),
        ]

    def test_ties_keep_first_encounter_order(self):
        """Verify equal sums keep the order groups first appeared in."""
        ledger = [
            sub("1", 10.0, Category.OTHER),
            sub("2", 10.0, Category.API),
            sub("3", 10.0, Category.SAAS),
        ]
        assert [e.key for e in category_breakdown(ledger)] == ["Other", "API", "SaaS"]

    def test_breakdowns_sum_to_total(self, ledger):
        """Verify every breakdown accounts for the whole burn."""
        total = compute_totals(ledger).total_monthly
        assert sum(e.monthly for e in category_breakdown(ledger)) == pytest.approx(total)
        assert sum(e.monthly for e in project_breakdown(ledger)) == pytest.approx(total)

    def test_empty_ledger_has_no_groups(self):
        """Verify empty ledgers produce empty breakdowns."""
        assert category_breakdown([]) == []
        assert project_breakdown([]) == []

    def test_breakdowns_are_repeatable(self, ledger):
        """Verify repeated calls give identical results."""
        assert category_breakdown(ledger) == category_breakdown(ledger)
        assert project_breakdown(ledger) == project_breakdown(ledger)


class TestDistinctProjects:
    """Test the project picker list."""

    def test_distinct_projects(self, ledger):
        """Verify non-empty projects in first-seen order without duplicates."""
        assert distinct_projects(ledger) == ["proj-a", "my-saas-app"]

    def test_no_projects(self):
        """Verify ledgers without projects give an empty list."""
        assert distinct_projects([sub("1", 1.0)]) == []
