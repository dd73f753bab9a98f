"""
Data models for storage layer.

Defines the subscription ledger entries and the feedback record, plus
their JSON-ready dictionary form.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List

from dev_expense_tracker.core.pricing import monthly_cost


class BillingCycle(Enum):
    """How often a subscription is billed."""
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def months(self) -> int:
        """Number of months covered by one billing cycle."""
        return 12 if self is BillingCycle.ANNUAL else 1


class Category(Enum):
    """Subscription categories."""
    API = "API"
    SAAS = "SaaS"
    INFRASTRUCTURE = "Infrastructure"
    OTHER = "Other"


@dataclass(frozen=True)
class Subscription:
    """A recurring software subscription in the ledger.

    cost_monthly is derived from original_cost and billing_cycle and is
    recomputed whenever a record is built from stored data.
    """
    id: str
    name: str
    cost_monthly: float
    billing_cycle: BillingCycle
    original_cost: float
    category: Category
    project: str
    notes: str
    unused: bool
    created_at: str

    def __post_init__(self):
        """Validate ledger invariants."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")
        if not math.isfinite(self.original_cost) or self.original_cost <= 0:
            raise ValueError("original_cost must be > 0")

    def with_unused(self, unused: bool) -> "Subscription":
        """Return a copy with the unused flag replaced."""
        return replace(self, unused=unused)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored record shape."""
        return {
            "id": self.id,
            "name": self.name,
            "costMonthly": self.cost_monthly,
            "billingCycle": self.billing_cycle.value,
            "originalCost": self.original_cost,
            "category": self.category.value,
            "project": self.project,
            "notes": self.notes,
            "unused": self.unused,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        """Build a subscription from a stored record.

        Raises:
            ValueError: If the record does not have the expected structure
        """
        if not isinstance(data, dict):
            raise ValueError("Subscription record must be an object")

        for key in ("id", "name", "billingCycle", "category", "createdAt"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"'{key}' must be a string")
        for key in ("project", "notes"):
            if not isinstance(data.get(key, ""), str):
                raise ValueError(f"'{key}' must be a string")

        original_cost = data.get("originalCost")
        if isinstance(original_cost, bool) or not isinstance(original_cost, (int, float)):
            raise ValueError("'originalCost' must be a number")
        unused = data.get("unused", False)
        if not isinstance(unused, bool):
            raise ValueError("'unused' must be a boolean")

        try:
            original_cost = float(original_cost)
        except OverflowError:
            raise ValueError("'originalCost' is out of range")
        billing_cycle = BillingCycle(data["billingCycle"])
        if not math.isfinite(original_cost) or original_cost <= 0:
            raise ValueError("'originalCost' must be > 0")

        return cls(
            id=data["id"],
            name=data["name"],
            cost_monthly=monthly_cost(original_cost, billing_cycle.months),
            billing_cycle=billing_cycle,
            original_cost=original_cost,
            category=Category(data["category"]),
            project=data.get("project", ""),
            notes=data.get("notes", ""),
            unused=unused,
            created_at=data["createdAt"],
        )


@dataclass(frozen=True)
class FeedbackRecord:
    """Aggregate of "was this tool helpful?" votes and comments.

    Counts only ever grow and comments are append-only, so updates return
    a new record instead of mutating this one.
    """
    yes: int = 0
    no: int = 0
    comments: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate counts are non-negative."""
        if self.yes < 0:
            raise ValueError("yes cannot be negative")
        if self.no < 0:
            raise ValueError("no cannot be negative")

    def with_vote(self, helpful: bool) -> "FeedbackRecord":
        """Return a copy with one more yes or no vote."""
        if helpful:
            return replace(self, yes=self.yes + 1, comments=list(self.comments))
        return replace(self, no=self.no + 1, comments=list(self.comments))

    def with_comment(self, comment: str) -> "FeedbackRecord":
        """Return a copy with the comment appended."""
        return replace(self, comments=[*self.comments, comment])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored record shape."""
        return {"yes": self.yes, "no": self.no, "comments": list(self.comments)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackRecord":
        """Build a feedback record from stored data.

        Raises:
            ValueError: If the record does not have the expected structure
        """
        if not isinstance(data, dict):
            raise ValueError("Feedback record must be an object")
        yes, no, comments = data.get("yes"), data.get("no"), data.get("comments")
        for name, value in (("yes", yes), ("no", no)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"'{name}' must be an integer")
        if not isinstance(comments, list) or not all(isinstance(c, str) for c in comments):
            raise ValueError("'comments' must be a list of strings")
        return cls(yes=yes, no=no, comments=list(comments))
