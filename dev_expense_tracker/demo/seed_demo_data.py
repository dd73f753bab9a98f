# dev_expense_tracker/demo/seed_demo_data.py

from typing import List

from dev_expense_tracker.core.ledger import Ledger
from dev_expense_tracker.storage.models import BillingCycle, Category, Subscription

DEMO_SUBSCRIPTIONS = [
    dict(name="Vercel Pro", raw_cost="20", cycle=BillingCycle.ANNUAL, category=Category.SAAS),
    dict(
        name="API Gateway",
        raw_cost="15",
        cycle=BillingCycle.MONTHLY,
        category=Category.API,
        project="proj-a",
        unused=True,
    ),
    dict(
        name="DigitalOcean Droplet",
        raw_cost="12",
        cycle=BillingCycle.MONTHLY,
        category=Category.INFRASTRUCTURE,
        project="proj-a",
        notes="staging box",
    ),
    dict(
        name="OpenAI API",
        raw_cost="40",
        cycle=BillingCycle.MONTHLY,
        category=Category.API,
        project="my-saas-app",
    ),
    dict(
        name="Domain renewal",
        raw_cost="14.99",
        cycle=BillingCycle.ANNUAL,
        category=Category.OTHER,
        project="my-saas-app",
    ),
]


def seed_demo_data(ledger: Ledger) -> List[Subscription]:
    """Add the demo subscriptions through the normal add path."""
    added = []
    for entry in DEMO_SUBSCRIPTIONS:
        sub = ledger.add(**entry)
        if sub is not None:
            added.append(sub)
    return added
