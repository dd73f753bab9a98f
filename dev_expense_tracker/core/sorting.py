"""
Display ordering for the ledger.

Every key has a natural order that is used when the direction is
descending (the default). Ascending reverses that order as a whole.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from dev_expense_tracker.storage.models import Subscription


class SortKey(Enum):
    """Columns the ledger can be ordered by."""
    NAME = "name"
    COST = "cost"
    PROJECT = "project"
    UNUSED = "unused"


def _text_key(text: str):
    # lowercase before uppercase when names differ only in case
    return (text.casefold(), text.swapcase())


_NATURAL_ORDER = {
    SortKey.NAME: (lambda sub: _text_key(sub.name), False),
    SortKey.COST: (lambda sub: sub.cost_monthly, True),
    SortKey.PROJECT: (lambda sub: _text_key(sub.project or ""), False),
    SortKey.UNUSED: (lambda sub: sub.unused, True),
}


@dataclass(frozen=True)
class SortState:
    """Current sort key and direction. Defaults to cost, descending."""
    key: SortKey = SortKey.COST
    ascending: bool = False

    def select(self, key: SortKey) -> "SortState":
        """Return the state after a sort key is selected.

        Selecting the current key toggles direction; selecting another key
        switches to it in descending direction.
        """
        if key == self.key:
            return SortState(key=self.key, ascending=not self.ascending)
        return SortState(key=key, ascending=False)


def sort_subscriptions(
    subscriptions: Sequence[Subscription],
    state: SortState = SortState(),
) -> List[Subscription]:
    """Return a sorted copy of the ledger for display.

    Args:
        subscriptions: Ledger snapshot (not modified)
        state: Sort key and direction

    Returns:
        New list in display order
    """
    key_func, reverse = _NATURAL_ORDER[state.key]
    ordered = sorted(subscriptions, key=key_func, reverse=reverse)
    if state.ascending:
        ordered.reverse()
    return ordered
