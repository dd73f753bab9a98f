"""
CSV export of the subscription ledger.

Rows follow ledger order, not display order. Notes are always quoted;
name and project are quoted only when they contain a delimiter, a quote
or a line break.
"""

from pathlib import Path
from typing import List, Sequence, Union

from dev_expense_tracker.storage.models import Subscription

EXPORT_FILENAME = "dev-expenses.csv"

HEADERS = [
    "Name",
    "Monthly Cost",
    "Original Cost",
    "Billing Cycle",
    "Category",
    "Project",
    "Notes",
    "Unused",
    "Created",
]


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _escape(value: str) -> str:
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return _quote(value)
    return value


def _row(sub: Subscription) -> List[str]:
    return [
        _escape(sub.name),
        f"{sub.cost_monthly:.2f}",
        f"{sub.original_cost:.2f}",
        sub.billing_cycle.value,
        sub.category.value,
        _escape(sub.project),
        _quote(sub.notes),
        "Yes" if sub.unused else "No",
        sub.created_at,
    ]


def render_csv(subscriptions: Sequence[Subscription]) -> str:
    """Render the ledger as CSV text (header plus one line per entry)."""
    lines = [",".join(HEADERS)]
    lines.extend(",".join(_row(sub)) for sub in subscriptions)
    return "\n".join(lines)


def export_csv_bytes(subscriptions: Sequence[Subscription]) -> bytes:
    """Render the ledger as UTF-8 encoded CSV."""
    return render_csv(subscriptions).encode("utf-8")


def export_csv(
    subscriptions: Sequence[Subscription],
    directory: Union[str, Path] = ".",
    filename: str = EXPORT_FILENAME,
) -> Path:
    """Write the ledger to a CSV file.

    Args:
        subscriptions: Ledger snapshot in ledger order
        directory: Directory to write into (created if missing)
        filename: Name of the exported file

    Returns:
        Path of the written file

    Raises:
        OSError: If the file cannot be written
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_bytes(export_csv_bytes(subscriptions))
    return path
