"""
CLI interface for Dev Expense Tracker.

Provides command-line access to the subscription ledger, spend summary,
CSV export and feedback prompt.
"""

import sys
from dataclasses import dataclass
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from dev_expense_tracker.analytics.tracker import (
    CSV_EXPORTED,
    CTA_CLICK,
    AnalyticsTracker,
    disabled_tracker,
)
from dev_expense_tracker.config.loader import AppConfig, resolve_config
from dev_expense_tracker.core.aggregation import (
    category_breakdown,
    compute_totals,
    distinct_projects,
    project_breakdown,
)
from dev_expense_tracker.core.feedback import (
    VOTE_NO,
    VOTE_YES,
    feedback_status,
    record_vote,
    submit_feedback,
)
from dev_expense_tracker.core.ledger import Ledger
from dev_expense_tracker.core.sorting import SortKey, SortState, sort_subscriptions
from dev_expense_tracker.demo.seed_demo_data import seed_demo_data
from dev_expense_tracker.export.csv_exporter import export_csv
from dev_expense_tracker.storage.db import initialize_schema
from dev_expense_tracker.storage.models import BillingCycle, Category
from dev_expense_tracker.storage.repository import LedgerRepository, get_repository
from dev_expense_tracker.utils.logging import configure_logging

app = typer.Typer()
feedback_app = typer.Typer(help="Tell us whether this tool was helpful.")
app.add_typer(feedback_app, name="feedback")
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_FAIL = 1


@dataclass
class CliState:
    """Objects shared by every command of one invocation."""
    config: AppConfig
    repository: LedgerRepository
    tracker: AnalyticsTracker

    def ledger(self) -> Ledger:
        return Ledger(self.repository, tracker=self.tracker)


def _state(ctx: typer.Context) -> CliState:
    return ctx.find_root().obj


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to YAML config file (defaults to ./dev-expense-tracker.yaml if present)"
    ),
):
    """Dev Expense Tracker CLI."""
    try:
        app_config = resolve_config(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    configure_logging(app_config.logging.level, json_output=app_config.logging.json)
    tracker = AnalyticsTracker() if app_config.analytics.enabled else disabled_tracker()
    ctx.obj = CliState(
        config=app_config,
        repository=get_repository(app_config.storage.db_path),
        tracker=tracker,
    )

    if ctx.invoked_subcommand is None:
        console.print("Dev Expense Tracker - Stop bleeding money on forgotten subscriptions")
        console.print("Run `dev-expense-tracker init` to get started, or use --help to see available commands")


def _format_currency(amount: float) -> str:
    """Format currency with proper symbols and formatting."""
    return f"${amount:,.2f}"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


@app.command()
def init(ctx: typer.Context):
    """Initialize the local ledger database."""
    state = _state(ctx)
    try:
        initialize_schema(state.config.storage.db_path)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    state.tracker.track(CTA_CLICK, "try_it_now")
    console.print(f"[green]✓[/] Ledger initialized at {state.config.storage.db_path}")


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Subscription name, e.g. 'Vercel Pro'"),
    cost: str = typer.Argument(..., help="Cost per billing cycle, e.g. 19.99"),
    cycle: BillingCycle = typer.Option(
        BillingCycle.MONTHLY,
        "--cycle",
        case_sensitive=False,
        help="Billing cycle the cost refers to"
    ),
    category: Category = typer.Option(
        Category.SAAS,
        "--category",
        case_sensitive=False,
        help="Subscription category"
    ),
    project: str = typer.Option("", "--project", "-p", help="Project the cost belongs to"),
    notes: str = typer.Option("", "--notes", "-n", help="Optional notes"),
    unused: bool = typer.Option(False, "--unused", help="Mark as unused/dormant"),
):
    """Add a subscription to the ledger."""
    ledger = _state(ctx).ledger()
    sub = ledger.add(name, cost, cycle, category, project, notes, unused)
    if sub is None:
        console.print(
            "[yellow]Subscription not added:[/] name must not be blank and cost must be a number > 0"
        )
        sys.exit(EXIT_CODE_FAIL)

    console.print(
        f"[green]✓[/] Added [bold]{sub.name}[/] at {_format_currency(sub.cost_monthly)}/mo "
        f"[dim]({sub.id})[/]"
    )


@app.command("list")
def list_subscriptions(
    ctx: typer.Context,
    sort: SortKey = typer.Option(SortKey.COST, "--sort", "-s", help="Sort key"),
    ascending: bool = typer.Option(False, "--ascending", "-a", help="Reverse the default order"),
):
    """List subscriptions."""
    subs = _state(ctx).ledger().subscriptions
    if not subs:
        console.print("No subscriptions yet. Add your first one to start tracking.")
        return

    table = Table(title="Subscriptions")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Project")
    table.add_column("Billed", justify="right")
    table.add_column("Monthly", justify="right")
    table.add_column("Status")

    for sub in sort_subscriptions(subs, SortState(key=sort, ascending=ascending)):
        per = "yr" if sub.billing_cycle == BillingCycle.ANNUAL else "mo"
        table.add_row(
            sub.id,
            sub.name,
            sub.category.value,
            sub.project,
            f"{_format_currency(sub.original_cost)}/{per}",
            _format_currency(sub.cost_monthly),
            "[yellow]Unused[/]" if sub.unused else "Active",
        )
    console.print(table)


@app.command()
def toggle(ctx: typer.Context, subscription_id: str = typer.Argument(..., help="Subscription ID")):
    """Flip a subscription between active and unused."""
    ledger = _state(ctx).ledger()
    ledger.toggle_unused(subscription_id)
    sub = ledger.get(subscription_id)
    if sub is None:
        console.print(f"[yellow]No subscription with ID {subscription_id}[/]")
        return
    status = "unused" if sub.unused else "active"
    console.print(f"[green]✓[/] {sub.name} marked {status}")


@app.command()
def delete(ctx: typer.Context, subscription_id: str = typer.Argument(..., help="Subscription ID")):
    """Delete a subscription."""
    ledger = _state(ctx).ledger()
    sub = ledger.get(subscription_id)
    ledger.delete(subscription_id)
    if sub is None:
        console.print(f"[yellow]No subscription with ID {subscription_id}[/]")
        return
    console.print(f"[green]✓[/] Deleted {sub.name}")


@app.command()
def summary(ctx: typer.Context):
    """Show monthly/annual burn, wasted spend and breakdowns."""
    subs = _state(ctx).ledger().subscriptions
    totals = compute_totals(subs)

    console.print("\n[bold]Dev Expense Summary[/bold]")
    console.print("-" * 40)
    console.print(f"Monthly burn: {_format_currency(totals.total_monthly)}")
    console.print(f"Annual burn: {_format_currency(totals.total_annual)}")
    console.print(f"Active subscriptions: {totals.active_count}")
    console.print(f"Wasted / mo: {_format_currency(totals.wasted_monthly)}")

    if totals.wasted_monthly > 0:
        console.print(
            f"\n[bold yellow]You are wasting {_format_currency(totals.wasted_monthly)}/mo "
            f"on {totals.unused_count} unused subscription{_plural(totals.unused_count)}[/]"
        )

    if not subs:
        return

    for title, entries in (
        ("By Category", category_breakdown(subs)),
        ("By Project", project_breakdown(subs)),
    ):
        table = Table(title=title)
        table.add_column("Group")
        table.add_column("Monthly", justify="right")
        for entry in entries:
            table.add_row(entry.key, f"{_format_currency(entry.monthly)}/mo")
        console.print(table)


@app.command()
def projects(ctx: typer.Context):
    """List the project labels in use."""
    names = distinct_projects(_state(ctx).ledger().subscriptions)
    if not names:
        console.print("No projects yet.")
        return
    for name in names:
        console.print(name)


@app.command()
def export(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to write the CSV file into"
    ),
):
    """Export the ledger to dev-expenses.csv."""
    state = _state(ctx)
    subs = state.ledger().subscriptions
    if not subs:
        console.print("[yellow]Nothing to export yet.[/]")
        return

    directory = output or state.config.export.directory
    try:
        path = export_csv(subs, directory, state.config.export.filename)
    except OSError as e:
        console.print(f"[red]Error writing export:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    state.tracker.track(CSV_EXPORTED)
    console.print(f"[green]✓[/] Exported {len(subs)} subscription{_plural(len(subs))} to {path}")


def _print_thanks(repository: LedgerRepository) -> None:
    console.print("Thanks for the feedback!")
    status = feedback_status(repository)
    if status.helpful_count > 0:
        console.print(f"{status.helpful_count} people found this tool helpful")


@feedback_app.command("vote")
def feedback_vote(
    ctx: typer.Context,
    vote: str = typer.Argument(..., help="'yes' or 'no'"),
):
    """Answer "Was this tool helpful?"."""
    repository = _state(ctx).repository
    if repository.has_voted():
        _print_thanks(repository)
        return
    vote = vote.lower()
    if vote not in (VOTE_YES, VOTE_NO):
        console.print("[yellow]Vote must be 'yes' or 'no'[/]")
        sys.exit(EXIT_CODE_FAIL)
    record_vote(repository, vote)
    console.print("Any suggestions? Run `dev-expense-tracker feedback submit --comment \"...\"`")


@feedback_app.command("submit")
def feedback_submit(
    ctx: typer.Context,
    comment: str = typer.Option("", "--comment", "-m", help="Tell us what you think"),
):
    """Send an optional comment and finish the feedback prompt."""
    repository = _state(ctx).repository
    submit_feedback(repository, comment)
    _print_thanks(repository)


@feedback_app.command("status")
def feedback_status_command(ctx: typer.Context):
    """Show whether feedback was already given."""
    repository = _state(ctx).repository
    if repository.has_voted():
        _print_thanks(repository)
    else:
        console.print("Was this tool helpful? Run `dev-expense-tracker feedback vote yes|no`")


@app.command("seed-demo")
def seed_demo(ctx: typer.Context):
    """Add a few example subscriptions."""
    added = seed_demo_data(_state(ctx).ledger())
    console.print(f"[green]✓[/] Demo data inserted ({len(added)} subscriptions)")


if __name__ == "__main__":
    app()
