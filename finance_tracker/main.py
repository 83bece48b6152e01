"""Command-line entry point.

Wires the database, DAOs and services together (the composition root) and
exposes them as Typer commands. Every command applies due recurring
transactions before doing its own work.
"""
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.database.finance_dao import FinanceDAO
from finance_tracker.database.history_dao import HistoryDAO
from finance_tracker.database.preferences_dao import PreferencesDAO
from finance_tracker.models.transaction import RecurringInfo
from finance_tracker.services.category_service import CategoryService
from finance_tracker.services.data_service import DataService
from finance_tracker.services.errors import FinanceError
from finance_tracker.services.finance_store import FinanceStore
from finance_tracker.services.history_service import HistoryService
from finance_tracker.services.recurring_service import RecurringScheduler, RecurringService
from finance_tracker.services.report_service import ReportService
from finance_tracker.services.transaction_service import TransactionService
from finance_tracker.utils.app_config import database_path, get_db_folder, get_log_file, get_log_level
from finance_tracker.utils.constants import APP_NAME, RECURRING_CHECK_INTERVAL, UPCOMING_REMINDER_DAYS
from finance_tracker.utils.currency import format_currency, format_percentage, format_signed
from finance_tracker.utils.date_helpers import format_date, format_display_date, today_str
from finance_tracker.utils.logging_setup import configure_logging, get_logger

logger = get_logger(__name__)

app = typer.Typer(help=f"{APP_NAME}: income and expenses from the command line.")

# Commands that skip the startup recurring check. Generating before
# undo/redo would clear the redo stack.
_NO_RECURRING_CHECK = {"undo", "redo", "reset"}


@dataclass
class Services:
    db: DatabaseManager
    store: FinanceStore
    transactions: TransactionService
    categories: CategoryService
    recurring: RecurringService
    reports: ReportService
    data: DataService


def build_services(db_path: str | None = None) -> Services:
    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_path or database_path(get_db_folder()))

    # ── DAOs ─────────────────────────────────────────────────────────────────
    finance_dao = FinanceDAO(db)
    prefs_dao = PreferencesDAO(db)
    history_dao = HistoryDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    history = HistoryService(history_dao, finance_dao)
    store = FinanceStore(db, finance_dao, prefs_dao, history)
    return Services(
        db=db,
        store=store,
        transactions=TransactionService(store),
        categories=CategoryService(store),
        recurring=RecurringService(store),
        reports=ReportService(store),
        data=DataService(store),
    )


@app.callback()
def main(
    ctx: typer.Context,
    db_path: Optional[str] = typer.Option(None, "--db", help="Database file (default from config)."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING..."),
):
    configure_logging(log_level or get_log_level(), log_file=get_log_file())
    services = build_services(db_path)
    ctx.obj = services
    ctx.call_on_close(services.db.close)

    # ── Apply due recurring transactions ─────────────────────────────────────
    if ctx.invoked_subcommand in _NO_RECURRING_CHECK:
        return
    created = services.recurring.apply_due()
    if created:
        typer.echo(f"{len(created)} recurring transaction(s) added.")


def _fail(exc: Exception):
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _money(services: Services, amount: float) -> str:
    return format_currency(amount, services.store.preferences.currency)


def _signed(services: Services, tx) -> str:
    amount = tx.amount if tx.type == "income" else -tx.amount
    return format_signed(amount, services.store.preferences.currency)


@app.command()
def summary(
    ctx: typer.Context,
    month: Optional[int] = typer.Option(None, min=1, max=12, help="Month 1-12 (default: current)."),
    year: Optional[int] = typer.Option(None, help="Year (default: current)."),
):
    """Income, expense and balance for one month."""
    services: Services = ctx.obj
    s = services.reports.month_summary(None if month is None else month - 1, year)
    typer.echo(f"{s.year}-{s.month + 1:02d}")
    typer.echo(f"  Income:  {_money(services, s.total_income)}")
    typer.echo(f"  Expense: {_money(services, s.total_expense)}")
    typer.echo(f"  Balance: {_money(services, s.balance)}")
    for cat_id, total in sorted(s.category_summary.items(), key=lambda kv: -kv[1]):
        typer.echo(f"    {services.categories.resolve_name(cat_id):<20} {_money(services, total)}")


@app.command()
def year(ctx: typer.Context, year_: Optional[int] = typer.Argument(None, metavar="YEAR")):
    """Month-by-month totals for one year."""
    services: Services = ctx.obj
    s = services.reports.year_summary(year_)
    for m in s.monthly_summaries:
        typer.echo(
            f"{s.year}-{m.month + 1:02d}  {_money(services, m.total_income):>14}"
            f"  {_money(services, m.total_expense):>14}  {_money(services, m.balance):>14}"
        )
    typer.echo(
        f"Total    {_money(services, s.total_income):>14}"
        f"  {_money(services, s.total_expense):>14}  {_money(services, s.balance):>14}"
    )


@app.command("list")
def list_transactions(
    ctx: typer.Context,
    search: Optional[str] = typer.Option(None, "--search", "-s"),
    type_: Optional[str] = typer.Option(None, "--type", help="income or expense"),
    category: Optional[str] = typer.Option(None, "--category"),
    limit: int = typer.Option(20, "--limit", "-n"),
):
    """Most recent transactions, optionally filtered."""
    services: Services = ctx.obj
    txs = services.transactions.search(search, type_, category)
    txs = sorted(txs, key=lambda t: t.date, reverse=True)[:limit]
    fmt = services.store.preferences.date_format
    for t in txs:
        flag = f" ({t.recurring.frequency})" if t.recurring else ""
        typer.echo(
            f"{format_display_date(t.date, fmt)}  {_signed(services, t):>13}  "
            f"{services.categories.resolve_name(t.category_id):<16} {t.description}{flag}  [{t.id}]"
        )


@app.command()
def add(
    ctx: typer.Context,
    amount: float = typer.Argument(..., help="Positive amount."),
    description: str = typer.Argument(...),
    type_: str = typer.Option("expense", "--type", help="income or expense"),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default: today)."),
    category: Optional[str] = typer.Option(None, "--category", help="Category id (auto-detected if omitted)."),
    tags: Optional[List[str]] = typer.Option(None, "--tag"),
    repeat: Optional[str] = typer.Option(None, "--repeat", help="daily, weekly, monthly or yearly"),
    until: Optional[str] = typer.Option(None, "--until", help="Recurrence end date."),
):
    """Record a transaction."""
    services: Services = ctx.obj
    recurring = RecurringInfo(repeat, until) if repeat else None
    try:
        tx = services.transactions.add(
            amount, description, type_, date or today_str(),
            category_id=category, tags=tags, recurring=recurring,
        )
    except FinanceError as exc:
        _fail(exc)
    typer.echo(f"Added {tx.id} ({services.categories.resolve_name(tx.category_id)})")


@app.command()
def delete(ctx: typer.Context, tx_id: str):
    """Delete a transaction by id."""
    try:
        ctx.obj.transactions.delete(tx_id)
    except FinanceError as exc:
        _fail(exc)
    typer.echo(f"Deleted {tx_id}")


@app.command()
def categories(ctx: typer.Context):
    """List categories."""
    for c in ctx.obj.categories.get_all():
        typer.echo(f"{c.id:<16} {c.name:<20} {c.type:<8} {c.color}")


@app.command("add-category")
def add_category(
    ctx: typer.Context,
    name: str,
    type_: str = typer.Option("expense", "--type"),
    color: str = typer.Option("#888888", "--color"),
):
    try:
        cat = ctx.obj.categories.create(name, type_, color)
    except FinanceError as exc:
        _fail(exc)
    typer.echo(f"Added category {cat.id}")


@app.command("delete-category")
def delete_category(ctx: typer.Context, category_id: str):
    try:
        ctx.obj.categories.delete(category_id)
    except FinanceError as exc:
        _fail(exc)
    typer.echo(f"Deleted category {category_id}")


@app.command()
def suggest(ctx: typer.Context, description: str, type_: str = typer.Option("expense", "--type")):
    """Show the category the auto-categorizer would pick."""
    cat_id = ctx.obj.transactions.suggest_category(description, 0, type_)
    typer.echo(cat_id or "(no suggestion)")


@app.command()
def anomalies(ctx: typer.Context):
    """Categories whose spending jumped month over month."""
    services: Services = ctx.obj
    found = services.reports.anomalies()
    if not found:
        typer.echo("No unusual spending.")
    for a in found:
        typer.echo(
            f"{services.categories.resolve_name(a.category_id):<20} "
            f"{_money(services, a.amount):>12}  {format_percentage(a.percentage_change)}"
        )


@app.command()
def upcoming(
    ctx: typer.Context,
    days: int = typer.Option(UPCOMING_REMINDER_DAYS, "--days", help="Look-ahead window."),
):
    """Recurring transactions coming due soon."""
    services: Services = ctx.obj
    due = services.recurring.upcoming(days)
    if not due:
        typer.echo(f"Nothing due in the next {days} day(s).")
    fmt = services.store.preferences.date_format
    for tx, when in due:
        typer.echo(
            f"{format_display_date(format_date(when), fmt)}  {_signed(services, tx):>13}  "
            f"{tx.description} ({tx.recurring.frequency})"
        )


@app.command()
def undo(ctx: typer.Context):
    store: FinanceStore = ctx.obj.store
    if store.undo() is None:
        typer.echo("Nothing to undo.")
    else:
        typer.echo(f"Undone ({store.history_depth[0]} more step(s) available).")


@app.command()
def redo(ctx: typer.Context):
    store: FinanceStore = ctx.obj.store
    if store.redo() is None:
        typer.echo("Nothing to redo.")
    else:
        typer.echo(f"Redone ({store.history_depth[1]} more step(s) available).")


@app.command()
def export(
    ctx: typer.Context,
    fmt: str = typer.Option("json", "--format", help="json or csv"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
):
    """Export all data to stdout or a file."""
    data: DataService = ctx.obj.data
    if fmt not in ("json", "csv"):
        _fail(ValueError(f"Unknown format: {fmt}"))
    text = data.export_json() if fmt == "json" else data.export_csv()
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Exported to {output}")


@app.command("import")
def import_(ctx: typer.Context, path: Path):
    """Replace all data with a JSON export."""
    result = ctx.obj.data.import_file(str(path))
    if not result.success:
        _fail(ValueError(result.message))
    typer.echo(f"Imported {result.transactions} transactions, {result.categories} categories.")


@app.command()
def backup(ctx: typer.Context, folder: Path = typer.Argument(Path("."))):
    """Write dated JSON and CSV backups."""
    json_path, csv_path = ctx.obj.data.backup(str(folder))
    typer.echo(json_path)
    typer.echo(csv_path)


@app.command()
def prefs(
    ctx: typer.Context,
    currency: Optional[str] = typer.Option(None),
    date_format: Optional[str] = typer.Option(None, "--date-format"),
    theme: Optional[str] = typer.Option(None),
    auto_categorize: Optional[bool] = typer.Option(None, "--auto-categorize/--no-auto-categorize"),
    notifications: Optional[bool] = typer.Option(None, "--notifications/--no-notifications"),
):
    """Show or change preferences."""
    changes = {
        "currency": currency,
        "date_format": date_format,
        "theme_mode": theme,
        "auto_categorization": auto_categorize,
        "notifications": notifications,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    store: FinanceStore = ctx.obj.store
    try:
        current = store.update_preferences(**changes) if changes else store.preferences
    except FinanceError as exc:
        _fail(exc)
    for key, value in current.to_dict().items():
        typer.echo(f"{key}: {value}")


@app.command()
def reset(ctx: typer.Context, yes: bool = typer.Option(False, "--yes", help="Skip confirmation.")):
    """Delete all data and restore defaults."""
    if not yes:
        typer.confirm("This permanently deletes all data. Continue?", abort=True)
    ctx.obj.store.reset()
    typer.echo("All data reset.")


@app.command()
def watch(
    ctx: typer.Context,
    interval: float = typer.Option(RECURRING_CHECK_INTERVAL, help="Seconds between checks."),
):
    """Keep running and add recurring transactions as they come due."""
    scheduler = RecurringScheduler(ctx.obj.recurring, interval)
    scheduler.start()
    typer.echo("Watching for recurring transactions. Ctrl+C to stop.")
    try:
        while scheduler.is_running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()


if __name__ == "__main__":
    app()
