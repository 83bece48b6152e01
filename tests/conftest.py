"""Shared fixtures.

Each test gets its own in-memory database and a fully wired set of services,
and the bootstrap config directory is redirected to a temporary folder so no
test touches ~/.finance-tracker.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from finance_tracker.database.db_manager import DatabaseManager
from finance_tracker.main import Services, build_services
from finance_tracker.models.category import Category
from finance_tracker.models.finance_state import FinanceState
from finance_tracker.models.transaction import RecurringInfo, Transaction


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "config"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("FINANCE_TRACKER_HOME", os.fspath(home))


@pytest.fixture
def services() -> Services:
    svc = build_services(":memory:")
    yield svc
    svc.db.close()


@pytest.fixture
def db(services: Services) -> DatabaseManager:
    return services.db


@pytest.fixture
def store(services: Services):
    return services.store


def make_tx(
    id: str,
    amount: float,
    date: str,
    type: str = "expense",
    category_id: str = "food",
    description: str = "",
    frequency: str | None = None,
    last_processed: str | None = None,
    end_date: str | None = None,
    tags: list[str] | None = None,
    template_id: str | None = None,
) -> Transaction:
    recurring = None
    if frequency:
        recurring = RecurringInfo(frequency=frequency, end_date=end_date, last_processed=last_processed)
    return Transaction(
        id=id,
        amount=amount,
        description=description or id,
        date=date,
        type=type,
        category_id=category_id,
        recurring=recurring,
        tags=tags or [],
        template_id=template_id,
    )


def make_state(*transactions: Transaction, categories: list[Category] | None = None) -> FinanceState:
    state = FinanceState.default()
    state.transactions = list(transactions)
    if categories is not None:
        state.categories = categories
    return state
