"""
Pytest fixtures for kasir backend tests.

Provides app/client fixtures for both storage backends and a `repos`
fixture parametrized over them, so repository contract tests run once per
backend.
"""
from datetime import datetime
from types import SimpleNamespace

import pytest

from kasir import create_app
from kasir.extensions import db
from kasir.repositories import (
    MemoryCategoryRepository,
    MemoryProductRepository,
    MemoryTransactionRepository,
    SQLCategoryRepository,
    SQLProductRepository,
    SQLTransactionRepository,
)

BASE_CONFIG = {
    "TESTING": True,
    "RATE_LIMIT_ENABLED": False,
    "LOG_LEVEL": "WARNING",
}


class FixedClock:
    """Callable clock for TransactionService; move it with .set()."""

    def __init__(self, value: datetime):
        self.value = value

    def set(self, value: datetime) -> None:
        self.value = value

    def __call__(self) -> datetime:
        return self.value


@pytest.fixture()
def app():
    """Application on the in-memory backend."""
    return create_app({**BASE_CONFIG, "USE_DATABASE": False})


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def sql_app():
    """Application on the SQL backend (private in-memory SQLite)."""
    app = create_app({
        **BASE_CONFIG,
        "USE_DATABASE": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def sql_client(sql_app):
    return sql_app.test_client()


@pytest.fixture(params=["memory", "sql"])
def repos(request):
    """One set of category/product/transaction repositories per backend."""
    if request.param == "memory":
        categories = MemoryCategoryRepository()
        yield SimpleNamespace(
            backend="memory",
            categories=categories,
            products=MemoryProductRepository(categories),
            transactions=MemoryTransactionRepository(),
        )
        return

    sql_app = request.getfixturevalue("sql_app")
    yield SimpleNamespace(
        backend="sql",
        app=sql_app,
        categories=SQLCategoryRepository(),
        products=SQLProductRepository(),
        transactions=SQLTransactionRepository(),
    )


@pytest.fixture()
def clock():
    return FixedClock(datetime(2024, 1, 15, 10, 30, 0))
