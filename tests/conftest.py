"""
Pytest configuration and fixtures.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterator

import pytest
import structlog
from sqlalchemy import Engine, create_engine, insert
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crowdfunding.config import Settings
from crowdfunding.core import Transaction
from crowdfunding.database.connection import make_session_factory
from crowdfunding.database.models import Base, CurrencyModel, UserModel


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast tests without storage")
    config.addinivalue_line("markers", "integration: tests against an SQLite database")


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        database_url="sqlite://",
        app_name="crowdfunding-test",
        app_env="test",
        log_level="DEBUG",
        log_json=False,
        service_data_secret="test-secret",
    )


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging once a test finishes."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    structlog.reset_defaults()


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite engine shared across sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def seeded_catalogs(engine: Engine) -> None:
    """Insert a few currencies and users."""
    with engine.begin() as conn:
        conn.execute(
            insert(CurrencyModel.__table__),
            [
                {"id": 1, "title": "US Dollar", "code": "USD", "symbol": "$", "position": 0},
                {"id": 2, "title": "Euro", "code": "EUR", "symbol": "€", "position": 1},
                {"id": 3, "title": "Pound Sterling", "code": "GBP", "symbol": "£", "position": 0},
            ],
        )
        conn.execute(
            insert(UserModel.__table__),
            [
                {"id": 1, "name": "Ada Investor", "email": "ada@example.com"},
                {"id": 2, "name": "Ben Receiver", "email": "ben@example.com"},
                {"id": 3, "name": "Cy Backer", "email": "cy@example.com"},
            ],
        )


@pytest.fixture
def sample_transaction_data() -> dict[str, Any]:
    """Sample transaction fields."""
    return {
        "txn_date": datetime(2026, 3, 14, 9, 26, 53),
        "txn_amount": Decimal("25.00"),
        "txn_currency": "USD",
        "txn_status": "pending",
        "txn_id": "ch_3NqXyZ",
        "parent_txn_id": "pi_3NqXyA",
        "status_reason": "authorized",
        "project_id": 7,
        "reward_id": None,
        "investor_id": 1,
        "receiver_id": 2,
        "service_provider": "Stripe",
        "service_alias": "stripe",
        "reward_state": 0,
        "fee": Decimal("1.25"),
    }


@pytest.fixture
def stored_transaction(
    session_factory: sessionmaker[Session], sample_transaction_data: dict[str, Any]
) -> Transaction:
    """A transaction persisted to the test database."""
    transaction = Transaction(session_factory)
    transaction.bind(sample_transaction_data)
    return transaction.persist()
