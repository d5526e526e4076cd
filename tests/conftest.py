"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before each test and
dropped after it.
"""

import os
from decimal import Decimal
from itertools import count

# Settings are read at import time; point them at SQLite first
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_DIR", "./logs")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from bank_admin.main import app
from bank_admin.models.base import Base, get_db
from bank_admin.schemas.account import AccountOpen, AccountTypeCreate
from bank_admin.schemas.client import ClientCreate
from bank_admin.schemas.user import RoleCreate, UserCreate
from bank_admin.services.account_service import AccountService
from bank_admin.services.client_service import ClientService
from bank_admin.services.user_service import UserService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)


# pysqlite defers BEGIN and mishandles SAVEPOINT. Taking over
# transaction control makes begin_nested() behave as it does on
# PostgreSQL. Foreign keys are off by default in SQLite.
@event.listens_for(engine, "connect")
def _configure_sqlite(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses the
    test session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Domain helpers ---

@pytest.fixture
def staff_user(db_session):
    """A teller who can authorize transfers."""
    service = UserService(db_session)
    role = service.create_role(RoleCreate(name="Teller"), user_id=None)
    user = service.create_user(UserCreate(
        username="teller", password="secret-pass", role_id=role.id,
    ), user_id=None)
    db_session.commit()
    return user


@pytest.fixture
def holder(db_session):
    """An active client to own test accounts."""
    client = ClientService(db_session).create_client(ClientCreate(
        first_name="Ana", last_name="Lopez", email="ana@example.com",
    ), user_id=None)
    db_session.commit()
    return client


@pytest.fixture
def open_account(db_session, holder):
    """
    Factory: open an account with the given balance.

    Usage: open_account("1000.50"), open_account("0", active=False)
    """
    service = AccountService(db_session)
    account_type = service.create_account_type(
        AccountTypeCreate(name="Savings"), user_id=None
    )
    db_session.commit()
    numbers = count(1)

    def _open(balance="0.00", active=True):
        account = service.open_account(AccountOpen(
            account_number=f"ACC-{next(numbers):04d}",
            client_id=holder.id,
            account_type_id=account_type.id,
            balance=Decimal(balance),
            is_active=active,
        ), user_id=None)
        db_session.commit()
        return account

    return _open
