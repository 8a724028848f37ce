"""
Test fixtures: in-memory SQLite, dependency overrides and sample data.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tripplanner.core.security import create_access_token, get_password_hash
from tripplanner.db.base import Base
from tripplanner.db.session import get_db
from tripplanner.db.store import TripStore
from tripplanner.db.views import create_aggregate_views, drop_aggregate_views
from tripplanner.api.dependencies import get_storage
from tripplanner.main import app
from tripplanner.models import DayItinerary, Expense, ExpenseCategory, Trip, User
from tripplanner.services.storage_service import LocalObjectStorage

# One shared connection so views, tables and sessions see the same database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session():
    """Fresh tables for each test; no aggregate views unless requested."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_aggregate_views(test_engine)
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def aggregate_views(db_session):
    """Create day_totals and trip_totals for the test."""
    create_aggregate_views(test_engine)
    yield


@pytest.fixture(params=["with_views", "without_views"])
def schema_mode(request, db_session):
    """Run a test once with the aggregate views and once without them."""
    if request.param == "with_views":
        create_aggregate_views(test_engine)
    return request.param


@pytest.fixture
def store(db_session):
    return TripStore(db_session)


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(root=str(tmp_path / "uploads"), base_url="/static")


@pytest.fixture
def client(db_session, storage):
    """TestClient with the database and object storage overridden."""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db_session, email="parent@example.com", password="secret123", full_name="Sam Parent"):
    user = User(email=email, full_name=full_name, hashed_password=get_password_hash(password))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def auth_headers_for(user):
    token = create_access_token(data={"sub": user.email, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db_session):
    return make_user(db_session)


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)


@pytest.fixture
def trip(db_session, user):
    """Three-day trip, 2024-06-01 to 2024-06-03."""
    trip = Trip(
        user_id=user.id,
        title="Summer at the lake",
        destination="Lake Tahoe",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 3),
        budget=Decimal("500.00"),
    )
    db_session.add(trip)
    db_session.commit()
    db_session.refresh(trip)
    return trip


def add_day(db_session, trip, day_date, notes=None):
    day = DayItinerary(trip_id=trip.id, date=day_date, notes=notes)
    db_session.add(day)
    db_session.commit()
    db_session.refresh(day)
    return day


def add_expense(db_session, day, amount, category=ExpenseCategory.OTHER, description="expense"):
    expense = Expense(
        day_itinerary_id=day.id,
        description=description,
        amount=Decimal(amount),
        category=category,
    )
    db_session.add(expense)
    db_session.commit()
    db_session.refresh(expense)
    return expense


@pytest.fixture
def make_day(db_session):
    return lambda trip, day_date, notes=None: add_day(db_session, trip, day_date, notes)


@pytest.fixture
def make_expense(db_session):
    return lambda day, amount, category=ExpenseCategory.OTHER, description="expense": add_expense(
        db_session, day, amount, category, description
    )


@pytest.fixture
def query_log():
    """SQL statements executed while the fixture is active."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(test_engine, "before_cursor_execute", _record)


class ViewsSwitch:
    """Create or drop the aggregate views in the middle of a test."""

    def __init__(self, session):
        self.session = session

    def on(self):
        self.session.commit()
        create_aggregate_views(test_engine)

    def off(self):
        self.session.commit()
        drop_aggregate_views(test_engine)


@pytest.fixture
def views_switch(db_session):
    return ViewsSwitch(db_session)


@pytest.fixture
def stranger(db_session):
    """A second user, unrelated to the default trip."""
    return make_user(db_session, email="stranger@example.com", full_name="Pat Stranger")


@pytest.fixture
def stranger_headers(stranger):
    return auth_headers_for(stranger)
