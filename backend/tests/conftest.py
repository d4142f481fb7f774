"""Pytest configuration and fixtures."""

from datetime import date, datetime, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from slotbook.config import settings
from slotbook.database import enable_sqlite_fk, get_db
from slotbook.dependencies import get_notifier
from slotbook.main import app
from slotbook.models import Base, Services
from slotbook.services.bookings import BookingCommitService
from slotbook.services.holds import HoldManager
from slotbook.services.notifier import Notifier
from slotbook.services.slots.availability import AvailabilityService
from slotbook.services.store import Store

from . import factories

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

BOOKING_DATE = date(2025, 6, 1)


class FrozenClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


class RecordingNotifier(Notifier):
    """Keeps every sent notification; raises from send() when fail is set."""

    def __init__(self):
        super().__init__(frontend_url="http://test")
        self.sent = []
        self.fail = False

    def send(self, event_type, booking, text):
        if self.fail:
            raise RuntimeError("SMS gateway down")
        self.sent.append((event_type, booking.id, text))


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session: Session) -> Store:
    return Store(db_session)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 6, 1, 8, 0))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def availability(store: Store, clock: FrozenClock) -> AvailabilityService:
    return AvailabilityService(store, clock=clock)


@pytest.fixture
def holds(store: Store, clock: FrozenClock) -> HoldManager:
    return HoldManager(store, clock=clock)


@pytest.fixture
def booking_service(store, availability, holds, notifier, clock) -> BookingCommitService:
    return BookingCommitService(store, availability, holds, notifier, clock=clock)


@pytest.fixture
def restaurant(db_session: Session):
    """Restaurant open 09:00-23:00 daily, 30 minute grid, 90 minute seatings."""
    business = factories.make_business(db_session, "restaurant", name="Trattoria", sms_enabled=True)
    factories.set_hours(db_session, business, "09:00", "23:00")
    factories.add_restaurant_config(db_session, business, seating_duration_minutes=90, max_party_size=8)
    return business


@pytest.fixture
def spa(db_session: Session):
    """Spa open 09:00-17:00 daily with one 60 minute massage and one therapist."""
    business = factories.make_business(db_session, "spa", name="Blue Spa", sms_enabled=True)
    factories.set_hours(db_session, business, "09:00", "17:00")
    service = factories.add_service(db_session, business, "Massage", duration=60)
    factories.add_staff(db_session, business, "Anna", services=[service])
    return business


@pytest.fixture
def massage(db_session: Session, spa):
    return db_session.query(Services).filter_by(business_id=spa.id).one()


@pytest.fixture(scope="function")
def client(db_session: Session, notifier: RecordingNotifier, monkeypatch) -> Generator[TestClient, None, None]:
    """Create a test client with database and notifier overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    # No background hold cleanup against the real database
    monkeypatch.setattr(settings, "hold_cleanup_interval_seconds", 0)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
