from collections import Counter
from datetime import date, timedelta

import pytest

from clinic_booking.core.security import SessionIssuer, UserRole
from clinic_booking.models.booking import BookingStatus
from clinic_booking.repositories.memory import InMemoryStore
from clinic_booking.repositories.sql import SQLAlchemyStore
from clinic_booking.services.auth_service import AuthService
from clinic_booking.services.calendar_service import generate_slots
from clinic_booking.services.reporting_service import ReportingService
from clinic_booking.services.reservation_service import ReservationService

# Monday: a two-day window covers Jan 1 and Jan 2 with no weekend
WINDOW_START = date(2024, 1, 1)


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        backend = InMemoryStore()
    else:
        backend = SQLAlchemyStore(f"sqlite:///{tmp_path / 'test.db'}")
    backend.init()
    yield backend
    backend.close()


@pytest.fixture
def issuer():
    return SessionIssuer(secret_key="test-secret", ttl=timedelta(hours=24))


@pytest.fixture
def auth_service(store, issuer):
    return AuthService(store, issuer)


@pytest.fixture
def reservations(store):
    return ReservationService(store)


@pytest.fixture
def slots(store):
    """Four slots: 2024-01-01 and 2024-01-02 at 09:00 and 10:00."""
    store.add_slots(
        generate_slots(
            start_date=WINDOW_START, window_days=2, start_hour=9, end_hour=10, exclude_weekends=True
        )
    )
    return store.list_slots()


@pytest.fixture
def alice(auth_service):
    return auth_service.register_user("Alice", "alice@example.com", "secret", UserRole.PATIENT)


@pytest.fixture
def bob(auth_service):
    return auth_service.register_user("Bob", "bob@example.com", "secret", UserRole.PATIENT)


@pytest.fixture
def admin(auth_service):
    return auth_service.register_user("Dr. Admin", "admin@clinic.com", "secret", UserRole.ADMIN)


@pytest.fixture
def reporting(reservations):
    return ReportingService(reservations)


def _assert_ledger_consistent(store):
    """At most one confirmed booking per slot, and exactly one iff the slot is taken."""
    confirmed = Counter(b.slot_id for b in store.list_bookings(status=BookingStatus.CONFIRMED))
    for slot in store.list_slots():
        assert confirmed[slot.id] <= 1
        assert (confirmed[slot.id] == 1) == (not slot.available)


@pytest.fixture
def check_ledger(store):
    return lambda: _assert_ledger_consistent(store)


@pytest.fixture
def client():
    """API client over a fresh in-memory store with the four test slots.

    Startup seeds the default administrator; the calendar is left alone
    because slots already exist.
    """
    from fastapi.testclient import TestClient

    from clinic_booking.main import create_app

    api_store = InMemoryStore()
    api_store.add_slots(
        generate_slots(start_date=WINDOW_START, window_days=2, start_hour=9, end_hour=10, exclude_weekends=True)
    )
    with TestClient(create_app(store=api_store), base_url="http://testserver") as test_client:
        yield test_client
