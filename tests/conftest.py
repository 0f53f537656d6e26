import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from barbershop.database import get_db
from barbershop.main import app
from barbershop.models import Base, ShopSettings
from barbershop.routers.internal import require_local
from barbershop.services.availability import AvailabilityEngine, BookingConfig
from barbershop.services.notifications import get_notifier

# 2030-01-07 is a Monday; Rome is UTC+1 in January
MONDAY = datetime(2030, 1, 7).date()
SUNDAY = datetime(2030, 1, 6).date()
TUESDAY = datetime(2030, 1, 8).date()
WEEK_BEFORE = datetime(2029, 12, 31, 12, 0, tzinfo=timezone.utc)

OPEN_HOURS = {
    "mon": [["09:00", "13:00"]],
    "tue": [["09:00", "11:00"], ["15:00", "16:30"]],
    "wed": [["09:00", "13:00"]],
    "thu": [["09:00", "13:00"]],
    "fri": [["09:00", "13:00"]],
    "sat": [["09:00", "12:00"]],
    "sun": [],
}


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def _record(self, kind, appointment_id):
        if self.fail:
            raise ConnectionError("mail relay down")
        self.sent.append((kind, appointment_id))
        return True

    def send_confirmation(self, appointment_id):
        return self._record("confirmation", appointment_id)

    def send_cancellation(self, appointment_id):
        return self._record("cancellation", appointment_id)

    def send_reminder(self, appointment_id):
        return self._record("reminder", appointment_id)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def shop(db_session):
    row = ShopSettings(shop_name="Test Barber", open_hours=json.dumps(OPEN_HOURS))
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def config():
    return BookingConfig(slot_duration_minutes=45, timezone="Europe/Rome")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def engine(db_session, shop, config, notifier):
    return AvailabilityEngine(db_session, config, notifier)


@pytest.fixture
def client(db_session, notifier):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[require_local] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
