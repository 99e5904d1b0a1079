# tests/conftest.py
import os
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app import config
from app.db import get_db
from app.models import Base, Booking, FunctionType
from app.main import app
from app.services.notifications import get_dispatcher

ADMIN_TOKEN = "test-admin-token"


class RecordingDispatcher:
    def __init__(self):
        self.delivered = []

    def deliver(self, notification):
        self.delivered.append(notification)
        return True


class RecordingOutbox:
    def __init__(self):
        self.messages = []

    def enqueue(self, notification):
        self.messages.append(notification)


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    os.environ["SKIP_DB_INIT"] = "1"

    # temp DB
    db_url = f"sqlite:///{tmp_path / 'test.db'}"

    # test engine / Session
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def outbox():
    return RecordingOutbox()


@pytest.fixture(scope="function")
def client(test_db_session, dispatcher, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_API_TOKEN", ADMIN_TOKEN)

    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def future_date():
    return date.today() + timedelta(days=30)


# Factories
@pytest.fixture
def make_function_type(test_db_session):
    counter = {"n": 0}

    def _make_function_type(name=None, slug=None, price=1000, is_active=True):
        counter["n"] += 1
        name = name or f"Function {counter['n']}"
        ft = FunctionType(
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            price=price,
            is_active=is_active,
        )
        test_db_session.add(ft)
        test_db_session.commit()
        return ft
    return _make_function_type


@pytest.fixture
def make_booking(test_db_session, future_date):
    def _make_booking(
        event_date=None,
        start_time="10:00",
        end_time="12:00",
        status="PENDING",
        function_type=None,
        email="guest@example.com",
    ):
        b = Booking(
            customer_name="Guest",
            customer_email=email,
            customer_phone="0771234567",
            function_type_id=function_type.id if function_type else None,
            function_type_custom=None if function_type else "Private Event",
            function_type_label=function_type.name if function_type else "Private Event",
            event_date=event_date or future_date,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        test_db_session.add(b)
        test_db_session.commit()
        return b
    return _make_booking
