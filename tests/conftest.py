import os

os.environ["DATABASE_URL"] = ""
os.environ["POSTGRES_HOST"] = ""
os.environ["ADMIN_PASSWORD"] = "admin-secret"
os.environ["USER_PASSWORD"] = "user-secret"
os.environ["SHOP_TIMEZONE"] = "Asia/Ho_Chi_Minh"

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  registers the tables on Base
from database import Base, get_db, get_optional_db
from main import app

SHOP_TZ = ZoneInfo("Asia/Ho_Chi_Minh")
ADMIN = {"X-Access-Password": "admin-secret"}
USER = {"X-Access-Password": "user-secret"}


def shop_time(year, month, day, hour=10, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=SHOP_TZ)


def now_utc():
    return datetime.now(timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_optional_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_item(client):
    def _make_item(name="Áo dài đỏ", daily_rate=100000, total_quantity=5, size="M"):
        response = client.post(
            "/api/v1/inventory/",
            json={"name": name, "size": size, "daily_rate": daily_rate, "total_quantity": total_quantity},
            headers=ADMIN,
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_item


@pytest.fixture
def make_customer(client):
    def _make_customer(name="Nguyễn Thị Lan", phone="0901234567", address="12 Lê Lợi, Huế"):
        response = client.post(
            "/api/v1/customers/",
            json={"name": name, "phone": phone, "address": address},
            headers=ADMIN,
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_customer


@pytest.fixture
def make_rental(client):
    def _make_rental(customer_id, line_items, rental_date=None, due_date=None, discount_percent=None, notes=None):
        rental_date = rental_date or now_utc()
        due_date = due_date or rental_date + timedelta(days=3)
        payload = {
            "customer_id": customer_id,
            "line_items": line_items,
            "rental_date": rental_date.isoformat(),
            "due_date": due_date.isoformat(),
            "discount_percent": discount_percent,
            "notes": notes,
        }
        return client.post("/api/v1/rentals/", json=payload, headers=ADMIN)
    return _make_rental
