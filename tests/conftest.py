import os

# Must be set before villa_admin reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_SCHEDULER"] = "false"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from villa_admin.db.database import Base, get_db
from villa_admin.main import app
from villa_admin.models import Villa, VillaStatus, SeasonalPrice, Reservation, ReservationStatus, PaymentType

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_villa(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "title": f"Villa {counter['n']}",
            "slug": f"villa-{counter['n']}",
            "max_guests": 6,
            "minimum_stay": 1,
            "advance_payment_rate": 30,
            "status": VillaStatus.ACTIVE,
        }
        fields.update(overrides)
        villa = Villa(**fields)
        db.add(villa)
        db.commit()
        db.refresh(villa)
        return villa

    return _make


@pytest.fixture
def villa(make_villa):
    return make_villa()


@pytest.fixture
def make_season(db):
    def _make(villa_id, start_date, end_date, nightly_price, season_name="Season", is_active=True):
        season = SeasonalPrice(
            villa_id=villa_id,
            season_name=season_name,
            start_date=start_date,
            end_date=end_date,
            nightly_price=Decimal(nightly_price),
            weekly_price=Decimal(nightly_price) * 7,
            is_active=is_active,
        )
        db.add(season)
        db.commit()
        db.refresh(season)
        return season

    return _make


@pytest.fixture
def make_reservation(db):
    """Insert a reservation row directly, without touching the calendar."""
    counter = {"n": 0}

    def _make(villa_id, start_date, end_date, status=ReservationStatus.CONFIRMED, total=Decimal("1000")):
        counter["n"] += 1
        reservation = Reservation(
            booking_ref=f"TEST-{counter['n']}",
            villa_id=villa_id,
            start_date=start_date,
            end_date=end_date,
            guest_count=2,
            total_amount=total,
            advance_amount=Decimal("0"),
            remaining_amount=total,
            payment_type=PaymentType.SPLIT_PAYMENT,
            payment_method="BANK_TRANSFER",
            status=status,
            customer_name="Test Guest",
            customer_email="guest@example.com",
            customer_phone="+900000000",
        )
        db.add(reservation)
        db.commit()
        db.refresh(reservation)
        return reservation

    return _make