# tests/conftest.py
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models.alert import PriceAlert, AlertCondition, AssetType
from services import db_service


@pytest.fixture
def db(monkeypatch):
    """In-memory database shared across threads; get_db() uses it for the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_service.init_db(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    monkeypatch.setattr(db_service, "SessionLocal", factory)
    yield factory
    engine.dispose()


@pytest.fixture
def make_alert(db):
    """Insert a PriceAlert and return its id."""
    def _make(symbol="BTCUSDT", condition=AlertCondition.ABOVE, target_price="50000",
              asset_type=AssetType.CRYPTO, user_id="user-1", is_active=True, triggered_at=None):
        session = db()
        try:
            alert = PriceAlert(
                user_id=user_id,
                symbol=symbol,
                asset_type=asset_type,
                target_price=Decimal(str(target_price)),
                condition=condition,
                is_active=is_active,
                triggered_at=triggered_at,
            )
            session.add(alert)
            session.commit()
            return alert.id
        finally:
            session.close()
    return _make


@pytest.fixture
def load_alert(db):
    def _load(alert_id):
        session = db()
        try:
            return session.get(PriceAlert, alert_id)
        finally:
            session.close()
    return _load
