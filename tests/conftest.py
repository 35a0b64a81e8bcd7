"""Shared fixtures: fake row store for client logic, SQLite-backed API for the store service."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base, get_db
from storefront.data.models.product import ProductModel
from storefront.main import app
from storefront.services.notification_service import NotificationService
from storefront.services.session_service import StorefrontSession

from fakes import FakeStore


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture()
def notifier() -> NotificationService:
    return NotificationService()


@pytest.fixture()
def session(store: FakeStore, notifier: NotificationService) -> StorefrontSession:
    return StorefrontSession(store, notifier)


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield TestingSession, db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def api_client(db_session):
    TestingSession, _ = db_session

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def catalog(db_session) -> Dict[str, ProductModel]:
    """Three products with distinct creation times, newest first: coat, shirt, scarf."""
    _, db = db_session
    now = datetime.now(timezone.utc)
    products = {
        "coat": ProductModel(name="Wool Coat", price=Decimal("220.00"), stock=3, category="Outerwear", featured=True, created_at=now),
        "shirt": ProductModel(name="Linen Shirt", price=Decimal("45.00"), stock=8, category="Tops", featured=True, created_at=now - timedelta(hours=1)),
        "scarf": ProductModel(name="Cashmere Scarf", price=Decimal("60.00"), stock=5, category="Accessories", featured=False, created_at=now - timedelta(hours=2)),
    }
    db.add_all(products.values())
    db.commit()
    for p in products.values():
        db.refresh(p)
    return products
