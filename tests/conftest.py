import os

# Lifespan runs create_all on the app engine; keep it off disk.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from database import Base, get_db
from main import app
from models import Business, Customer, RequestStatus, ReviewRequest

TRACKING_UUID = "3f2b8c1e-9d4a-4b7e-a1c2-0e5f6a7b8c9d"

tracking_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TrackingSession = sessionmaker(bind=tracking_engine, autoflush=False)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=tracking_engine)
    session = TrackingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=tracking_engine)


@pytest.fixture()
def make_client():
    """Build a TestClient whose get_db dependency is ``session_factory``.

    ``raise_server_exceptions=False`` lets tests see the rendered 500 page.
    """
    clients = []

    def _make(session_factory, raise_server_exceptions=True):
        app.dependency_overrides[get_db] = session_factory
        c = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db, make_client):
    return make_client(lambda: db)


@pytest.fixture()
def make_request(db):
    """Create a Business, Customer and ReviewRequest; keyword overrides go to the matching row."""

    def _make(tracking_uuid=TRACKING_UUID, business=None, customer=None, **fields):
        biz = Business(**{
            "name": "Corner Bakery",
            "google_review_url": "https://g.page/r/corner-bakery/review",
            "website": "https://cornerbakery.example",
            **(business or {}),
        })
        db.add(biz)
        db.flush()
        cust = Customer(**{
            "business_id": biz.id,
            "first_name": "Dana",
            "last_name": "Reyes",
            "email": "dana@example.com",
            **(customer or {}),
        })
        db.add(cust)
        db.flush()
        rr = ReviewRequest(
            business_id=biz.id,
            customer_id=cust.id,
            tracking_uuid=tracking_uuid,
            status=fields.pop("status", RequestStatus.SENT),
            **fields,
        )
        db.add(rr)
        db.commit()
        db.refresh(rr)
        return rr

    return _make
