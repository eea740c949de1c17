import os, sys

HERE = os.path.dirname(__file__)
BACKEND = os.path.abspath(os.path.join(HERE, ".."))
if BACKEND not in sys.path:
    sys.path.insert(0, BACKEND)

# Set environment variables FIRST, settings are read on import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["IDP_SHARED_SECRET"] = "test-idp-secret"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from models.resident import Resident
from models.users import User
from main import app
from utils.tokenJWT import open_session

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, user_id, role="user", email=None, created_at=None):
    user = User(id=user_id, role=role, email=email, first_name=user_id.upper())
    if created_at is not None:
        user.created_at = created_at
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_resident(db, user_id, created_at=None, **fields):
    data = dict(
        full_name="Test Person",
        age=30,
        gender="male",
        phone_number="555",
        house_number="H1",
        current_location="village",
        occupation="farming",
    )
    data.update(fields)
    resident = Resident(user_id=user_id, **data)
    # Explicit timestamps make ordering independent of clock resolution
    resident.created_at = created_at or datetime(2024, 1, 1, 12, 0, 0)
    db.add(resident)
    db.commit()
    db.refresh(resident)
    return resident


def auth_headers(db, user):
    return {"Authorization": f"Bearer {open_session(db, user)}"}


@pytest.fixture
def alice(db):
    return make_user(db, "u1", email="alice@example.com")


@pytest.fixture
def bob(db):
    return make_user(db, "u2", email="bob@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, "admin-1", role="admin", email="admin@example.com")
