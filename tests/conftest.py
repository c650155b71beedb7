import os

# Must be set before the app modules read their settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.core.config import settings
from app.core.database import Base, engine, get_db, get_redis, init_db
from app.core.security import UserRole, create_token_pair, pwd_context
from app.services.user_service import UserService

# Minimum bcrypt cost keeps the suite fast
pwd_context.update(bcrypt__rounds=4)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

class RedisMock:
    """Dict-backed stand-in for the few redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}

    def setex(self, key, time, value):
        self.data[key] = str(value)
        return True

    def get(self, key):
        return self.data.get(key)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])

redis_mock = RedisMock()

app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_redis] = lambda: redis_mock

DEFAULT_PASSWORD = "Password123"

@pytest.fixture(scope="function")
def test_db():
    # Clear leftovers from an interrupted run
    Base.metadata.drop_all(bind=engine)
    init_db()
    redis_mock.data.clear()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def make_user(db_session):
    """Create a user and return ``(user, auth_headers)``."""
    counter = itertools.count(1)

    def _make_user(role=UserRole.PATIENT, name=None, email=None, password=DEFAULT_PASSWORD):
        n = next(counter)
        user = UserService(db_session).create_user(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@example.com",
            password=password,
            role=role,
        )
        tokens = create_token_pair(user.id, user.role)
        return user, {"Authorization": f"Bearer {tokens.access_token}"}

    return _make_user

@pytest.fixture
def canceled_slots_available(monkeypatch):
    monkeypatch.setattr(settings, "TREAT_CANCELED_AS_AVAILABLE", True)
