"""
Shared test fixtures: SQLite test database, test client, helper payloads.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test_tubecalc.db"

from backend.database import Base, get_db
from backend.main import app


TEST_DATABASE_URL = "sqlite:///./test_tubecalc.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def round_tube():
    """1" OD round tube, 1.2 mm wall, 100" long, x2. Not a catalog size."""
    return {
        "spec": {"shape": "round", "size": 1.0, "thickness": 1.2, "length": 100},
        "quantity": 2,
    }


@pytest.fixture
def add_tube(client):
    """Add a tube to the working list and return the created item."""
    def _add(payload):
        response = client.post("/api/tubes/", json=payload)
        assert response.status_code == 200, response.text
        return response.json()
    return _add
