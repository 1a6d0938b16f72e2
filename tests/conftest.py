"""
Shared test fixtures: SQLite test database, test client, flight measurements.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from stair_estimator.database import Base, get_db
from stair_estimator.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
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
def flight_fields():
    """
    Five-step flight that fits without burying.

    85 cm rise at 17 cm, 30 cm tread, 2 cm overhang and slabs, 1 cm top slab.
    Course targets 16 / 33 / 50 / 67 / 84 cm.
    """
    return {
        "total_height": 85,
        "step_height": 17,
        "tread": 30,
        "arm_a_length": 300,
        "arm_b_length": 150,
        "slab_thickness_top": 1,
        "slab_thickness_front": 2,
        "overhang_front": 2,
    }
