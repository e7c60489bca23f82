"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all Medlas tests.
Fixtures include database sessions, test clients, sample data, and mocks.
"""

import os
import sys
from datetime import datetime
from typing import Generator, Dict, Any, List
from unittest.mock import MagicMock, AsyncMock

# Keep the application's own engine in memory and the AI collaborator off
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LLM_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base
from models import Resident, Medication, DoseEvent, DoseStatus, FoodRequirement
from api.deps import get_db
from actions.insights_engine import insights_engine
from app import app


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def offline_insights_engine():
    """Never reach the network from the shared insights engine"""
    original_probe = insights_engine.network_probe
    insights_engine.network_probe = lambda: False
    yield insights_engine
    insights_engine.network_probe = original_probe


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_resident_data() -> Dict[str, Any]:
    """Sample resident data for creating test residents"""
    return {
        "first_name": "Margaret",
        "last_name": "Hill",
        "age": 84,
        "allergies": ["Penicillin"],
        "conditions": ["Atrial fibrillation", "Hypertension"],
        "physician": "Dr. Alvarez"
    }


@pytest.fixture
def test_resident(db_session: Session, sample_resident_data: Dict) -> Resident:
    """Create and return a test resident"""
    resident = Resident(**sample_resident_data)
    db_session.add(resident)
    db_session.commit()
    db_session.refresh(resident)
    return resident


@pytest.fixture
def test_medication(db_session: Session, test_resident: Resident) -> Medication:
    """Create and return a once-daily medication for the test resident"""
    medication = Medication(
        resident_id=test_resident.id,
        name="Metformin",
        strength="500mg",
        dose="1 tablet",
        frequency=1,
        times=["09:00"],
        food=FoodRequirement.WITH
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def make_medication(db_session: Session, test_resident: Resident):
    """Factory for medications of the test resident"""
    def _make(name: str, times: List[str], food: FoodRequirement = FoodRequirement.NONE,
              resident_id: str = None) -> Medication:
        medication = Medication(
            resident_id=resident_id or test_resident.id,
            name=name,
            strength="",
            dose="",
            frequency=len(times) or 1,
            times=list(times),
            food=food
        )
        db_session.add(medication)
        db_session.commit()
        db_session.refresh(medication)
        return medication
    return _make


@pytest.fixture
def make_dose_event(db_session: Session, test_resident: Resident):
    """Factory for dose events of the test resident"""
    def _make(medication: Medication, status: DoseStatus, recorded_time: datetime,
              scheduled_time: datetime = None) -> DoseEvent:
        event = DoseEvent(
            resident_id=test_resident.id,
            medication_id=medication.id,
            scheduled_time=scheduled_time or recorded_time,
            recorded_time=recorded_time,
            status=status
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event
    return _make


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time for window calculations"""
    return datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def mock_llm_service():
    """Configured LLM collaborator returning no insights"""
    mock = MagicMock()
    mock.is_configured = True
    mock.generate_resident_insights = AsyncMock(return_value=[])
    mock.process_command = AsyncMock()
    return mock


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
