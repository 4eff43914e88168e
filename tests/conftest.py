"""Pytest fixtures and configuration for ActionPlus tests."""

import pytest
from datetime import datetime, timezone
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from actionplus.database.database import Base
from actionplus.database.repository import TaskRepository
from actionplus.database.notification_repository import NotificationRepository
from actionplus.models.task import Task


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session(test_user_id):
    """Create a database session for testing.
    
    Uses an in-memory SQLite database that is created fresh for each test.
    Also creates a test profile in the database.
    """
    from actionplus.database.models import ProfileDB
    
    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    
    # Create all tables
    Base.metadata.create_all(bind=engine)
    
    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    
    # Create test profile (required for foreign key constraints)
    now = datetime.utcnow()
    session.add(ProfileDB(id=test_user_id, name="Test User", created_at=now, updated_at=now))
    session.commit()
    
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def notification_repository(db_session: Session):
    """Create a NotificationRepository instance for testing."""
    return NotificationRepository(db_session)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def sample_task_base(test_user_id):
    """Base task data for creating test tasks.
    
    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_user_id,
        "title": "Test Task",
        "description": "Test description",
        "deadline": None,
        "is_completed": False,
        "completed_at": None,
        "created_at": now,
        "updated_at": now,
        "group_path": None,
        "priority": None,
        "estimated_hours": None,
    }


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks with a fresh id and overridden fields."""
    def _make(**overrides) -> Task:
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from actionplus.api.app import app
    from actionplus.database.database import get_db
    
    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it
    
    app.dependency_overrides[get_db] = override_get_db
    
    with TestClient(app) as client:
        yield client
    
    # Clean up dependency overrides
    app.dependency_overrides.clear()
