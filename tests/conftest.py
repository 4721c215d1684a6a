"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seeded companies and jobs
- FastAPI test client
- Bearer tokens for a regular user and an admin
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db, query
from app.core.security import create_access_token
from app.models import Company, Job  # noqa: F401 - register tables
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE and foreign keys unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def seed(db):
    """Three companies and one job at c1."""
    for n in (1, 2, 3):
        query(
            db,
            """INSERT INTO companies (handle, name, description, num_employees, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            [f"c{n}", f"C{n}", f"Desc{n}", n, f"http://c{n}.img"],
        )
    query(
        db,
        """INSERT INTO jobs (title, salary, equity, company_handle)
           VALUES ($1, $2, $3, $4)""",
        ["test job", 60000, "0", "c1"],
    )
    db.commit()


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_job_id(db_session):
    """Id of the seeded "test job"."""
    return query(db_session, "SELECT id FROM jobs WHERE title = $1", ["test job"])[0]["id"]


@pytest.fixture
def user_headers():
    token = create_access_token({"username": "u1", "isAdmin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    token = create_access_token({"username": "admin", "isAdmin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "post job",
        "salary": 60000,
        "equity": 0,
        "company_handle": "c1"
    }


@pytest.fixture
def sample_company_data():
    """Sample company data for testing"""
    return {
        "handle": "new",
        "name": "New",
        "description": "DescNew",
        "numEmployees": 10,
        "logoUrl": "http://new.img"
    }
