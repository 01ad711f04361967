"""Shared fixtures and utilities for tests."""

import os

# Settings are read at import time, so the environment must be set before
# any application module is imported.
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("JSON_LOGS", "false")

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from core.config import Settings
from database.engine import Base, Database
from database.models import Application, ApplicationStatus, Company, Job, User, UserRole


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh on-disk SQLite database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'job_board.db'}"


@pytest.fixture
def test_settings(db_url):
    """Settings pointing at the per-test database."""
    return Settings(DATABASE_URL=db_url, EXPOSE_ERROR_DETAILS=True)


@pytest_asyncio.fixture
async def database(db_url):
    """Initialized database handle, closed after the test."""
    db = Database(db_url)
    await db.init()
    try:
        yield db
    finally:
        async with db.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await db.close()


async def seed_job_board(database: Database) -> dict:
    """
    Insert a small job board.

    Layout:
    - recruiter (id 1) owns "Acme" and posted "Backend Engineer" (older)
      and "Frontend Engineer" (newer)
    - other recruiter (id 2) posted "Data Scientist" (newest)
    - applicant (id 3) applied to "Backend Engineer"
    """
    now = datetime.now(timezone.utc)
    async with database.session_factory() as session:
        recruiter = User(name="Rita Recruiter", email="rita@example.com", role=UserRole.RECRUITER)
        other_recruiter = User(name="Omar Owner", email="omar@example.com", role=UserRole.RECRUITER)
        applicant = User(name="Sam Student", email="sam@example.com", role=UserRole.STUDENT)
        session.add_all([recruiter, other_recruiter, applicant])
        await session.flush()

        acme = Company(
            name="Acme",
            location="Berlin",
            industry="Software",
            description="Makes everything",
            owner_id=recruiter.id,
        )
        globex = Company(name="Globex", location="Remote", industry="Analytics", owner_id=other_recruiter.id)
        session.add_all([acme, globex])
        await session.flush()

        backend = Job(
            title="Backend Engineer",
            description="Build APIs in Python",
            requirements=["python", "sql"],
            salary=90000,
            location="Berlin",
            job_type="Full Time",
            experience_level=3,
            position=2,
            company_id=acme.id,
            created_by_id=recruiter.id,
            created_at=now - timedelta(days=2),
        )
        frontend = Job(
            title="Frontend Engineer",
            description="Build user interfaces with React",
            requirements=["react", "css"],
            salary=80000,
            location="Berlin",
            job_type="Full Time",
            experience_level=2,
            position=1,
            company_id=acme.id,
            created_by_id=recruiter.id,
            created_at=now - timedelta(days=1),
        )
        data = Job(
            title="Data Scientist",
            description="Model 100% of the data_sets",
            requirements=["statistics"],
            salary=95000,
            location="Remote",
            job_type="Contract",
            experience_level=4,
            position=1,
            company_id=globex.id,
            created_by_id=other_recruiter.id,
            created_at=now,
        )
        session.add_all([backend, frontend, data])
        await session.flush()

        application = Application(
            job_id=backend.id,
            applicant_id=applicant.id,
            status=ApplicationStatus.ACCEPTED,
        )
        session.add(application)
        await session.commit()

        return {
            "recruiter_id": recruiter.id,
            "other_recruiter_id": other_recruiter.id,
            "applicant_id": applicant.id,
            "acme_id": acme.id,
            "globex_id": globex.id,
            "backend_id": backend.id,
            "frontend_id": frontend.id,
            "data_id": data.id,
            "application_id": application.id,
        }


@pytest_asyncio.fixture
async def seeded(database):
    """Ids of the rows inserted by ``seed_job_board``."""
    return await seed_job_board(database)


@pytest.fixture
def seeded_db(db_url):
    """
    Seed the per-test database outside of any running event loop.

    For synchronous tests that drive the app through ``TestClient``.
    Returns the ids from ``seed_job_board``.
    """

    async def _seed():
        db = Database(db_url)
        await db.init()
        try:
            return await seed_job_board(db)
        finally:
            await db.close()

    return asyncio.run(_seed())
