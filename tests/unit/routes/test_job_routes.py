"""
Tests for job endpoints with the service mocked out.

Tests:
- Authentication requirements per route
- Response envelopes for success and failure
- Wire names of job fields
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_job_service
from api.main import create_app
from core.exceptions import InternalError, NotFoundError, ValidationError
from core.security import create_access_token
from database.models import ApplicationStatus

JOBS = "/api/v1/job"
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_job(job_id: int = 1, **overrides) -> Mock:
    company = Mock(id=10, location="Berlin", industry="Software")
    company.name = "Acme"
    applicant = Mock(id=30, email="sam@example.com")
    applicant.name = "Sam Student"
    application = Mock(id=20, status=ApplicationStatus.PENDING, applicant=applicant)

    job = Mock(
        id=job_id,
        title="Backend Engineer",
        description="Build APIs",
        requirements=["python", "sql"],
        salary=90000.0,
        location="Berlin",
        job_type="Full Time",
        experience_level=3,
        position=2,
        company_id=10,
        created_by_id=1,
        company=company,
        applications=[application],
        created_at=NOW,
        updated_at=NOW,
    )
    for key, value in overrides.items():
        setattr(job, key, value)
    return job


@pytest.fixture
def service():
    service = Mock()
    service.create_job = AsyncMock(return_value=make_job())
    service.list_jobs = AsyncMock(return_value=[make_job(2), make_job(1)])
    service.get_job_by_id = AsyncMock(return_value=make_job())
    service.list_jobs_by_creator = AsyncMock(return_value=[make_job()])
    return service


@pytest.fixture
def client(test_settings, service):
    app = create_app(test_settings)
    app.dependency_overrides[get_job_service] = lambda: service
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {create_access_token(user_id=1)}"}


class TestPostJob:
    """Test POST /post."""

    def test_unauthenticated(self, client, service):
        response = client.post(f"{JOBS}/post", json={"title": "x"})

        assert response.status_code == 401
        assert response.json() == {"message": "User not authenticated", "success": False}
        service.create_job.assert_not_awaited()

    def test_created(self, client, service, auth):
        response = client.post(
            f"{JOBS}/post",
            json={"title": "Backend Engineer", "jobType": "Full Time", "companyId": "10"},
            headers=auth,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "New job created successfully."
        assert body["job"]["company"] == 10
        assert body["job"]["applications"] == []

        payload, actor_id = service.create_job.await_args.args
        assert payload.job_type == "Full Time"
        assert payload.company_id == "10"
        assert actor_id == "1"

    def test_missing_field(self, client, service, auth):
        service.create_job.side_effect = ValidationError()

        response = client.post(f"{JOBS}/post", json={}, headers=auth)

        assert response.status_code == 400
        assert response.json() == {"message": "Something is missing.", "success": False}

    def test_no_body_reaches_service_as_empty_payload(self, client, service, auth):
        service.create_job.side_effect = ValidationError()

        response = client.post(f"{JOBS}/post", headers=auth)

        assert response.status_code == 400
        payload, _ = service.create_job.await_args.args
        assert payload.model_dump(exclude_none=True) == {}

    def test_form_body_is_parsed(self, client, service, auth):
        response = client.post(
            f"{JOBS}/post",
            data={"title": "Backend Engineer", "jobType": "Full Time", "requirements": ["a", "b"]},
            headers=auth,
        )

        assert response.status_code == 201
        payload, _ = service.create_job.await_args.args
        assert payload.title == "Backend Engineer"
        assert payload.job_type == "Full Time"
        assert payload.requirements == ["a", "b"]

    def test_internal_error_carries_error_text(self, client, service, auth):
        service.create_job.side_effect = InternalError("connection refused")

        response = client.post(f"{JOBS}/post", json={}, headers=auth)

        assert response.status_code == 500
        assert response.json() == {
            "message": "Internal Server Error",
            "success": False,
            "error": "connection refused",
        }


class TestGetAllJobs:
    """Test GET /get."""

    def test_jobs_envelope(self, client, service):
        response = client.get(f"{JOBS}/get", params={"keyword": "Backend"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [job["id"] for job in body["jobs"]] == [2, 1]
        service.list_jobs.assert_awaited_once_with("Backend")

    def test_keyword_defaults_to_empty(self, client, service):
        client.get(f"{JOBS}/get")

        service.list_jobs.assert_awaited_once_with("")

    def test_wire_names(self, client):
        job = client.get(f"{JOBS}/get").json()["jobs"][0]

        assert job["jobType"] == "Full Time"
        assert job["experienceLevel"] == 3
        assert job["created_by"] == 1
        assert job["createdAt"].startswith("2024-05-01T12:00:00")
        assert "updatedAt" in job
        assert job["company"] == {"id": 10, "name": "Acme", "location": "Berlin", "industry": "Software"}
        assert job["applications"] == [{
            "id": 20,
            "status": "pending",
            "applicant": {"id": 30, "name": "Sam Student", "email": "sam@example.com"},
        }]

    def test_not_found(self, client, service):
        service.list_jobs.side_effect = NotFoundError("Jobs not found.")

        response = client.get(f"{JOBS}/get", params={"keyword": "nothing"})

        assert response.status_code == 404
        assert response.json() == {"message": "Jobs not found.", "success": False}


class TestGetJobById:
    """Test GET /get/{job_id}."""

    def test_found(self, client, service):
        response = client.get(f"{JOBS}/get/1")

        assert response.status_code == 200
        assert response.json()["job"]["id"] == 1
        service.get_job_by_id.assert_awaited_once_with("1")

    def test_not_found(self, client, service):
        service.get_job_by_id.side_effect = NotFoundError("Job not found.")

        response = client.get(f"{JOBS}/get/99")

        assert response.status_code == 404
        assert response.json() == {"message": "Job not found.", "success": False}


class TestGetAdminJobs:
    """Test GET /getadminjobs."""

    def test_unauthenticated(self, client, service):
        response = client.get(f"{JOBS}/getadminjobs")

        assert response.status_code == 401
        service.list_jobs_by_creator.assert_not_awaited()

    def test_uses_actor_from_cookie(self, client, service):
        client.cookies.set("token", create_access_token(user_id=42))

        response = client.get(f"{JOBS}/getadminjobs")

        assert response.status_code == 200
        service.list_jobs_by_creator.assert_awaited_once_with("42")
