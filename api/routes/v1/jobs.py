"""
Job posting endpoints.

Provides REST API for posting jobs, searching them, and viewing a single
job or the jobs posted by the current user.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_job_create_payload, get_job_service
from api.schemas.jobs import (
    JobCreateRequest,
    JobCreatedResponse,
    JobDetailResponse,
    JobListResponse,
    JobResponse,
)
from api.services.jobs import JobService, JOB_CREATED_MESSAGE
from core.middleware.authentication import require_actor_id

router = APIRouter()


@router.post(
    "/post",
    summary="Post Job",
    description="Create a job posting owned by the current user.",
    status_code=status.HTTP_201_CREATED,
    response_model=JobCreatedResponse,
    openapi_extra={
        "requestBody": {
            "content": {
                content_type: {"schema": JobCreateRequest.model_json_schema()}
                for content_type in ("application/json", "application/x-www-form-urlencoded")
            },
        },
    },
)
async def post_job(
    actor_id: str = Depends(require_actor_id),
    payload: JobCreateRequest = Depends(get_job_create_payload),
    job_service: JobService = Depends(get_job_service),
):
    """Validate and store a new job; the creator is the authenticated user."""
    job = await job_service.create_job(payload, actor_id)
    return JobCreatedResponse(
        message=JOB_CREATED_MESSAGE,
        job=JobResponse.from_job(job, populated=False),
    )


@router.get(
    "/get",
    summary="List Jobs",
    description="Search job postings by keyword in title or description.",
    response_model=JobListResponse,
)
async def get_all_jobs(
    keyword: Optional[str] = Query("", description="Case-insensitive search text"),
    job_service: JobService = Depends(get_job_service),
):
    """List matching jobs, newest first, with company and applications expanded."""
    jobs = await job_service.list_jobs(keyword)
    return JobListResponse(jobs=[JobResponse.from_job(job) for job in jobs])


@router.get(
    "/getadminjobs",
    summary="List My Jobs",
    description="List job postings created by the current user.",
    response_model=JobListResponse,
)
async def get_admin_jobs(
    actor_id: str = Depends(require_actor_id),
    job_service: JobService = Depends(get_job_service),
):
    jobs = await job_service.list_jobs_by_creator(actor_id)
    return JobListResponse(jobs=[JobResponse.from_job(job) for job in jobs])


@router.get(
    "/get/{job_id}",
    summary="Get Job Details",
    description="Get a job posting with company and applications expanded.",
    response_model=JobDetailResponse,
)
async def get_job_by_id(
    job_id: str = Path(..., description="Job ID"),
    job_service: JobService = Depends(get_job_service),
):
    job = await job_service.get_job_by_id(job_id)
    return JobDetailResponse(job=JobResponse.from_job(job))
