"""Job request and response schemas."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from database.models.applications import Application
from database.models.jobs import Job

# Text fields also take JSON numbers; the service stores them as strings.
Text = Union[str, int, float]


class JobCreateRequest(BaseModel):
    """
    Job creation payload.

    Every field is optional at the schema level; presence is checked by the
    service so that a missing field yields "Something is missing." rather
    than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[Text] = None
    description: Optional[Text] = None
    requirements: Optional[Union[list[Text], Text]] = Field(
        None, description="List of tags or a comma-delimited string"
    )
    salary: Optional[Union[float, str]] = None
    location: Optional[Text] = None
    job_type: Optional[Text] = Field(None, alias="jobType")
    experience: Optional[Union[int, float, str]] = None
    position: Optional[Union[int, float, str]] = None
    company_id: Optional[Union[int, str]] = Field(None, alias="companyId")


class CompanySummary(BaseModel):
    """Company fields exposed on a populated job."""

    id: int
    name: str
    location: Optional[str] = None
    industry: Optional[str] = None


class ApplicantSummary(BaseModel):
    """Applicant fields exposed on a populated application."""

    id: int
    name: str
    email: str


class ApplicationSummary(BaseModel):
    """Application fields exposed on a populated job."""

    id: int
    status: str
    applicant: Optional[ApplicantSummary] = None

    @classmethod
    def from_application(cls, application: Application) -> "ApplicationSummary":
        applicant = application.applicant
        return cls(
            id=application.id,
            status=application.status.value,
            applicant=ApplicantSummary(
                id=applicant.id, name=applicant.name, email=applicant.email
            ) if applicant else None,
        )


class JobResponse(BaseModel):
    """
    A job as returned by the API.

    ``company`` and ``applications`` hold bare ids for a freshly created job
    and expanded sub-documents for jobs read back from the store.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    requirements: list[str]
    salary: float
    location: str
    job_type: str = Field(alias="jobType")
    experience_level: int = Field(alias="experienceLevel")
    position: int
    company: Union[CompanySummary, int, None]
    created_by: int
    applications: Union[list[ApplicationSummary], list[int]]
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_job(cls, job: Job, populated: bool = True) -> "JobResponse":
        """
        Build the response for a job.

        Args:
            job: Job loaded from the store
            populated: Whether company and applications were eagerly loaded
        """
        if populated:
            company = CompanySummary(
                id=job.company.id,
                name=job.company.name,
                location=job.company.location,
                industry=job.company.industry,
            ) if job.company else None
            applications = [
                ApplicationSummary.from_application(application)
                for application in job.applications
            ]
        else:
            company = job.company_id
            applications = []

        return cls(
            id=job.id,
            title=job.title,
            description=job.description,
            requirements=list(job.requirements),
            salary=job.salary,
            location=job.location,
            job_type=job.job_type,
            experience_level=job.experience_level,
            position=job.position,
            company=company,
            created_by=job.created_by_id,
            applications=applications,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )


class JobCreatedResponse(BaseModel):
    message: str
    job: JobResponse
    success: bool = True


class JobDetailResponse(BaseModel):
    job: JobResponse
    success: bool = True


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    success: bool = True
