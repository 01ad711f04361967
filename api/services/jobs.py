"""Job service: creation, search and lookups of job postings."""

from typing import Any, Optional, Union
import logging
import math

from core.exceptions import (
    InternalError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from database.models.jobs import Job
from database.repositories.jobs import JobStore
from api.schemas.jobs import JobCreateRequest

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Something is missing."
JOBS_NOT_FOUND_MESSAGE = "Jobs not found."
JOB_NOT_FOUND_MESSAGE = "Job not found."
JOB_CREATED_MESSAGE = "New job created successfully."

# Largest id a BIGINT column holds
MAX_REFERENCE = 2**63 - 1
# Largest value an INTEGER column holds
MAX_INTEGER = 2**31 - 1

REQUIRED_FIELDS = (
    "title",
    "description",
    "requirements",
    "salary",
    "location",
    "job_type",
    "experience",
    "position",
    "company_id",
)


def is_provided(value: Any) -> bool:
    """
    Presence check for a payload value.

    None, empty strings and empty lists are absent; numeric zero is present.
    """
    if value is None:
        return False
    if isinstance(value, (str, list)):
        return len(value) > 0
    return True


def as_text(value: Union[str, int, float]) -> str:
    """Store numbers given for text fields in their string form."""
    return value if isinstance(value, str) else str(value)


def normalize_requirements(requirements: Union[list, str, int, float]) -> list[str]:
    """Return requirement tags, splitting a comma-delimited string."""
    if isinstance(requirements, list):
        return [as_text(tag) for tag in requirements]
    return as_text(requirements).split(",")


def coerce_number(value: Union[int, float, str], field: str) -> float:
    """Coerce a payload value to a finite float."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid number for {field}.")
    if not math.isfinite(number):
        raise ValidationError(f"Invalid number for {field}.")
    return number


def coerce_integer(value: Union[int, float, str], field: str) -> int:
    """
    Coerce a payload value to an integer.

    Fractional values and values outside the INTEGER column range are
    rejected.
    """
    number = coerce_number(value, field)
    if not number.is_integer() or abs(number) > MAX_INTEGER:
        raise ValidationError(f"Invalid number for {field}.")
    return int(number)


def parse_reference(value: Union[int, str]) -> Optional[int]:
    """
    Parse a reference identifier.

    Returns None when the value is not a positive integer id.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 < value <= MAX_REFERENCE else None
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    reference = int(text)
    return reference if 0 < reference <= MAX_REFERENCE else None


class JobService:
    """
    Job operations on top of a JobStore.

    Each public method converts unexpected failures into ``InternalError``
    so callers only ever see ``JobBoardError`` subclasses.
    """

    def __init__(self, store: JobStore):
        self.store = store

    async def create_job(self, payload: JobCreateRequest, actor_id: Union[int, str]) -> Job:
        """
        Validate, normalize and persist a new job.

        Raises:
            ValidationError: A required field is absent or not numeric
            InvalidReferenceError: companyId or actor_id is malformed
        """
        missing = [
            name for name in REQUIRED_FIELDS
            if not is_provided(getattr(payload, name))
        ]
        if missing:
            logger.info(f"Job creation rejected, missing fields: {', '.join(missing)}")
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        salary = coerce_number(payload.salary, "salary")
        experience_level = coerce_integer(payload.experience, "experience")
        position = coerce_integer(payload.position, "position")

        company_id = parse_reference(payload.company_id)
        if company_id is None:
            raise self._invalid_reference("company", payload.company_id)
        created_by_id = parse_reference(actor_id)
        if created_by_id is None:
            raise self._invalid_reference("created_by", actor_id)

        fields = {
            "title": as_text(payload.title),
            "description": as_text(payload.description),
            "requirements": normalize_requirements(payload.requirements),
            "salary": salary,
            "location": as_text(payload.location),
            "job_type": as_text(payload.job_type),
            "experience_level": experience_level,
            "position": position,
            "company_id": company_id,
            "created_by_id": created_by_id,
        }

        try:
            return await self.store.create(fields)
        except Exception as exc:
            raise self._internal_error("create_job", exc) from exc

    async def list_jobs(self, keyword: Optional[str] = None) -> list[Job]:
        """
        Search jobs by keyword in title or description, newest first.

        Raises:
            NotFoundError: No job matched
        """
        try:
            jobs = await self.store.find(keyword=keyword or "")
        except Exception as exc:
            raise self._internal_error("list_jobs", exc) from exc

        if not jobs:
            raise NotFoundError(JOBS_NOT_FOUND_MESSAGE)
        return jobs

    async def get_job_by_id(self, job_id: Union[int, str]) -> Job:
        """
        Get one populated job.

        Raises:
            NotFoundError: The id is malformed or no such job exists
        """
        reference = parse_reference(job_id)
        if reference is None:
            raise NotFoundError(JOB_NOT_FOUND_MESSAGE)

        try:
            job = await self.store.find_by_id(reference)
        except Exception as exc:
            raise self._internal_error("get_job_by_id", exc) from exc

        if job is None:
            raise NotFoundError(JOB_NOT_FOUND_MESSAGE)
        return job

    async def list_jobs_by_creator(self, actor_id: Union[int, str]) -> list[Job]:
        """
        List jobs created by the actor, newest first.

        Raises:
            NotFoundError: The actor has no jobs
        """
        creator = parse_reference(actor_id)
        if creator is None:
            raise NotFoundError(JOBS_NOT_FOUND_MESSAGE)

        try:
            jobs = await self.store.find(created_by=creator)
        except Exception as exc:
            raise self._internal_error("list_jobs_by_creator", exc) from exc

        if not jobs:
            raise NotFoundError(JOBS_NOT_FOUND_MESSAGE)
        return jobs

    @staticmethod
    def _invalid_reference(field: str, value: Any) -> InvalidReferenceError:
        logger.warning(f"Job creation rejected, invalid reference for {field}: {value!r}")
        return InvalidReferenceError(field, value)

    @staticmethod
    def _internal_error(operation: str, exc: Exception) -> InternalError:
        logger.error(f"{operation} failed: {type(exc).__name__}: {exc}", exc_info=exc)
        return InternalError(str(exc))
