"""
Job persistence.

Queries jobs and eagerly loads ("populates") the company and the
applications with their applicants. No validation happens here.
"""

import logging
from typing import Any, Optional

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from database.models.applications import Application
from database.models.jobs import Job

logger = logging.getLogger(__name__)


def _populated(query: Select) -> Select:
    """Attach eager loads for company and applications -> applicant."""
    return query.options(
        selectinload(Job.company),
        selectinload(Job.applications).selectinload(Application.applicant),
    )


def keyword_filter(keyword: str):
    """
    Case-insensitive literal substring match on title or description.

    LIKE wildcards in the keyword are escaped, so ``%`` or ``_`` only match
    themselves.
    """
    return or_(
        Job.title.icontains(keyword, autoescape=True),
        Job.description.icontains(keyword, autoescape=True),
    )


class JobStore:
    """Async job store bound to a session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(self, fields: dict[str, Any]) -> Job:
        """Insert a job and return it (relations not loaded)."""
        async with self.session_factory() as session:
            job = Job(**fields)
            session.add(job)
            await session.commit()
            await session.refresh(job)
            logger.info(f"Created job {job.id} for company {job.company_id}")
            return job

    async def find(
        self,
        keyword: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> list[Job]:
        """
        List populated jobs, newest first.

        Args:
            keyword: Optional search text; empty or None matches everything
            created_by: Optional creator id to filter on
        """
        query = _populated(select(Job))
        if keyword:
            query = query.where(keyword_filter(keyword))
        if created_by is not None:
            query = query.where(Job.created_by_id == created_by)
        query = query.order_by(Job.created_at.desc(), Job.id.desc())

        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def find_by_id(self, job_id: int) -> Optional[Job]:
        """Get one populated job, or None."""
        query = _populated(select(Job).where(Job.id == job_id))
        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()
