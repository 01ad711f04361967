"""
Jobs Module

Job postings: free-text description, requirement tags, compensation, and the
company and creator they belong to.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    func,
    Text,
    JSON,
    Float,
    Integer,
    Index,
)
from database.engine import Base, IdType
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.applications import Application
    from database.models.companies import Company
    from database.models.users import User


class Job(Base):
    """
    A posted position.

    ``company_id`` and ``created_by_id`` are references only; whether the
    referenced rows exist is left to the database.
    """

    __tablename__: str = "jobs"
    __table_args__ = (
        Index("idx_jobs_created_by_created_at", "created_by_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requirements: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    salary: Mapped[float] = mapped_column(Float, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    job_type: Mapped[str] = mapped_column(String(100), nullable=False)
    experience_level: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    company_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("companies.id"), nullable=False, index=True
    )
    created_by_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=func.now(),
    )

    company: Mapped["Company | None"] = relationship("Company")
    created_by: Mapped["User | None"] = relationship("User")
    applications: Mapped[list["Application"]] = relationship(
        "Application",
        back_populates="job",
        order_by="Application.id",
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title!r})>"
