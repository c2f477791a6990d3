from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; every datetime column stores UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, Enum):
    EMPLOYER = "employer"
    EMPLOYEE = "employee"


class JobStatus(str, Enum):
    """Job lifecycle. Only the owning employer moves a job out of ``active``."""

    ACTIVE = "active"
    FILLED = "filled"
    EXPIRED = "expired"


class ApplicationStatus(str, Enum):
    """Application lifecycle.

    Canonical transitions:
        pending  ->  accepted | rejected
    ``accepted`` and ``rejected`` are terminal.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ApplicationStatus.PENDING


def _enum_column(enum_cls, **kwargs):
    return Column(
        SAEnum(
            enum_cls,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        **kwargs,
    )


class UserORM(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    full_name = Column(String(256), nullable=False)
    email = Column(String(320), nullable=False)
    password_hash = Column(String(256), nullable=False)
    phone_number = Column(String(64), nullable=True)
    role = _enum_column(Role, nullable=False)
    # employer only
    company_name = Column(String(256), nullable=True)
    business_registration_number = Column(String(128), nullable=True)
    # employee only
    resume_url = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )


class JobTagORM(Base):
    __tablename__ = "job_tags"
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    tag = Column(String(128), primary_key=True)
    position = Column(Integer, nullable=False, default=0)


class JobApplicantORM(Base):
    __tablename__ = "job_applicants"
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class JobORM(Base):
    __tablename__ = "jobs"
    id = Column(Integer, primary_key=True)
    title = Column(String(512), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(256), nullable=False)
    location = Column(String(256), nullable=True)
    is_remote = Column(Boolean, nullable=False, default=False)
    deadline = Column(DateTime, nullable=False)
    budget = Column(Float, nullable=True)
    media_urls = Column(JSON, nullable=False, default=list)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = _enum_column(JobStatus, nullable=False, default=JobStatus.ACTIVE)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    employer = relationship("UserORM")
    tag_rows = relationship(
        "JobTagORM",
        order_by="JobTagORM.position",
        cascade="all, delete-orphan",
    )
    applicant_rows = relationship(
        "JobApplicantORM",
        order_by="JobApplicantORM.created_at",
        cascade="all, delete-orphan",
    )

    @property
    def tags(self) -> list[str]:
        return [r.tag for r in self.tag_rows]

    def set_tags(self, tags: list[str]) -> None:
        # reuse rows for tags that survive so (job_id, tag) is never re-inserted
        existing = {r.tag: r for r in self.tag_rows}
        rows = []
        for position, tag in enumerate(tags):
            row = existing.get(tag) or JobTagORM(tag=tag)
            row.position = position
            rows.append(row)
        self.tag_rows = rows

    @property
    def applicants(self) -> list[int]:
        return [r.user_id for r in self.applicant_rows]

    def has_applicant(self, user_id: int) -> bool:
        return any(r.user_id == user_id for r in self.applicant_rows)


class JobApplicationORM(Base):
    __tablename__ = "job_applications"
    id = Column(Integer, primary_key=True)
    # plain reference: applications outlive the job they point at
    job_id = Column(Integer, nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    applicant_rating = Column(Float, nullable=False, default=0)
    resume_url = Column(Text, nullable=False, default="")
    status = _enum_column(ApplicationStatus, nullable=False, default=ApplicationStatus.PENDING)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    job = relationship(
        "JobORM",
        primaryjoin="foreign(JobApplicationORM.job_id) == JobORM.id",
        viewonly=True,
    )
    applicant = relationship("UserORM")

    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),
    )
