from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Union

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import Forbidden, InvalidInput, NotFound
from ..logging_config import get_logger
from ..models import JobApplicantORM, JobORM, JobStatus, JobTagORM, Role, UserORM
from . import storage

logger = get_logger(__name__)

TagInput = Union[str, Iterable[str], None]

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


# -----------------------
# Input normalization
# -----------------------
def _split_tags(raw: str) -> List[str]:
    raw = raw.strip()
    if raw.startswith("[") and raw.endswith("]"):
        try:
            parsed = json.loads(raw)
        except ValueError:
            raise InvalidInput("tags must be a JSON array or a comma separated list")
        if not isinstance(parsed, list):
            raise InvalidInput("tags must be a JSON array or a comma separated list")
        if any(t is not None and not isinstance(t, str) for t in parsed):
            raise InvalidInput("tags must be strings")
        return [t for t in parsed if t is not None]
    return raw.split(",")


def normalize_tags(value: TagInput) -> List[str]:
    """Accept 'a, b', '["a","b"]' or an iterable of either; trim, drop empties, dedupe in order."""
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    tags: List[str] = []
    for item in items:
        for tag in _split_tags(str(item)):
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
    return tags


def coerce_bool(value: Union[str, bool, None]) -> bool:
    if isinstance(value, bool):
        return value
    text = (value or "").strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidInput(f"Invalid boolean value: {value!r}")


def coerce_budget(value: Union[str, float, int, None]) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        budget = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid budget: {value!r}")
    if not math.isfinite(budget):
        raise InvalidInput(f"Invalid budget: {value!r}")
    return budget


def coerce_deadline(value: Union[str, datetime, date, None]) -> datetime:
    """Parse an ISO date or datetime into naive UTC. A bare date means midnight UTC."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInput("deadline is required")
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidInput(f"Invalid deadline: {value!r}")
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def coerce_status(value: Union[str, JobStatus]) -> JobStatus:
    try:
        return JobStatus(value)
    except ValueError:
        raise InvalidInput(f"Invalid job status: {value!r}")


# -----------------------
# Inputs
# -----------------------
@dataclass
class JobInput:
    """Raw job attributes as received; every field is optional so it doubles as a patch."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: TagInput = None
    location: Optional[str] = None
    is_remote: Union[str, bool, None] = None
    deadline: Union[str, datetime, None] = None
    budget: Union[str, float, None] = None
    status: Optional[str] = None


@dataclass
class JobFilters:
    job_id: Optional[int] = None
    employer_id: Optional[int] = None
    category: Optional[str] = None
    location: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_remote: Optional[bool] = None
    deadline: Optional[datetime] = None
    # exclusive: when set, every other filter is ignored
    applied_by: Optional[int] = None


# -----------------------
# Registry operations
# -----------------------
def _commit_with_media(db: Session, new_media: List[str]) -> None:
    """Commit, removing media stored for this change if the commit fails."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.delete_media(new_media)
        raise


def get_job(db: Session, job_id: int) -> JobORM:
    job = db.get(JobORM, job_id)
    if job is None:
        raise NotFound("Job not found")
    return job


def _ensure_owner(job: JobORM, caller: UserORM, action: str) -> None:
    if job.employer_id != caller.id:
        raise Forbidden(f"You are not authorized to {action} this job")


def create_job(
    db: Session,
    caller: UserORM,
    data: JobInput,
    uploads: Optional[List[UploadFile]] = None,
    base_url: str = "/",
) -> JobORM:
    if caller.role != Role.EMPLOYER:
        raise Forbidden("Only employers can create job postings")
    for name in ("title", "description", "category"):
        if not (getattr(data, name) or "").strip():
            raise InvalidInput(f"{name} is required")

    job = JobORM(
        title=data.title.strip(),
        description=data.description,
        category=data.category.strip(),
        location=data.location or None,
        is_remote=coerce_bool(data.is_remote),
        deadline=coerce_deadline(data.deadline),
        budget=coerce_budget(data.budget),
        employer_id=caller.id,
        status=JobStatus.ACTIVE,
    )
    job.set_tags(normalize_tags(data.tags))
    job.media_urls = storage.save_uploads(uploads, base_url)

    db.add(job)
    _commit_with_media(db, job.media_urls)
    db.refresh(job)
    logger.info("job created id=%s employer=%s media=%d", job.id, caller.id, len(job.media_urls))
    return job


def query_jobs(db: Session, filters: JobFilters) -> List[JobORM]:
    query = db.query(JobORM)
    if filters.applied_by is not None:
        query = query.filter(JobORM.applicant_rows.any(JobApplicantORM.user_id == filters.applied_by))
    else:
        if filters.job_id is not None:
            query = query.filter(JobORM.id == filters.job_id)
        if filters.employer_id is not None:
            query = query.filter(JobORM.employer_id == filters.employer_id)
        if filters.category:
            query = query.filter(JobORM.category == filters.category)
        if filters.location:
            query = query.filter(JobORM.location == filters.location)
        if filters.tags:
            query = query.filter(JobORM.tag_rows.any(JobTagORM.tag.in_(filters.tags)))
        if filters.is_remote is not None:
            query = query.filter(JobORM.is_remote == filters.is_remote)
        if filters.deadline is not None:
            query = query.filter(JobORM.deadline >= filters.deadline)
    return query.order_by(JobORM.created_at.desc(), JobORM.id.desc()).all()


def list_employer_jobs(db: Session, caller: UserORM, employer_id: int) -> List[JobORM]:
    if caller.id != employer_id:
        raise Forbidden("Not authorized to access these jobs")
    return query_jobs(db, JobFilters(employer_id=employer_id))


def update_job(
    db: Session,
    job_id: int,
    caller: UserORM,
    patch: JobInput,
    uploads: Optional[List[UploadFile]] = None,
    base_url: str = "/",
) -> JobORM:
    job = get_job(db, job_id)
    _ensure_owner(job, caller, "update")

    for name in ("title", "description", "category"):
        value = getattr(patch, name)
        if value is not None:
            if not value.strip():
                raise InvalidInput(f"{name} cannot be empty")
            setattr(job, name, value.strip() if name != "description" else value)
    if patch.location is not None:
        job.location = patch.location or None
    if patch.tags is not None:
        job.set_tags(normalize_tags(patch.tags))
    if patch.is_remote is not None:
        job.is_remote = coerce_bool(patch.is_remote)
    if patch.deadline is not None:
        job.deadline = coerce_deadline(patch.deadline)
    if patch.budget is not None:
        job.budget = coerce_budget(patch.budget)
    if patch.status is not None:
        job.status = coerce_status(patch.status)

    new_media = storage.save_uploads(uploads, base_url)
    if new_media:
        # appended, existing media stay
        job.media_urls = [*(job.media_urls or []), *new_media]

    _commit_with_media(db, new_media)
    db.refresh(job)
    logger.info("job updated id=%s new_media=%d", job.id, len(new_media))
    return job


def delete_job(db: Session, job_id: int, caller: UserORM) -> None:
    job = get_job(db, job_id)
    _ensure_owner(job, caller, "delete")

    removed = storage.delete_media(job.media_urls or [])
    db.delete(job)
    db.commit()
    logger.info("job deleted id=%s media_removed=%d", job_id, removed)


def record_applicant(job: JobORM, applicant_id: int) -> bool:
    """Add an applicant to the job's set. Returns False if already present. Does not commit."""
    if job.has_applicant(applicant_id):
        return False
    job.applicant_rows.append(JobApplicantORM(user_id=applicant_id))
    return True
