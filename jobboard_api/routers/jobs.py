from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.orm import Session

from ..deps import get_current_user, get_db
from ..models import UserORM
from ..schemas import (
    ApplicationEnvelope,
    ApplicationOut,
    ApplyToJobRequest,
    JobEnvelope,
    JobListEnvelope,
    JobOut,
    MessageResponse,
)
from ..services import jobs as registry
from ..services import lifecycle

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _job_list(rows) -> JobListEnvelope:
    return JobListEnvelope(count=len(rows), data=[JobOut.model_validate(r) for r in rows])


@router.get("", response_model=JobListEnvelope)
def list_jobs(
    job_id: Optional[int] = Query(None),
    employer_id: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    tags: Optional[List[str]] = Query(None, description="any-match; repeat or comma separate"),
    is_remote: Optional[bool] = Query(None),
    deadline: Optional[str] = Query(None, description="only jobs with a deadline at or after this"),
    applied_by: Optional[int] = Query(None, description="jobs this user applied to; ignores other filters"),
    db: Session = Depends(get_db),
):
    filters = registry.JobFilters(
        job_id=job_id,
        employer_id=employer_id,
        category=category,
        location=location,
        tags=registry.normalize_tags(tags),
        is_remote=is_remote,
        deadline=registry.coerce_deadline(deadline) if deadline else None,
        applied_by=applied_by,
    )
    return _job_list(registry.query_jobs(db, filters))


@router.get("/employers/{employer_id}/jobs", response_model=JobListEnvelope)
def list_employer_jobs(
    employer_id: int,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _job_list(registry.list_employer_jobs(db, user, employer_id))


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    return JobEnvelope(data=JobOut.model_validate(registry.get_job(db, job_id)))


@router.post("", response_model=JobEnvelope, status_code=201)
def create_job(
    request: Request,
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    deadline: str = Form(...),
    tags: Optional[List[str]] = Form(None),
    location: Optional[str] = Form(None),
    is_remote: Optional[str] = Form(None),
    budget: Optional[str] = Form(None),
    media_urls: Optional[List[UploadFile]] = File(None),
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = registry.JobInput(
        title=title,
        description=description,
        category=category,
        tags=tags,
        location=location,
        is_remote=is_remote,
        deadline=deadline,
        budget=budget,
    )
    job = registry.create_job(db, user, data, media_urls, str(request.base_url))
    return JobEnvelope(data=JobOut.model_validate(job))


@router.put("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: Request,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    deadline: Optional[str] = Form(None),
    tags: Optional[List[str]] = Form(None),
    location: Optional[str] = Form(None),
    is_remote: Optional[str] = Form(None),
    budget: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    media_urls: Optional[List[UploadFile]] = File(None),
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = registry.JobInput(
        title=title,
        description=description,
        category=category,
        tags=tags,
        location=location,
        is_remote=is_remote,
        deadline=deadline,
        budget=budget,
        status=status,
    )
    job = registry.update_job(db, job_id, user, patch, media_urls, str(request.base_url))
    return JobEnvelope(data=JobOut.model_validate(job))


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(job_id: int, user: UserORM = Depends(get_current_user), db: Session = Depends(get_db)):
    registry.delete_job(db, job_id, user)
    return MessageResponse(message="Job removed successfully")


@router.post("/{job_id}/apply", response_model=ApplicationEnvelope, status_code=201)
def apply_for_job(
    job_id: int,
    payload: Optional[ApplyToJobRequest] = Body(None),
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    resume_url = payload.resume_url if payload else None
    application = lifecycle.apply_to_job(db, job_id, user, resume_url)
    return ApplicationEnvelope(
        message="Application submitted successfully",
        data=ApplicationOut.model_validate(application),
    )
