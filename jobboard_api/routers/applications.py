from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..deps import get_current_user, get_db
from ..errors import Forbidden
from ..models import UserORM
from ..schemas import (
    ApplicationEnvelope,
    ApplicationOut,
    ApplicationWithApplicant,
    ApplicationWithJob,
    ApplyRequest,
    StatusUpdate,
)
from ..services import applications as ledger
from ..services import lifecycle

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.post("/apply", response_model=ApplicationEnvelope, status_code=201)
def apply_for_job(
    req: ApplyRequest,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if req.applicant_id is not None and req.applicant_id != user.id:
        raise Forbidden("You can only apply on your own behalf")
    application = lifecycle.apply_to_job(db, req.job_id, user, req.resume_url)
    return ApplicationEnvelope(
        message="Application submitted successfully",
        data=ApplicationOut.model_validate(application),
    )


@router.get("/applicant/{applicant_id}", response_model=List[ApplicationWithJob])
def get_applied_jobs(
    applicant_id: int,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = ledger.list_by_applicant(db, applicant_id)
    return [ApplicationWithJob.model_validate(r) for r in rows]


@router.get("/job/{job_id}", response_model=List[ApplicationWithApplicant])
def get_job_applicants(
    job_id: int,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = ledger.list_by_job(db, job_id, user)
    return [ApplicationWithApplicant.model_validate(r) for r in rows]


@router.get("/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: int,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApplicationOut.model_validate(ledger.read_application(db, application_id, user))


@router.put("/{application_id}", response_model=ApplicationOut)
def update_application_status(
    application_id: int,
    req: StatusUpdate,
    user: UserORM = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ApplicationOut.model_validate(ledger.set_status(db, application_id, user, req.status))
