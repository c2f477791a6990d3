from typing import List, Optional

from sqlalchemy.orm import Session

from ..errors import DuplicateApplication, Forbidden, InvalidStatusTransition, NotFound
from ..logging_config import get_logger
from ..models import ApplicationStatus, JobApplicationORM, JobORM, UserORM
from .jobs import get_job

logger = get_logger(__name__)


def find_application(db: Session, job_id: int, applicant_id: int) -> Optional[JobApplicationORM]:
    return (
        db.query(JobApplicationORM)
        .filter(JobApplicationORM.job_id == job_id, JobApplicationORM.applicant_id == applicant_id)
        .one_or_none()
    )


def submit(db: Session, job: JobORM, applicant: UserORM, resume_url: Optional[str] = None) -> JobApplicationORM:
    """Stage a pending application for (job, applicant).

    Only adds to the session; the caller commits so the application and the
    job's applicant set are written together.
    """
    if find_application(db, job.id, applicant.id) is not None:
        raise DuplicateApplication()
    application = JobApplicationORM(
        job_id=job.id,
        applicant_id=applicant.id,
        resume_url=(resume_url or applicant.resume_url or "").strip(),
        status=ApplicationStatus.PENDING,
    )
    db.add(application)
    return application


def list_by_applicant(db: Session, applicant_id: int) -> List[JobApplicationORM]:
    return (
        db.query(JobApplicationORM)
        .filter(JobApplicationORM.applicant_id == applicant_id)
        .order_by(JobApplicationORM.created_at.desc(), JobApplicationORM.id.desc())
        .all()
    )


def list_by_job(db: Session, job_id: int, caller: UserORM) -> List[JobApplicationORM]:
    job = get_job(db, job_id)
    if job.employer_id != caller.id:
        raise Forbidden("Not authorized to view applicants for this job")
    return (
        db.query(JobApplicationORM)
        .filter(JobApplicationORM.job_id == job_id)
        .order_by(JobApplicationORM.created_at.desc(), JobApplicationORM.id.desc())
        .all()
    )


def get_application(db: Session, application_id: int) -> JobApplicationORM:
    application = db.get(JobApplicationORM, application_id)
    if application is None:
        raise NotFound("Application not found")
    return application


def _job_owner_id(application: JobApplicationORM) -> Optional[int]:
    return application.job.employer_id if application.job is not None else None


def read_application(db: Session, application_id: int, caller: UserORM) -> JobApplicationORM:
    """Fetch one application; visible to its applicant and to the job's employer."""
    application = get_application(db, application_id)
    if caller.id not in (application.applicant_id, _job_owner_id(application)):
        raise Forbidden("Not authorized to view this application")
    return application


def set_status(
    db: Session,
    application_id: int,
    caller: UserORM,
    new_status: ApplicationStatus,
) -> JobApplicationORM:
    application = get_application(db, application_id)
    if _job_owner_id(application) != caller.id:
        raise Forbidden("Only the employer who posted this job can update its applications")

    current = ApplicationStatus(application.status)
    if current == new_status:
        return application
    if current.is_terminal:
        raise InvalidStatusTransition(f"Application is already {current.value}")

    application.status = new_status
    db.commit()
    db.refresh(application)
    logger.info("application id=%s status %s -> %s", application.id, current.value, new_status.value)
    return application
