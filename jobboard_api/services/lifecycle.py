"""Single entry point for applying to a job.

Both HTTP apply routes end up in ``apply_to_job`` so there is one set of
checks, and the application row plus the job's applicant-set entry are
committed in one transaction.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DeadlinePassed, DuplicateApplication, Forbidden, JobClosed
from ..logging_config import get_logger
from ..models import JobApplicationORM, JobStatus, Role, UserORM, utcnow
from . import applications, jobs

logger = get_logger(__name__)


def apply_to_job(
    db: Session,
    job_id: int,
    applicant: UserORM,
    resume_url: Optional[str] = None,
) -> JobApplicationORM:
    """
    Record one application attempt.

    Checks, in order:
        1. caller is an employee                     -> Forbidden
        2. job exists                                -> NotFound
        3. deadline still ahead                      -> DeadlinePassed
        4. job is active                             -> JobClosed
        5. not in the applicant set, no ledger row   -> DuplicateApplication

    The deadline is checked before the status so an overdue job always
    reports DeadlinePassed, whatever its status.
    """
    if applicant.role != Role.EMPLOYEE:
        raise Forbidden("Only employees can apply for jobs")

    job = jobs.get_job(db, job_id)
    if job.deadline <= utcnow():
        raise DeadlinePassed()
    if job.status != JobStatus.ACTIVE:
        raise JobClosed()
    if job.has_applicant(applicant.id):
        raise DuplicateApplication()

    application = applications.submit(db, job, applicant, resume_url)
    jobs.record_applicant(job, applicant.id)
    try:
        db.commit()
    except IntegrityError as e:
        # a concurrent attempt for the same pair committed first
        db.rollback()
        raise DuplicateApplication(original_error=e)

    db.refresh(application)
    logger.info("application id=%s job=%s applicant=%s", application.id, job_id, applicant.id)
    return application
