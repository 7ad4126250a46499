import enum
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from job_hunter.core.exceptions import ConstraintViolation
from job_hunter.database import commit_or_raise
from job_hunter.models.job_application import JobApplication, JobApplicationStatus


def _status(value: JobApplicationStatus | str) -> str:
    """Any non-empty label is accepted; the enum only lists the common ones."""
    if isinstance(value, enum.Enum):
        value = value.value
    if value is None or not str(value).strip():
        raise ConstraintViolation("Application status must not be empty")
    return str(value).strip()


def create(
    db: Session,
    job_post_id: int,
    status: JobApplicationStatus | str = JobApplicationStatus.NEW,
    date_applied: datetime | None = None,
    date_responded: datetime | None = None,
) -> JobApplication:
    application = JobApplication(
        job_post_id=job_post_id,
        status=_status(status),
        date_applied=date_applied,
        date_responded=date_responded,
    )
    db.add(application)
    commit_or_raise(db)
    db.refresh(application)
    return application


def get_by_id(db: Session, application_id: int) -> JobApplication | None:
    return db.query(JobApplication).filter(JobApplication.id == application_id).first()


def get_by_job_post_id(db: Session, job_post_id: int) -> JobApplication | None:
    return (
        db.query(JobApplication)
        .filter(JobApplication.job_post_id == job_post_id)
        .order_by(JobApplication.id.asc())
        .first()
    )


def update(
    db: Session,
    application_id: int,
    *,
    status: JobApplicationStatus | str | None = None,
    date_applied: datetime | None = None,
    date_responded: datetime | None = None,
) -> JobApplication | None:
    application = get_by_id(db, application_id)
    if not application:
        return None
    if status is not None:
        application.status = _status(status)
    if date_applied is not None:
        application.date_applied = date_applied
    if date_responded is not None:
        application.date_responded = date_responded
    commit_or_raise(db)
    db.refresh(application)
    return application


def update_status(
    db: Session,
    application_id: int,
    status: JobApplicationStatus | str,
) -> JobApplication | None:
    application = get_by_id(db, application_id)
    if not application:
        return None
    application.status = _status(status)
    if application.status == JobApplicationStatus.APPLIED.value and application.date_applied is None:
        application.date_applied = datetime.now(timezone.utc)
    commit_or_raise(db)
    db.refresh(application)
    return application
