import enum
from datetime import datetime, timezone

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from job_hunter.database import commit_or_raise
from job_hunter.models.company import Company
from job_hunter.models.job_application import JobApplication
from job_hunter.models.job_post import JobPost, LocationType

_UPDATABLE = {
    "location",
    "location_type",
    "url",
    "min_yoe",
    "max_yoe",
    "min_pay_cents",
    "max_pay_cents",
    "date_posted",
    "date_retrieved",
    "company_id",
}


def _location_type(value: LocationType | str) -> str:
    return value.value if isinstance(value, enum.Enum) else value


def create(
    db: Session,
    company_id: int,
    location: str,
    location_type: LocationType | str,
    url: str,
    *,
    min_yoe: int | None = None,
    max_yoe: int | None = None,
    min_pay_cents: int | None = None,
    max_pay_cents: int | None = None,
    date_posted: datetime | None = None,
    date_retrieved: datetime | None = None,
) -> JobPost:
    post = JobPost(
        company_id=company_id,
        location=location,
        location_type=_location_type(location_type),
        url=url,
        min_yoe=min_yoe,
        max_yoe=max_yoe,
        min_pay_cents=min_pay_cents,
        max_pay_cents=max_pay_cents,
        date_posted=date_posted,
        date_retrieved=date_retrieved,
    )
    db.add(post)
    commit_or_raise(db)
    db.refresh(post)
    return post


def get_by_id(db: Session, post_id: int) -> JobPost | None:
    return db.query(JobPost).filter(JobPost.id == post_id).first()


def get_all_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    *,
    company_name: str | None = None,
    location: str | None = None,
    min_yoe: int | None = None,
    max_yoe: int | None = None,
    location_types: list[LocationType | str] | None = None,
) -> tuple[list[JobPost], int]:
    """
    List posts of visible companies with optional filters. Returns (items, total).

    Posts nobody has applied to come first, then by most recent application,
    response, posting and retrieval date.
    """
    # Latest application dates, one row per post.
    apps = (
        db.query(
            JobApplication.job_post_id.label("job_post_id"),
            func.max(JobApplication.date_applied).label("applied"),
            func.max(JobApplication.date_responded).label("responded"),
        )
        .group_by(JobApplication.job_post_id)
        .subquery()
    )
    q = (
        db.query(JobPost)
        .join(Company, JobPost.company_id == Company.id)
        .outerjoin(apps, apps.c.job_post_id == JobPost.id)
        .filter(Company.hidden == False)  # noqa: E712
    )
    if company_name and company_name.strip():
        q = q.filter(Company.name.contains(company_name.strip(), autoescape=True))
    if location and location.strip():
        q = q.filter(JobPost.location.contains(location.strip(), autoescape=True))
    if min_yoe is not None:
        q = q.filter(JobPost.min_yoe >= min_yoe)
    if max_yoe is not None:
        q = q.filter(JobPost.max_yoe <= max_yoe)
    if location_types:
        q = q.filter(JobPost.location_type.in_([_location_type(t) for t in location_types]))

    total = q.with_entities(func.count(distinct(JobPost.id))).scalar()
    items = (
        q.order_by(
            apps.c.applied.desc().nulls_first(),
            apps.c.responded.desc(),
            JobPost.date_posted.desc(),
            JobPost.date_retrieved.desc(),
            JobPost.id.asc(),
        )
        .offset((max(page, 1) - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def update(db: Session, post_id: int, **fields) -> JobPost | None:
    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise TypeError(f"Unknown job post fields: {', '.join(sorted(unknown))}")
    post = get_by_id(db, post_id)
    if not post:
        return None
    for key, value in fields.items():
        if key == "location_type":
            value = _location_type(value)
        setattr(post, key, value)
    commit_or_raise(db)
    db.refresh(post)
    return post


def mark_retrieved(db: Session, post_id: int, when: datetime | None = None) -> JobPost | None:
    return update(db, post_id, date_retrieved=when or datetime.now(timezone.utc))
