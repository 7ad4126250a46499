import logging

from sqlalchemy.orm import Session

from job_hunter.core.exceptions import ConstraintViolation
from job_hunter.database import commit_or_raise
from job_hunter.models.company import Company, CompanyAltName

logger = logging.getLogger(__name__)


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ConstraintViolation("Company name must not be empty")
    return name.strip()


def create(
    db: Session,
    name: str,
    career_page_base_url: str | None = None,
    hidden: bool = False,
) -> Company:
    company = Company(
        name=_require_name(name),
        career_page_base_url=career_page_base_url,
        hidden=hidden,
    )
    db.add(company)
    commit_or_raise(db)
    db.refresh(company)
    return company


def get_by_id(db: Session, company_id: int) -> Company | None:
    return db.query(Company).filter(Company.id == company_id).first()


def get_all(db: Session) -> list[Company]:
    """Visible companies, alphabetically."""
    return (
        db.query(Company)
        .filter(Company.hidden == False)  # noqa: E712
        .order_by(Company.name.asc())
        .all()
    )


def search_by_name(db: Session, name: str) -> list[Company]:
    """Substring match on name. Hidden companies are included."""
    return (
        db.query(Company)
        .filter(Company.name.contains(name.strip(), autoescape=True))
        .order_by(Company.name.asc())
        .all()
    )


def update(
    db: Session,
    company_id: int,
    *,
    name: str | None = None,
    career_page_base_url: str | None = None,
    hidden: bool | None = None,
) -> Company | None:
    company = get_by_id(db, company_id)
    if not company:
        return None
    if name is not None:
        company.name = _require_name(name)
    if career_page_base_url is not None:
        company.career_page_base_url = career_page_base_url or None
    if hidden is not None:
        company.hidden = hidden
    commit_or_raise(db)
    db.refresh(company)
    return company


def hide(db: Session, company_id: int) -> bool:
    """Hide one company. Returns True if it was visible before."""
    changed = (
        db.query(Company)
        .filter(Company.id == company_id, Company.hidden == False)  # noqa: E712
        .update({Company.hidden: True}, synchronize_session=False)
    )
    commit_or_raise(db)
    return changed > 0


def show_all(db: Session) -> int:
    """Un-hide every company. Returns how many were hidden."""
    count = (
        db.query(Company)
        .filter(Company.hidden == True)  # noqa: E712
        .update({Company.hidden: False}, synchronize_session=False)
    )
    commit_or_raise(db)
    if count:
        logger.info("Un-hid %d companies", count)
    return count


def add_alt_name(db: Session, company_id: int, name: str) -> CompanyAltName:
    if name is None or not name.strip():
        raise ConstraintViolation("Alternate name must not be empty")
    alt = CompanyAltName(company_id=company_id, name=name.strip())
    db.add(alt)
    commit_or_raise(db)
    db.refresh(alt)
    return alt


def get_alt_names(db: Session, company_id: int) -> list[CompanyAltName]:
    return (
        db.query(CompanyAltName)
        .filter(CompanyAltName.company_id == company_id)
        .order_by(CompanyAltName.name.asc())
        .all()
    )
