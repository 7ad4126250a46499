import enum

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from job_hunter.database import Base
from job_hunter.database_types import UnixTimestamp


class LocationType(str, enum.Enum):
    """Known location_type values. The column itself accepts any string."""
    ONSITE = "onsite"
    HYBRID = "hybrid"
    REMOTE = "remote"
    UNKNOWN = "unknown"


class JobPost(Base):
    __tablename__ = "job_post"

    id = Column(Integer, primary_key=True, autoincrement=True)
    location = Column(String, nullable=False)
    location_type = Column(String, nullable=False)
    url = Column(String, nullable=False)

    # Ranges are advisory; min <= max is not enforced
    min_yoe = Column(Integer)
    max_yoe = Column(Integer)
    min_pay_cents = Column(Integer)
    max_pay_cents = Column(Integer)

    date_posted = Column(UnixTimestamp)
    date_retrieved = Column(UnixTimestamp)  # NULL until retrieved
    company_id = Column(Integer, ForeignKey("company.id"), nullable=False)

    company = relationship("Company", back_populates="job_posts")
    applications = relationship("JobApplication", back_populates="job_post")

    def __repr__(self) -> str:
        return f"<JobPost {self.url}>"
