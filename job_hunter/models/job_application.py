import enum

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from job_hunter.database import Base
from job_hunter.database_types import UnixTimestamp


class JobApplicationStatus(str, enum.Enum):
    NEW = "New"
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    CLOSED = "Closed"
    REJECTED = "Rejected"
    WITHDRAWN = "Withdrawn"


class JobApplication(Base):
    """An application to a job post. status is a free-text label."""

    __tablename__ = "job_application"

    id = Column(Integer, primary_key=True, autoincrement=True)
    status = Column(String, nullable=False)
    date_applied = Column(UnixTimestamp)
    date_responded = Column(UnixTimestamp)
    job_post_id = Column(Integer, ForeignKey("job_post.id"), nullable=False)

    job_post = relationship("JobPost", back_populates="applications")
