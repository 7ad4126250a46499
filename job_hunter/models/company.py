from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from job_hunter.database import Base


class Company(Base):
    """Root aggregate: a company that posts jobs."""

    __tablename__ = "company"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    career_page_base_url = Column(String)
    hidden = Column(Boolean, nullable=False, default=False, server_default="0")

    alt_names = relationship("CompanyAltName", back_populates="company")
    job_posts = relationship("JobPost", back_populates="company")

    def __repr__(self) -> str:
        return f"<Company {self.name}>"


class CompanyAltName(Base):
    """Another name a company is known by."""

    __tablename__ = "company_alt_name"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    company_id = Column(Integer, ForeignKey("company.id"), nullable=False)

    company = relationship("Company", back_populates="alt_names")
