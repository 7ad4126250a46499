from job_hunter.models.company import Company, CompanyAltName
from job_hunter.models.job_post import JobPost, LocationType
from job_hunter.models.job_application import JobApplication, JobApplicationStatus
from job_hunter.models.schema_migration import SchemaMigration

__all__ = [
    "Company",
    "CompanyAltName",
    "JobPost",
    "LocationType",
    "JobApplication",
    "JobApplicationStatus",
    "SchemaMigration",
]
