from studygen.services.jobs.executor import JobExecutor, Worker
from studygen.services.jobs.service import StudyService, normalize_prompt
from studygen.services.jobs.store import JobStore, new_job_id
from studygen.services.jobs.types import Job, JobStatus, StudyArtifact

__all__ = [
    "Job",
    "JobExecutor",
    "JobStatus",
    "JobStore",
    "StudyArtifact",
    "StudyService",
    "Worker",
    "new_job_id",
    "normalize_prompt",
]
