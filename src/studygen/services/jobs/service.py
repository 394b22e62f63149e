from __future__ import annotations

from studygen.errors import (
    JobFailedError,
    JobNotFoundError,
    JobPendingError,
    JobStateError,
    PromptValidationError,
)
from studygen.services.jobs.executor import JobExecutor, Worker
from studygen.services.jobs.store import JobStore
from studygen.services.jobs.types import Job, JobStatus, StudyArtifact

DEFAULT_MIN_PROMPT_LENGTH = 8


def normalize_prompt(prompt: str, *, min_length: int = DEFAULT_MIN_PROMPT_LENGTH) -> str:
    normalized = prompt.strip()
    if len(normalized) < min_length:
        raise PromptValidationError("Prompt is too short, please provide more information")
    return normalized


class StudyService:
    """Submission and polling front for case study jobs."""

    def __init__(
        self,
        *,
        store: JobStore,
        executor: JobExecutor,
        worker: Worker,
        min_prompt_length: int = DEFAULT_MIN_PROMPT_LENGTH,
    ) -> None:
        self._store = store
        self._executor = executor
        self._worker = worker
        self._min_prompt_length = min_prompt_length

    def submit(self, prompt: str) -> str:
        normalized = normalize_prompt(prompt, min_length=self._min_prompt_length)
        job_id = self._store.create(prompt=normalized)
        self._executor.dispatch(job_id, normalized, self._worker)
        print(f"[jobs] submitted job_id={job_id} prompt_chars={len(normalized)}", flush=True)
        return job_id

    def status(self, job_id: str) -> JobStatus:
        job = self._store.get(job_id)
        if job is None:
            return JobStatus.UNKNOWN
        return job.status

    def result(self, job_id: str) -> StudyArtifact:
        job = self._store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if job.status is JobStatus.PENDING:
            raise JobPendingError(job_id)
        if job.status is JobStatus.FAILED:
            raise JobFailedError(job_id, job.error or "")
        if job.result is None:
            raise JobStateError(f"job {job_id} is complete without a result")
        return job.result

    def get(self, job_id: str) -> Job | None:
        return self._store.get(job_id)

    def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        return self._store.list_jobs(status)

    def join(self, timeout: float | None = None) -> bool:
        return self._executor.join(timeout)
