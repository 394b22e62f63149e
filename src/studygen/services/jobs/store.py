from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable
import uuid

from studygen.errors import JobNotFoundError, JobStateError
from studygen.services.jobs.types import Job, JobStatus, StudyArtifact


def new_job_id() -> str:
    return str(uuid.uuid4())


class JobStore:
    """Lock-guarded owner of every job record.

    Records are frozen snapshots. A transition swaps the stored snapshot for a
    new one while holding the lock, so ``get`` returns either the pending
    record or the terminal one and never anything in between.
    """

    def __init__(self, *, id_factory: Callable[[], str] = new_job_id) -> None:
        self._id_factory = id_factory
        self._lock = Lock()
        self._jobs: dict[str, Job] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def create(self, *, prompt: str = "") -> str:
        with self._lock:
            job_id = self._id_factory()
            while job_id in self._jobs:
                job_id = self._id_factory()
            self._jobs[job_id] = Job(
                id=job_id,
                status=JobStatus.PENDING,
                created_at=datetime.now(timezone.utc),
                prompt=prompt,
            )
        return job_id

    def get(self, job_id: str) -> Job | None:
        with self._lock:
            return self._jobs.get(job_id)

    def list_jobs(self, status: JobStatus | None = None) -> list[Job]:
        with self._lock:
            jobs = list(self._jobs.values())
        if status is not None:
            jobs = [job for job in jobs if job.status is status]
        return sorted(jobs, key=lambda job: job.created_at)

    def complete(self, job_id: str, result: StudyArtifact) -> Job:
        return self._finish(job_id, status=JobStatus.COMPLETE, result=result)

    def fail(self, job_id: str, error: str) -> Job:
        return self._finish(job_id, status=JobStatus.FAILED, error=error)

    def _finish(
        self,
        job_id: str,
        *,
        status: JobStatus,
        result: StudyArtifact | None = None,
        error: str | None = None,
    ) -> Job:
        with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                raise JobNotFoundError(job_id)
            if current.is_terminal:
                raise JobStateError(
                    f"job {job_id} is already {current.status.value}; cannot mark {status.value}"
                )
            finished = replace(
                current,
                status=status,
                finished_at=datetime.now(timezone.utc),
                result=result,
                error=error,
            )
            self._jobs[job_id] = finished
        return finished
