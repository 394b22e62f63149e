from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from studygen.llm import CaseStudy


class JobStatus(str, Enum):
    UNKNOWN = "unknown"
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class StudyArtifact:
    pdf_path: str
    case_study: CaseStudy


@dataclass(frozen=True)
class Job:
    """Immutable snapshot of one tracked unit of work.

    A pending job carries neither result nor error; a terminal job carries
    exactly the one that matches its status.
    """

    id: str
    status: JobStatus
    created_at: datetime
    prompt: str = ""
    finished_at: datetime | None = None
    result: StudyArtifact | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.status is JobStatus.PENDING:
            consistent = self.result is None and self.error is None
        elif self.status is JobStatus.COMPLETE:
            consistent = self.result is not None and self.error is None
        elif self.status is JobStatus.FAILED:
            consistent = self.result is None and self.error is not None
        else:
            raise ValueError(f"invalid stored job status: {self.status!r}")

        if not consistent:
            raise ValueError(
                f"inconsistent job record id={self.id} status={self.status.value} "
                f"result={'set' if self.result is not None else 'unset'} "
                f"error={'set' if self.error is not None else 'unset'}"
            )

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETE, JobStatus.FAILED)
