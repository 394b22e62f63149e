from __future__ import annotations


class StudyError(RuntimeError):
    pass


class PromptValidationError(StudyError):
    """The prompt was rejected before any job was created."""


class GenerationError(StudyError):
    """The language model call failed or returned an unusable answer."""


class RenderError(StudyError):
    """The slide renderer could not produce a PDF."""


class JobNotFoundError(StudyError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"job not found: {job_id}")
        self.job_id = job_id


class JobPendingError(StudyError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"job is still pending: {job_id}")
        self.job_id = job_id


class JobFailedError(StudyError):
    def __init__(self, job_id: str, message: str) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.message = message


class JobStateError(StudyError):
    """A terminal transition was requested for a job that is no longer pending."""
