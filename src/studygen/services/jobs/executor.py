from __future__ import annotations

from contextlib import nullcontext
from threading import BoundedSemaphore, Lock, Thread, current_thread
from time import monotonic, perf_counter
from typing import Callable

from studygen.errors import JobNotFoundError, JobStateError
from studygen.services.jobs.store import JobStore
from studygen.services.jobs.types import StudyArtifact

Worker = Callable[[str], StudyArtifact]


class JobExecutor:
    """Runs each dispatched job on its own daemon thread.

    ``max_concurrent_jobs=0`` leaves dispatch unbounded. A positive value makes
    extra jobs wait, still pending, for a free slot inside their thread.
    """

    def __init__(self, store: JobStore, *, max_concurrent_jobs: int = 0) -> None:
        self._store = store
        self._slots = BoundedSemaphore(max_concurrent_jobs) if max_concurrent_jobs > 0 else None
        self._threads_lock = Lock()
        self._threads: set[Thread] = set()

    def dispatch(self, job_id: str, request: str, worker: Worker) -> Thread:
        thread = Thread(
            target=self._run,
            args=(job_id, request, worker),
            name=f"study-job-{job_id[:8]}",
            daemon=True,
        )
        # join() must never see a registered thread that has not started yet.
        with self._threads_lock:
            self._threads.add(thread)
            thread.start()
        return thread

    def active_count(self) -> int:
        with self._threads_lock:
            return len(self._threads)

    def join(self, timeout: float | None = None) -> bool:
        deadline = None if timeout is None else monotonic() + timeout
        while True:
            with self._threads_lock:
                pending = list(self._threads)
            if not pending:
                return True
            for thread in pending:
                remaining = None if deadline is None else max(0.0, deadline - monotonic())
                thread.join(remaining)
            if deadline is not None and monotonic() >= deadline:
                return self.active_count() == 0

    def _run(self, job_id: str, request: str, worker: Worker) -> None:
        try:
            with self._slots if self._slots is not None else nullcontext():
                self._execute(job_id, request, worker)
        finally:
            with self._threads_lock:
                self._threads.discard(current_thread())

    def _execute(self, job_id: str, request: str, worker: Worker) -> None:
        print(f"[executor] job started job_id={job_id}", flush=True)
        start = perf_counter()

        try:
            result = worker(request)
            if not isinstance(result, StudyArtifact):
                raise TypeError(f"worker returned {type(result).__name__}, expected StudyArtifact")
            self._store.complete(job_id, result)
        except BaseException as exc:
            self._record_failure(job_id, exc, start)
            if not isinstance(exc, Exception):
                raise
            return

        duration_ms = int((perf_counter() - start) * 1000)
        print(f"[executor] job succeeded job_id={job_id} duration_ms={duration_ms}", flush=True)

    def _record_failure(self, job_id: str, exc: BaseException, start: float) -> None:
        message = str(exc) or exc.__class__.__name__
        duration_ms = int((perf_counter() - start) * 1000)
        try:
            self._store.fail(job_id, message)
        except (JobNotFoundError, JobStateError) as store_exc:
            print(
                f"[executor] job outcome not recorded job_id={job_id} error={message} reason={store_exc}",
                flush=True,
            )
            return
        print(
            f"[executor] job failed job_id={job_id} duration_ms={duration_ms} error={message}",
            flush=True,
        )
