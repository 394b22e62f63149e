from datetime import datetime
from functools import lru_cache
from pathlib import Path
import sys
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict

from studygen.config import get_settings
from studygen.errors import (
    JobFailedError,
    JobNotFoundError,
    JobPendingError,
    PromptValidationError,
)
from studygen.llm import CaseStudyGenerator, OpenAIChatClient
from studygen.services.jobs import Job, JobExecutor, JobStatus, JobStore, StudyService
from studygen.services.slides import ChromiumSlideRenderer, SlideRenderer
from studygen.worker import CaseStudyWorker

app = FastAPI(title="Case Study Generator API", version="0.1.0")


class StudyRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    prompt: str


def get_llm_client() -> CaseStudyGenerator:
    settings = get_settings()
    return OpenAIChatClient(
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        default_model=settings.openai_model,
        fallback_model=settings.openai_fallback_model,
        timeout_seconds=settings.openai_timeout_seconds,
    )


def get_slide_renderer() -> SlideRenderer:
    settings = get_settings()
    return ChromiumSlideRenderer(
        output_dir=Path(settings.slides_output_dir),
        chromium_binary=settings.chromium_binary,
        timeout_seconds=settings.render_timeout_seconds,
    )


@lru_cache
def get_study_service() -> StudyService:
    settings = get_settings()
    store = JobStore()
    return StudyService(
        store=store,
        executor=JobExecutor(store, max_concurrent_jobs=settings.max_concurrent_jobs),
        worker=CaseStudyWorker(llm_client=get_llm_client(), renderer=get_slide_renderer()),
        min_prompt_length=settings.min_prompt_length,
    )


@app.on_event("shutdown")
def shutdown() -> None:
    if get_study_service.cache_info().currsize == 0:
        return
    settings = get_settings()
    drained = get_study_service().join(timeout=settings.shutdown_timeout_seconds)
    if not drained:
        print(
            f"[api] shutdown left studies pending after {settings.shutdown_timeout_seconds}s",
            flush=True,
        )


def _to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _job_summary(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "status": job.status.value,
    }


def _job_detail(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "status": job.status.value,
        "prompt": job.prompt,
        "created_at": _to_iso(job.created_at),
        "finished_at": _to_iso(job.finished_at),
        "error": job.error,
        "case_study": job.result.case_study.model_dump() if job.result is not None else None,
        "pdf_url": f"/studies/{job.id}.pdf" if job.result is not None else None,
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/studies")
def submit_study(
    request: StudyRequest,
    service: Annotated[StudyService, Depends(get_study_service)],
) -> JSONResponse:
    try:
        job_id = service.submit(request.prompt)
    except PromptValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return JSONResponse(
        status_code=202,
        content={
            "job_id": job_id,
            "status": JobStatus.PENDING.value,
            "status_url": f"/studies/{job_id}/status",
        },
    )


@app.get("/studies")
def list_studies(
    service: Annotated[StudyService, Depends(get_study_service)],
    status: JobStatus | None = Query(default=None),
) -> list[dict[str, Any]]:
    return [_job_summary(job) for job in service.list_jobs(status)]


@app.get("/studies/{job_id}/status")
def study_status(
    job_id: str,
    service: Annotated[StudyService, Depends(get_study_service)],
) -> dict[str, str]:
    return {"job_id": job_id, "status": service.status(job_id).value}


@app.get("/studies/{job_id}.pdf")
def download_study(
    job_id: str,
    service: Annotated[StudyService, Depends(get_study_service)],
) -> FileResponse:
    try:
        artifact = service.result(job_id)
    except JobNotFoundError as exc:
        raise HTTPException(status_code=404, detail="study not found") from exc
    except JobPendingError as exc:
        raise HTTPException(status_code=409, detail="study is still being generated") from exc
    except JobFailedError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc

    pdf_path = Path(artifact.pdf_path)
    if not pdf_path.exists():
        raise HTTPException(status_code=404, detail="study file not found")
    return FileResponse(pdf_path, media_type="application/pdf", filename=f"{job_id}.pdf")


@app.get("/studies/{job_id}")
def get_study(
    job_id: str,
    service: Annotated[StudyService, Depends(get_study_service)],
) -> dict[str, Any]:
    job = service.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="study not found")
    return _job_detail(job)


def run() -> None:
    import uvicorn

    settings = get_settings()
    if not settings.openai_api_key:
        print("[api] OpenAI key not set (OPENAI_KEY or OPENAI_KEY_PATH)", file=sys.stderr, flush=True)
        raise SystemExit(1)

    print(f"[api] starting web server on {settings.host}:{settings.port}", flush=True)
    uvicorn.run("studygen.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
