from pathlib import Path

import pytest

from studygen.errors import GenerationError, RenderError
from studygen.llm import CaseStudy
from studygen.worker import CaseStudyWorker


class FakeLLMClient:
    def __init__(self, case_study: CaseStudy | None = None, error: Exception | None = None) -> None:
        self.prompts: list[str] = []
        self._case_study = case_study
        self._error = error

    def generate_case_study(self, *, prompt: str) -> CaseStudy:
        self.prompts.append(prompt)
        if self._error is not None:
            raise self._error
        assert self._case_study is not None
        return self._case_study


class FakeRenderer:
    def __init__(self, pdf_path: Path, error: Exception | None = None) -> None:
        self.rendered: list[CaseStudy] = []
        self._pdf_path = pdf_path
        self._error = error

    def render(self, case_study: CaseStudy) -> Path:
        self.rendered.append(case_study)
        if self._error is not None:
            raise self._error
        return self._pdf_path


def test_worker_generates_then_renders(tmp_path: Path, make_case_study) -> None:
    case_study = make_case_study()
    llm_client = FakeLLMClient(case_study)
    renderer = FakeRenderer(tmp_path / "output.pdf")

    artifact = CaseStudyWorker(llm_client=llm_client, renderer=renderer)("Acme Corp wants to reduce logistics cost")

    assert llm_client.prompts == ["Acme Corp wants to reduce logistics cost"]
    assert renderer.rendered == [case_study]
    assert artifact.pdf_path == str(tmp_path / "output.pdf")
    assert artifact.case_study.title == "Logistics Optimization at Acme Corp"


def test_worker_skips_rendering_when_generation_fails(tmp_path: Path) -> None:
    renderer = FakeRenderer(tmp_path / "output.pdf")
    worker = CaseStudyWorker(llm_client=FakeLLMClient(error=GenerationError("rate limited")), renderer=renderer)

    with pytest.raises(GenerationError, match="rate limited"):
        worker("Acme Corp wants to reduce logistics cost")

    assert renderer.rendered == []


def test_worker_propagates_render_failure(tmp_path: Path, make_case_study) -> None:
    renderer = FakeRenderer(tmp_path / "output.pdf", error=RenderError("Failed to generate slides (exit=1)"))
    worker = CaseStudyWorker(llm_client=FakeLLMClient(make_case_study()), renderer=renderer)

    with pytest.raises(RenderError, match="Failed to generate slides"):
        worker("Acme Corp wants to reduce logistics cost")
