from __future__ import annotations

from studygen.llm import CaseStudyGenerator
from studygen.services.jobs.types import StudyArtifact
from studygen.services.slides import SlideRenderer


class CaseStudyWorker:
    def __init__(self, *, llm_client: CaseStudyGenerator, renderer: SlideRenderer) -> None:
        self._llm_client = llm_client
        self._renderer = renderer

    def __call__(self, prompt: str) -> StudyArtifact:
        case_study = self._llm_client.generate_case_study(prompt=prompt)
        pdf_path = self._renderer.render(case_study)
        return StudyArtifact(pdf_path=str(pdf_path), case_study=case_study)
