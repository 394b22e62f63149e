from __future__ import annotations

from html import escape
from pathlib import Path
from string import Template
import subprocess
import tempfile
from typing import Protocol

from studygen.errors import RenderError
from studygen.llm import CaseStudy

TEMPLATE_PATH = Path(__file__).with_name("slides.html")


class SlideRenderer(Protocol):
    def render(self, case_study: CaseStudy) -> Path: ...


def _list_items(values: list[str]) -> str:
    return "\n".join(f"    <li>{escape(value)}</li>" for value in values)


def build_slides_html(case_study: CaseStudy, *, author: str = "AI") -> str:
    template = Template(TEMPLATE_PATH.read_text(encoding="utf-8"))
    return template.substitute(
        title=escape(case_study.title),
        author=escape(author),
        company_a_name=escape(case_study.company_a_name),
        company_a_summary=escape(case_study.company_a_summary),
        company_b_name=escape(case_study.company_b_name),
        company_b_summary=escape(case_study.company_b_summary),
        context=_list_items(case_study.context),
        approach=_list_items(case_study.approach),
        impact=_list_items(case_study.impact),
    )


class ChromiumSlideRenderer:
    def __init__(
        self,
        *,
        output_dir: Path,
        chromium_binary: str = "chromium",
        timeout_seconds: float = 120.0,
        window_size: str = "1920,1080",
    ) -> None:
        self._output_dir = output_dir
        self._chromium_binary = chromium_binary
        self._timeout_seconds = timeout_seconds
        self._window_size = window_size

    def render(self, case_study: CaseStudy) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="slides-", dir=self._output_dir))

        html_path = work_dir / "slides.html"
        html_path.write_text(build_slides_html(case_study), encoding="utf-8")
        pdf_path = work_dir / "output.pdf"

        command = [
            self._chromium_binary,
            "--headless=new",
            f"--print-to-pdf={pdf_path}",
            f"--window-size={self._window_size}",
            "--no-pdf-header-footer",
            html_path.as_uri(),
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                cwd=work_dir,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise RenderError(f"slide renderer not found: {self._chromium_binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise RenderError(
                f"slide renderer timed out after {self._timeout_seconds:.0f}s"
            ) from exc

        if completed.returncode != 0:
            stderr = completed.stderr.strip() or completed.stdout.strip()
            stderr_first_line = stderr.splitlines()[0] if stderr else "<empty>"
            print(
                f"[slides] chromium failed exit={completed.returncode} stderr_first={stderr_first_line}",
                flush=True,
            )
            raise RenderError(f"Failed to generate slides (exit={completed.returncode})")

        if not pdf_path.exists():
            raise RenderError("Failed to generate slides: renderer produced no output")

        return pdf_path
