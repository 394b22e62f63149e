from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any

from studygen.config import get_settings
from studygen.llm import CaseStudyGenerator, OpenAIChatClient
from studygen.services.jobs.service import normalize_prompt
from studygen.services.slides import ChromiumSlideRenderer, SlideRenderer


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="studygen-generate",
        description="Generate one case study synchronously and print a JSON summary",
    )
    parser.add_argument("--prompt", required=True, help="Consulting question to build the case study from")
    parser.add_argument(
        "--output-dir",
        default=settings.slides_output_dir,
        help="Directory that receives the rendered slide deck",
    )
    parser.add_argument(
        "--skip-render",
        action="store_true",
        help="Only call the language model and print the structured case study",
    )
    return parser


def generate_study(
    prompt: str,
    *,
    llm_client: CaseStudyGenerator,
    renderer: SlideRenderer | None,
    min_prompt_length: int,
) -> dict[str, Any]:
    normalized = normalize_prompt(prompt, min_length=min_prompt_length)
    case_study = llm_client.generate_case_study(prompt=normalized)
    pdf_path = renderer.render(case_study) if renderer is not None else None
    return {
        "title": case_study.title,
        "pdf_path": str(pdf_path) if pdf_path is not None else None,
        "case_study": case_study.model_dump(),
    }


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()
    settings = get_settings()

    llm_client = OpenAIChatClient(
        base_url=settings.openai_base_url,
        api_key=settings.openai_api_key,
        default_model=settings.openai_model,
        fallback_model=settings.openai_fallback_model,
        timeout_seconds=settings.openai_timeout_seconds,
    )
    renderer = None
    if not args.skip_render:
        renderer = ChromiumSlideRenderer(
            output_dir=Path(args.output_dir),
            chromium_binary=settings.chromium_binary,
            timeout_seconds=settings.render_timeout_seconds,
        )

    try:
        summary = generate_study(
            args.prompt,
            llm_client=llm_client,
            renderer=renderer,
            min_prompt_length=settings.min_prompt_length,
        )
    except Exception as exc:
        print(f"[studygen-generate] failed: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc

    print(json.dumps(summary), flush=True)


if __name__ == "__main__":
    main()
