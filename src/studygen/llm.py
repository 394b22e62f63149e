from __future__ import annotations

from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from studygen.errors import GenerationError

SYSTEM_PROMPT = """
You are a case study consultancy bot. Your audience are experienced consultants.

Describe the two companies involved in at least two long paragraphs each, and
include a relevant fact about them. Then structure the case in three categories.

Context:
- Describe the company and the industry it operates in.
- Outline the challenge or problem the company faced.
- Explain why this problem is significant and relevant to the consultant.

Approach:
- Detail the actions taken to address the problem, step by step.
- Segment the approach into clear, tangible outputs.

Impact:
- Quantify the results achieved through the approach.
- Use specific metrics and figures, and explain the broader impact on the
  company and its stakeholders.

Use formal, objective and professional language suitable for corporate,
business and government contexts. Be quantitative and direct. Avoid
repetitive insights while keeping the structure consistent, and keep the case
closely relevant to the consultant's question.

Always answer with raw JSON only, without code fences or references, using
exactly this shape:

{
  "case_study": {
    "title": "Case Study on Z area of Company X, Y",
    "company_a_name": "Company X",
    "company_a_summary": "Company X was founded in ... by ... It was ...",
    "company_b_name": "Company Y",
    "company_b_summary": "Company Y was founded in ... by ... It was ...",
    "context": ["...", "..."],
    "approach": ["Step 1: ...", "Step 2: ...", "Step 3: ..."],
    "impact": ["Outcome 1: ...", "Outcome 2: ...", "Outcome 3: ..."]
  }
}

If you cannot answer, reply with {"error": "<short reason>"}.
"""


class CaseStudy(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    company_a_name: str
    company_a_summary: str
    company_b_name: str
    company_b_summary: str
    context: list[str]
    approach: list[str]
    impact: list[str]


class _CaseStudyEnvelope(BaseModel):
    case_study: CaseStudy


class _ErrorEnvelope(BaseModel):
    error: str


class CaseStudyGenerator(Protocol):
    def generate_case_study(self, *, prompt: str) -> CaseStudy: ...


def _strip_code_fence(content: str) -> str:
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_case_study(content: str) -> CaseStudy:
    text = _strip_code_fence(content)
    try:
        return _CaseStudyEnvelope.model_validate_json(text).case_study
    except ValidationError:
        pass

    try:
        error_payload = _ErrorEnvelope.model_validate_json(text)
    except ValidationError as exc:
        raise GenerationError("Invalid AI response, try again?") from exc
    raise GenerationError(error_payload.error)


class OpenAIChatClient:
    def __init__(
        self,
        *,
        base_url: str,
        api_key: str | None,
        default_model: str,
        fallback_model: str = "",
        timeout_seconds: float = 120.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._default_model = default_model
        self._fallback_model = fallback_model
        self._timeout_seconds = timeout_seconds

    def generate_case_study(self, *, prompt: str) -> CaseStudy:
        if not self._api_key:
            raise GenerationError("OpenAI API key is not configured")

        for model, used_fallback in self._model_candidates():
            try:
                content = self._chat_completion(model=model, prompt=prompt)
            except (httpx.HTTPError, ValueError) as exc:
                if used_fallback or not self._has_fallback():
                    raise GenerationError(f"Failed to connect to AI model: {exc}") from exc
                continue

            return parse_case_study(content)

        raise GenerationError("No model candidates configured")

    def _has_fallback(self) -> bool:
        return bool(self._fallback_model) and self._fallback_model != self._default_model

    def _model_candidates(self) -> list[tuple[str, bool]]:
        candidates: list[tuple[str, bool]] = [(self._default_model, False)]
        if self._has_fallback():
            candidates.append((self._fallback_model, True))
        return candidates

    def _chat_completion(self, *, model: str, prompt: str) -> str:
        response = httpx.post(
            f"{self._base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self._api_key}"},
            json={
                "model": model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            },
            timeout=self._timeout_seconds,
        )
        response.raise_for_status()

        payload = response.json()
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise ValueError("Invalid chat completion payload: missing choices")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Invalid chat completion payload: missing assistant content")

        return content.strip()
