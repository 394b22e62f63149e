from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path
import tempfile


def _to_int(value: str | None, *, default: int, minimum: int) -> int:
    if value is None:
        return default
    parsed = int(value)
    return max(minimum, parsed)


def _to_float(value: str | None, *, default: float, minimum: float) -> float:
    if value is None:
        return default
    parsed = float(value)
    return max(minimum, parsed)


def _read_api_key() -> str | None:
    key_path = os.getenv("OPENAI_KEY_PATH")
    if key_path:
        return Path(key_path).read_text(encoding="utf-8").strip() or None
    return os.getenv("OPENAI_KEY") or None


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    openai_base_url: str
    openai_api_key: str | None
    openai_model: str
    openai_fallback_model: str
    openai_timeout_seconds: float
    min_prompt_length: int
    max_concurrent_jobs: int
    slides_output_dir: str
    chromium_binary: str
    render_timeout_seconds: float
    shutdown_timeout_seconds: float


@lru_cache
def get_settings() -> Settings:
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_to_int(os.getenv("PORT"), default=8080, minimum=1),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        openai_api_key=_read_api_key(),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        openai_fallback_model=os.getenv("OPENAI_FALLBACK_MODEL", ""),
        openai_timeout_seconds=_to_float(
            os.getenv("OPENAI_TIMEOUT_SECONDS"), default=120.0, minimum=1.0
        ),
        min_prompt_length=_to_int(os.getenv("STUDY_MIN_PROMPT_LENGTH"), default=8, minimum=1),
        max_concurrent_jobs=_to_int(os.getenv("STUDY_MAX_CONCURRENT_JOBS"), default=0, minimum=0),
        slides_output_dir=os.getenv(
            "SLIDES_OUTPUT_DIR",
            str(Path(tempfile.gettempdir()) / "studygen-slides"),
        ),
        chromium_binary=os.getenv("CHROMIUM_BIN", "chromium"),
        render_timeout_seconds=_to_float(
            os.getenv("SLIDES_RENDER_TIMEOUT_SECONDS"), default=120.0, minimum=1.0
        ),
        shutdown_timeout_seconds=_to_float(
            os.getenv("STUDY_SHUTDOWN_TIMEOUT_SECONDS"), default=30.0, minimum=0.0
        ),
    )
