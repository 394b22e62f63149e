from pathlib import Path

from studygen.config import get_settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "PORT",
        "OPENAI_KEY",
        "OPENAI_KEY_PATH",
        "OPENAI_MODEL",
        "STUDY_MIN_PROMPT_LENGTH",
        "STUDY_MAX_CONCURRENT_JOBS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.port == 8080
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o"
    assert settings.min_prompt_length == 8
    assert settings.max_concurrent_jobs == 0


def test_openai_key_path_takes_precedence(monkeypatch, tmp_path: Path) -> None:
    key_file = tmp_path / "openai.key"
    key_file.write_text("  sk-from-file\n", encoding="utf-8")
    monkeypatch.setenv("OPENAI_KEY", "sk-from-env")
    monkeypatch.setenv("OPENAI_KEY_PATH", str(key_file))

    settings = get_settings()

    assert settings.openai_api_key == "sk-from-file"


def test_openai_key_falls_back_to_env(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_KEY_PATH", raising=False)
    monkeypatch.setenv("OPENAI_KEY", "sk-from-env")

    assert get_settings().openai_api_key == "sk-from-env"


def test_numeric_settings_are_clamped(monkeypatch) -> None:
    monkeypatch.setenv("STUDY_MAX_CONCURRENT_JOBS", "-3")
    monkeypatch.setenv("STUDY_MIN_PROMPT_LENGTH", "0")
    monkeypatch.setenv("SLIDES_RENDER_TIMEOUT_SECONDS", "0.2")

    settings = get_settings()

    assert settings.max_concurrent_jobs == 0
    assert settings.min_prompt_length == 1
    assert settings.render_timeout_seconds == 1.0


def test_shutdown_timeout_defaults_and_clamps(monkeypatch) -> None:
    monkeypatch.delenv("STUDY_SHUTDOWN_TIMEOUT_SECONDS", raising=False)
    assert get_settings().shutdown_timeout_seconds == 30.0

    get_settings.cache_clear()
    monkeypatch.setenv("STUDY_SHUTDOWN_TIMEOUT_SECONDS", "-5")
    assert get_settings().shutdown_timeout_seconds == 0.0
