"""Tests for layered Settings: properties file, derived env vars, defaults."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from eli5docs.config import (
    Eli5PropertiesSource,
    Settings,
    env_key,
    find_properties_file,
    read_properties,
)


def _write_properties(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.openai_api_key == ""
        assert s.has_api_key is False
        assert s.openai_model == "gpt-4.1-nano"
        assert s.openai_max_tokens == 500
        assert s.openai_temperature == 0.7
        assert s.openai_api_base == ""
        assert s.llm_timeout_seconds == 30
        assert s.llm_max_attempts == 1
        assert s.fallback_concurrency == 1
        assert s.output_format == "markdown"
        assert s.log_level == "INFO"
        assert "target" in s.skip_directories

    def test_frozen(self) -> None:
        s = Settings()
        with pytest.raises(ValidationError):
            s.openai_model = "other"  # type: ignore[misc]


class TestEnvKey:
    def test_derivation(self) -> None:
        assert env_key("eli5.openai.apiKey") == "ELI5_OPENAI_APIKEY"
        assert env_key("eli5.fallbackConcurrency") == (
            "ELI5_FALLBACKCONCURRENCY"
        )


class TestReadProperties:
    def test_comments_and_separators(self, tmp_path: Path) -> None:
        path = _write_properties(
            tmp_path / "eli5.properties",
            "# comment\n"
            "! also a comment\n"
            "\n"
            "eli5.openai.model = gpt-4o\n"
            "eli5.openai.apiBase: http://localhost:4000\n"
            "not a pair\n",
        )
        assert read_properties(path) == {
            "eli5.openai.model": "gpt-4o",
            "eli5.openai.apiBase": "http://localhost:4000",
        }

    def test_value_containing_equals(self, tmp_path: Path) -> None:
        path = _write_properties(
            tmp_path / "p.properties", "eli5.openai.apiKey=abc=def\n"
        )
        assert read_properties(path)["eli5.openai.apiKey"] == "abc=def"


class TestPropertiesFile:
    def test_search_order(self, tmp_path: Path) -> None:
        assert find_properties_file() is None
        _write_properties(
            tmp_path / "target/classes/eli5.properties", "a=1\n"
        )
        assert find_properties_file() == Path(
            "target/classes/eli5.properties"
        )
        _write_properties(
            tmp_path / "src/main/resources/eli5.properties", "a=1\n"
        )
        assert find_properties_file() == Path(
            "src/main/resources/eli5.properties"
        )

    def test_path_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        custom = _write_properties(tmp_path / "conf/my.properties", "a=1\n")
        monkeypatch.setenv("ELI5_PROPERTIES_FILE", str(custom))
        assert find_properties_file() == custom

    def test_values_loaded(self, tmp_path: Path) -> None:
        _write_properties(
            tmp_path / "eli5.properties",
            "eli5.openai.apiKey=sk-file\n"
            "eli5.openai.model=gpt-4o\n"
            "eli5.openai.maxTokens=800\n"
            "eli5.openai.temperature=0.2\n"
            "eli5.fallbackConcurrency=4\n"
            "eli5.outputMode=JSON\n"
            "eli5.skipDirectories=build, generated\n",
        )
        s = Settings()
        assert s.openai_api_key == "sk-file"
        assert s.has_api_key is True
        assert s.openai_model == "gpt-4o"
        assert s.openai_max_tokens == 800
        assert s.openai_temperature == 0.2
        assert s.fallback_concurrency == 4
        assert s.output_format == "json"
        assert s.skip_directories == ["build", "generated"]

    def test_invalid_numeric_ignored(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write_properties(
            tmp_path / "eli5.properties",
            "eli5.openai.maxTokens=lots\neli5.openai.temperature=warm\n",
        )
        with caplog.at_level(logging.WARNING, logger="eli5docs.config"):
            s = Settings()
        assert s.openai_max_tokens == 500
        assert s.openai_temperature == 0.7
        assert "event=invalid_numeric_setting" in caplog.text

    def test_blank_value_falls_through(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_properties(tmp_path / "eli5.properties", "eli5.openai.apiKey=\n")
        monkeypatch.setenv("ELI5_OPENAI_APIKEY", "sk-env")
        assert Settings().openai_api_key == "sk-env"

    def test_unreadable_file_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(
            "ELI5_PROPERTIES_FILE", str(tmp_path / "missing.properties")
        )
        assert Settings().openai_model == "gpt-4.1-nano"

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = _write_properties(
            tmp_path / "x.properties", "eli5.openai.model=from-x\n"
        )
        source = Eli5PropertiesSource(Settings, path)
        assert source()["openai_model"] == "from-x"


class TestPrecedence:
    def test_properties_beat_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_properties(
            tmp_path / "eli5.properties", "eli5.openai.model=from-file\n"
        )
        monkeypatch.setenv("ELI5_OPENAI_MODEL", "from-env")
        assert Settings().openai_model == "from-file"

    def test_init_beats_properties(self, tmp_path: Path) -> None:
        _write_properties(
            tmp_path / "eli5.properties", "eli5.openai.model=from-file\n"
        )
        assert Settings(openai_model="explicit").openai_model == "explicit"

    def test_derived_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ELI5_OPENAI_TIMEOUTSECONDS", "45")
        assert Settings().llm_timeout_seconds == 45

    def test_api_key_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ELI5_API_KEY", "sk-alias")
        assert Settings().openai_api_key == "sk-alias"

    def test_derived_name_beats_alias(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ELI5_OPENAI_APIKEY", "sk-derived")
        monkeypatch.setenv("ELI5_API_KEY", "sk-alias")
        assert Settings().openai_api_key == "sk-derived"

    def test_plain_field_env_var_is_last_resort(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-plain")
        assert Settings().openai_api_key == "sk-plain"
        monkeypatch.setenv("ELI5_API_KEY", "sk-alias")
        assert Settings().openai_api_key == "sk-alias"

    def test_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text(
            "OPENAI_MODEL=from-dotenv\n", encoding="utf-8"
        )
        assert Settings().openai_model == "from-dotenv"


class TestValidation:
    @pytest.mark.parametrize(
        "field",
        [
            "openai_max_tokens",
            "llm_timeout_seconds",
            "llm_max_attempts",
            "fallback_concurrency",
        ],
    )
    def test_positive_integers(self, field: str) -> None:
        with pytest.raises(ValidationError, match="positive"):
            Settings(**{field: 0})

    def test_temperature_range(self) -> None:
        with pytest.raises(ValidationError, match="between 0 and 2"):
            Settings(openai_temperature=2.5)

    def test_unknown_output_format(self) -> None:
        with pytest.raises(ValidationError, match="output format"):
            Settings(output_format="pdf")

    def test_skip_directories_from_string(self) -> None:
        s = Settings(skip_directories="a, b ,,c")  # type: ignore[arg-type]
        assert s.skip_directories == ["a", "b", "c"]
