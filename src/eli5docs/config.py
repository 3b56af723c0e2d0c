"""Layered configuration: properties file, derived env vars, defaults.

Lookup order for every setting:

1. explicit keyword arguments to :class:`Settings`
2. ``eli5.properties`` (first file found, see :data:`PROPERTIES_SEARCH_PATHS`)
3. environment variable derived from the property key
   (``eli5.openai.apiKey`` → ``ELI5_OPENAI_APIKEY``)
4. plain field-name environment variables / ``.env`` (``OPENAI_API_KEY``)
5. hard-coded defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
)

from eli5docs.constants import ExportFormat

logger = logging.getLogger(__name__)

PROPERTIES_FILENAME = "eli5.properties"
PROPERTIES_PATH_ENV = "ELI5_PROPERTIES_FILE"
PROPERTIES_SEARCH_PATHS: tuple[Path, ...] = (
    Path("src/main/resources") / PROPERTIES_FILENAME,
    Path(PROPERTIES_FILENAME),
    Path("target/classes") / PROPERTIES_FILENAME,
)

# Settings field → property key
PROPERTY_KEYS: dict[str, str] = {
    "openai_api_key": "eli5.openai.apiKey",
    "openai_model": "eli5.openai.model",
    "openai_max_tokens": "eli5.openai.maxTokens",
    "openai_temperature": "eli5.openai.temperature",
    "openai_api_base": "eli5.openai.apiBase",
    "llm_timeout_seconds": "eli5.openai.timeoutSeconds",
    "llm_max_attempts": "eli5.openai.maxAttempts",
    "fallback_concurrency": "eli5.fallbackConcurrency",
    "output_format": "eli5.outputMode",
    "log_level": "eli5.logLevel",
    "skip_directories": "eli5.skipDirectories",
}

# Extra environment names accepted after the derived one
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "openai_api_key": ("ELI5_API_KEY",),
}


def env_key(property_key: str) -> str:
    """Derive the environment variable name for a property key."""
    return property_key.replace(".", "_").upper()


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java-style ``key=value`` properties file.

    Supports ``#``/``!`` comments and ``:`` as separator. Line
    continuations and unicode escapes are not supported.
    """
    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith(("#", "!")):
                continue
            cut = min(
                (i for i in (line.find("="), line.find(":")) if i >= 0),
                default=-1,
            )
            if cut < 0:
                continue
            values[line[:cut].strip()] = line[cut + 1:].strip()
    return values


def find_properties_file() -> Path | None:
    """Return the properties file to load, or None."""
    override = os.environ.get(PROPERTIES_PATH_ENV, "").strip()
    if override:
        return Path(override)
    for candidate in PROPERTIES_SEARCH_PATHS:
        if candidate.is_file():
            return candidate
    return None


class Eli5PropertiesSource(PydanticBaseSettingsSource):
    """Properties file first, then the derived environment variable.

    Blank values fall through to the next layer. Numeric values that do
    not parse are logged and skipped so the default applies.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        path: Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._path = path if path is not None else find_properties_file()
        self._properties: dict[str, str] = {}
        if self._path is not None:
            try:
                self._properties = read_properties(self._path)
                logger.debug(
                    "event=properties_loaded path=%s keys=%d",
                    self._path,
                    len(self._properties),
                )
            except OSError:
                logger.warning(
                    "event=properties_unreadable path=%s", self._path
                )

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        key = PROPERTY_KEYS.get(field_name)
        if key is None:
            return None, field_name, False

        value = self._properties.get(key)
        if value is not None and value.strip():
            return value, key, False

        for name in (env_key(key), *ENV_ALIASES.get(field_name, ())):
            value = os.environ.get(name)
            if value is not None and value.strip():
                return value, name, False
        return None, key, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, source_key, _ = self.get_field_value(field, field_name)
            if value is None:
                continue
            if field.annotation in (int, float) and not _parses_as(
                value, field.annotation
            ):
                logger.warning(
                    "event=invalid_numeric_setting key=%s value=%r",
                    source_key,
                    value,
                )
                continue
            data[field_name] = value
        return data


def _parses_as(value: str, kind: Any) -> bool:
    try:
        kind(value)
    except ValueError:
        return False
    return True


class Settings(BaseSettings):
    """Immutable configuration snapshot, built once per invocation."""

    # LLM Provider
    openai_api_key: str = ""
    openai_model: str = "gpt-4.1-nano"
    openai_max_tokens: int = 500
    openai_temperature: float = 0.7
    openai_api_base: str = ""
    llm_timeout_seconds: int = 30
    llm_max_attempts: int = 1

    # Orchestration
    fallback_concurrency: int = 1

    # Output
    output_format: str = ExportFormat.MARKDOWN

    # Logging
    log_level: str = "INFO"

    # Scanner
    skip_directories: Annotated[list[str], NoDecode] = [
        "target",
        "build",
        "out",
        "node_modules",
        ".git",
        ".idea",
        ".gradle",
    ]

    @field_validator("skip_directories", mode="before")
    @classmethod
    def _parse_dirs(cls, v: Any) -> Any:
        """Accept comma-separated string or list."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator(
        "openai_max_tokens",
        "llm_timeout_seconds",
        "llm_max_attempts",
        "fallback_concurrency",
    )
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("openai_temperature")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("temperature must be between 0 and 2")
        return v

    @field_validator("output_format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in set(ExportFormat):
            valid = ", ".join(ExportFormat)
            raise ValueError(f"output format must be one of: {valid}")
        return v

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key.strip())

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            Eli5PropertiesSource(settings_cls),
            env_settings,
            dotenv_settings,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
        "frozen": True,
    }
