"""Shared test fixtures: isolated configuration, sample sources."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from eli5docs.config import Settings
from eli5docs.constants import ElementKind
from eli5docs.scanner.schemas import MarkedElement

FIXTURES = Path(__file__).parent / "fixtures"
JAVA_SRC = FIXTURES / "java_src"


@pytest.fixture(autouse=True)
def _isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """No credentials, no stray properties or .env file.

    Every Settings() built in a test sees only what the test sets, so
    nothing reaches a real provider.
    """
    field_vars = {name.upper() for name in Settings.model_fields}
    for name in list(os.environ):
        if name.startswith("ELI5_") or name.upper() in field_vars:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def java_src() -> Path:
    return JAVA_SRC


@pytest.fixture
def make_element() -> Callable[..., MarkedElement]:
    """Factory for MarkedElement with sensible defaults."""
    return _make_element


def _make_element(
    name: str = "add",
    *,
    kind: ElementKind = ElementKind.METHOD,
    signature: str | None = None,
    body: str | None = None,
    custom_prompt: str | None = None,
    line: int = 1,
) -> MarkedElement:
    return MarkedElement(
        name=name,
        kind=kind,
        signature=signature or f"int {name}(int a, int b)",
        body=body,
        custom_prompt=custom_prompt,
        source_file=Path("Demo.java"),
        source_line=line,
    )
