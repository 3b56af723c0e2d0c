"""Pydantic models for scanner output."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from eli5docs.constants import ElementKind


class MarkedElement(BaseModel):
    """A declaration carrying the marker, as found by the scanner.

    Identity is positional: two elements with the same signature are
    still distinct entries.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    kind: ElementKind
    signature: str
    body: str | None = None
    custom_prompt: str | None = None
    source_file: Path
    source_line: int  # 1-based line of the marker
