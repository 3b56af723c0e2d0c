"""Export module: render explanation results to documents."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from eli5docs.constants import ExportFormat
from eli5docs.export.json_export import export_json
from eli5docs.export.markdown import export_markdown

if TYPE_CHECKING:
    from eli5docs.pipeline.schemas import ExplanationResult

__all__ = [
    "export_document",
    "export_json",
    "export_markdown",
    "write_document",
]

logger = logging.getLogger(__name__)

_EXPORTERS: dict[
    str,
    Callable[[Sequence["ExplanationResult"], datetime | None], str],
] = {
    ExportFormat.MARKDOWN: export_markdown,
    ExportFormat.JSON: export_json,
}


def export_document(
    results: Sequence[ExplanationResult],
    fmt: str = "markdown",
    generated_at: datetime | None = None,
) -> str:
    """Dispatch export by format string."""
    exporter = _EXPORTERS.get(str(fmt).lower())
    if exporter is None:
        valid = ", ".join(_EXPORTERS)
        msg = f"Unsupported format: {fmt}. Use: {valid}"
        raise ValueError(msg)
    return exporter(results, generated_at)


def write_document(
    results: Sequence[ExplanationResult],
    path: Path,
    fmt: str = "markdown",
) -> Path:
    """Render and write the document, creating parent directories."""
    content = export_document(results, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(
        "event=document_written path=%s format=%s elements=%d",
        path,
        fmt,
        len(results),
    )
    return path
