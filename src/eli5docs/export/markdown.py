"""Markdown export: header, table of contents, one section per element."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from eli5docs.constants import GENERATED_AT_FORMAT

if TYPE_CHECKING:
    from eli5docs.pipeline.schemas import ExplanationResult

INTRO = (
    "This documentation explains the code in simple terms, "
    "as if explaining to a 5-year-old."
)

_ANCHOR_UNSAFE = re.compile(r"[^a-z0-9]")


def anchor_for(name: str) -> str:
    """Lowercase ``name`` and replace every non ``[a-z0-9]`` char with "-"."""
    return _ANCHOR_UNSAFE.sub("-", name.lower())


def export_markdown(
    results: Sequence[ExplanationResult],
    generated_at: datetime | None = None,
) -> str:
    """Export results as a single Markdown document with TOC."""
    stamp = (generated_at or datetime.now()).strftime(GENERATED_AT_FORMAT)
    parts: list[str] = [
        "# ELI5 Documentation\n\n",
        f"*Generated on {stamp}*\n\n",
        f"{INTRO}\n\n",
    ]

    if results:
        parts.append("## Table of Contents\n\n")
        for result in results:
            name = result.element_name
            parts.append(f"- [{name}](#{anchor_for(name)})\n")
        parts.append("\n")

    parts.extend(export_single_result(r) for r in results)
    return "".join(parts)


def export_single_result(result: ExplanationResult) -> str:
    """Render one element section, ending with a ``---`` separator."""
    code = result.signature
    if result.body and result.body.strip():
        code += "\n" + result.body

    parts = [
        f"## {result.element_kind}: {result.element_name}\n\n",
        f"**Code:**\n```java\n{code}\n```\n\n",
    ]
    if result.custom_prompt and result.custom_prompt.strip():
        parts.append(f"**Custom Context:** {result.custom_prompt}\n\n")
    parts.append(f"**Explanation:**\n{result.explanation}\n\n")
    parts.append("---\n\n")
    return "".join(parts)
