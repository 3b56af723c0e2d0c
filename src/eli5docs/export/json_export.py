"""JSON export: structured envelope."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from eli5docs.constants import GENERATED_AT_FORMAT

if TYPE_CHECKING:
    from eli5docs.pipeline.schemas import ExplanationResult


def export_json(
    results: Sequence[ExplanationResult],
    generated_at: datetime | None = None,
) -> str:
    """Export results as structured JSON."""
    stamp = (generated_at or datetime.now()).strftime(GENERATED_AT_FORMAT)
    payload: dict[str, Any] = {
        "title": "ELI5 Documentation",
        "generated_at": stamp,
        "element_count": len(results),
        "elements": [_result_to_dict(r) for r in results],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _result_to_dict(result: ExplanationResult) -> dict[str, Any]:
    """Convert an ExplanationResult to a JSON-serializable dict."""
    return {
        "name": result.element_name,
        "kind": str(result.element_kind),
        "signature": result.signature,
        "body": result.body,
        "custom_prompt": result.custom_prompt,
        "explanation": result.explanation,
        "source_file": (
            str(result.source_file) if result.source_file else None
        ),
        "source_line": result.source_line,
    }
