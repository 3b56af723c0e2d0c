"""Pair marked elements with their resolved explanations."""

from __future__ import annotations

from collections.abc import Sequence

from eli5docs.pipeline.schemas import ExplanationResult
from eli5docs.scanner.schemas import MarkedElement


def assemble_results(
    elements: Sequence[MarkedElement],
    explanations: Sequence[str],
) -> list[ExplanationResult]:
    """Positional zip into :class:`ExplanationResult` records.

    The orchestrator guarantees equal lengths; a mismatch here is a
    programming error.
    """
    if len(elements) != len(explanations):
        msg = (
            f"{len(elements)} elements but {len(explanations)} explanations"
        )
        raise ValueError(msg)

    return [
        ExplanationResult(
            element_name=element.name,
            element_kind=element.kind,
            signature=element.signature,
            body=element.body,
            explanation=text,
            custom_prompt=element.custom_prompt,
            source_file=element.source_file,
            source_line=element.source_line,
        )
        for element, text in zip(elements, explanations, strict=True)
    ]
