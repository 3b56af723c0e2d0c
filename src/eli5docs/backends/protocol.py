"""Batch framing protocol: prompt assembly and response reconciliation.

Request side: one block per element, headed ``--- Element K ---``,
followed by an instruction naming :data:`BATCH_DELIMITER`.

Response side: plain text split on the delimiter. Segment order is
trusted to match request order. Parsing never fails; a short or
malformed response only yields more placeholders.
"""

from __future__ import annotations

from collections.abc import Sequence

from eli5docs.backends.base import ExplanationRequest
from eli5docs.constants import BATCH_DELIMITER
from eli5docs.prompts import (
    BATCH_ELEMENT_HEADER,
    BATCH_PROMPT_INTRO,
    BATCH_PROMPT_OUTRO,
    CODE_LINE,
    CONTEXT_BLOCK,
    IMPLEMENTATION_BLOCK,
    SINGLE_PROMPT_INTRO,
    SINGLE_PROMPT_OUTRO,
)


def missing_explanation(position: int) -> str:
    """Placeholder for a 1-based position the response did not cover."""
    return f"explanation not generated for element {position}"


def _element_text(request: ExplanationRequest) -> str:
    parts = [CODE_LINE.format(signature=request.signature)]
    if request.body and request.body.strip():
        parts.append(IMPLEMENTATION_BLOCK.format(body=request.body))
    if request.custom_prompt and request.custom_prompt.strip():
        parts.append(CONTEXT_BLOCK.format(prompt=request.custom_prompt))
    return "".join(parts)


def build_single_prompt(request: ExplanationRequest) -> str:
    return SINGLE_PROMPT_INTRO + _element_text(request) + SINGLE_PROMPT_OUTRO


def build_batch_prompt(requests: Sequence[ExplanationRequest]) -> str:
    """One prompt covering every request, numbered from 1."""
    blocks = [BATCH_PROMPT_INTRO]
    for position, request in enumerate(requests, 1):
        blocks.append(BATCH_ELEMENT_HEADER.format(position=position))
        blocks.append(_element_text(request))
        blocks.append("\n\n")
    blocks.append(BATCH_PROMPT_OUTRO.format(delimiter=BATCH_DELIMITER))
    return "".join(blocks)


def split_batch_response(text: str, expected: int) -> list[str]:
    """Split a batch response into exactly ``expected`` explanations."""
    return reconcile_explanations(text.split(BATCH_DELIMITER), expected)


def reconcile_explanations(
    items: Sequence[str | None], expected: int
) -> list[str]:
    """Force a list of answers to exactly ``expected`` entries.

    Extra entries are dropped; blank entries and missing positions get
    :func:`missing_explanation`.
    """
    explanations: list[str] = []
    for position, item in enumerate(items[:expected], 1):
        text = item.strip() if isinstance(item, str) else ""
        explanations.append(text or missing_explanation(position))
    while len(explanations) < expected:
        explanations.append(missing_explanation(len(explanations) + 1))
    return explanations
