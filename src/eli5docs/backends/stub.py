"""Always-available placeholder backend."""

from __future__ import annotations

import logging

from eli5docs.backends.base import ExplanationBackend
from eli5docs.constants import BODY_PREVIEW_CHARS, STUB_NOTICE

logger = logging.getLogger(__name__)


def placeholder_explanation(
    signature: str,
    body: str | None = None,
    custom_prompt: str | None = None,
) -> str:
    """Deterministic stand-in text; never fails."""
    parts = [f"This is a placeholder explanation for: {signature}"]
    if body and body.strip():
        preview = (
            body[:BODY_PREVIEW_CHARS] + "..."
            if len(body) > BODY_PREVIEW_CHARS
            else body
        )
        parts.append(f"\n\nCode body: {preview}")
    if custom_prompt and custom_prompt.strip():
        parts.append(f"\n\nCustom prompt: {custom_prompt}")
    parts.append(f"\n\n{STUB_NOTICE}")
    return "".join(parts)


class StubBackend(ExplanationBackend):
    """Used when no real provider is configured or reachable."""

    @property
    def name(self) -> str:
        return "StubBackend"

    def is_available(self) -> bool:
        return True

    async def explain_one(
        self,
        signature: str,
        body: str | None = None,
        custom_prompt: str | None = None,
    ) -> str:
        logger.debug("event=stub_explanation signature=%s", signature)
        return placeholder_explanation(signature, body, custom_prompt)
