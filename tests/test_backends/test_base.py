"""Tests for the default sequential batch on ExplanationBackend."""

from __future__ import annotations

import logging

import pytest

from eli5docs.backends.base import ExplanationBackend, ExplanationRequest
from eli5docs.constants import ERROR_TRUNCATION_CHARS
from eli5docs.resilience.errors import BackendTransportError, ErrorClass


class _PerItemBackend(ExplanationBackend):
    """Answers every signature except those mapped to an exception."""

    def __init__(self, failures: dict[str, Exception]) -> None:
        self._failures = failures
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "PerItem"

    def is_available(self) -> bool:
        return True

    async def explain_one(
        self,
        signature: str,
        body: str | None = None,
        custom_prompt: str | None = None,
    ) -> str:
        self.calls.append(signature)
        if signature in self._failures:
            raise self._failures[signature]
        return f"explained {signature}"


def _requests(*signatures: str) -> list[ExplanationRequest]:
    return [ExplanationRequest(s) for s in signatures]


@pytest.mark.asyncio
async def test_failed_item_becomes_inline_error() -> None:
    backend = _PerItemBackend({
        "int b()": BackendTransportError(
            "upstream 503", error_class=ErrorClass.SERVER
        ),
    })

    texts = await backend.explain_batch(_requests("int a()", "int b()", "int c()"))

    assert len(texts) == 3
    assert texts[0] == "explained int a()"
    assert texts[1] == "Error generating explanation: upstream 503"
    assert texts[2] == "explained int c()"
    assert backend.calls == ["int a()", "int b()", "int c()"]


@pytest.mark.asyncio
async def test_unexpected_exception_isolated_to_its_item(
    caplog: pytest.LogCaptureFixture,
) -> None:
    backend = _PerItemBackend({"int a()": KeyError("choices")})

    with caplog.at_level(logging.WARNING):
        texts = await backend.explain_batch(_requests("int a()", "int b()"))

    assert texts[0].startswith("Error generating explanation: ")
    assert "choices" in texts[0]
    assert texts[1] == "explained int b()"
    assert "event=batch_item_crashed" in caplog.text


@pytest.mark.asyncio
async def test_inline_error_message_truncated() -> None:
    backend = _PerItemBackend({"int a()": BackendTransportError("x" * 500)})

    texts = await backend.explain_batch(_requests("int a()"))

    prefix = "Error generating explanation: "
    assert texts[0] == prefix + "x" * ERROR_TRUNCATION_CHARS


@pytest.mark.asyncio
async def test_empty_batch() -> None:
    assert await _PerItemBackend({}).explain_batch([]) == []
