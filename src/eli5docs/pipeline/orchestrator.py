"""Batch orchestrator: N marked elements in, N explanations out.

Three tiers, tried in order, each checked explicitly:

1. one ``explain_batch`` call for every request; its answers are
   reconciled to exactly N (short responses padded, extras dropped);
2. only if that call raised: ``explain_one`` per element, where a
   failure affects that position alone;
3. any position still unresolved gets the stub placeholder.

Backend calls are wrapped into :class:`ExplanationOutcome` values so no
exception crosses a tier boundary. Results are positional; completion
order never leaks into output order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from eli5docs.backends.base import ExplanationBackend, ExplanationRequest
from eli5docs.backends.protocol import reconcile_explanations
from eli5docs.backends.stub import placeholder_explanation
from eli5docs.constants import ResolutionTier, StageProgress
from eli5docs.pipeline.events import ProgressCallback, StageEvent
from eli5docs.pipeline.schemas import OrchestrationReport
from eli5docs.resilience.errors import BackendError, classify_error
from eli5docs.scanner.schemas import MarkedElement

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExplanationOutcome(Generic[T]):
    """Result-or-error of one backend call."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _attempt(call: Awaitable[T]) -> ExplanationOutcome[T]:
    try:
        return ExplanationOutcome(value=await call)
    except BackendError as exc:
        return ExplanationOutcome(error=exc)
    except Exception as exc:
        logger.warning("event=backend_call_crashed", exc_info=True)
        return ExplanationOutcome(error=exc)


def build_requests(
    elements: Sequence[MarkedElement],
) -> list[ExplanationRequest]:
    """1:1, order-preserving projection of elements to requests."""
    return [ExplanationRequest.from_element(e) for e in elements]


async def explain_elements(
    elements: Sequence[MarkedElement],
    backend: ExplanationBackend,
    *,
    fallback_concurrency: int = 1,
    on_progress: ProgressCallback | None = None,
) -> OrchestrationReport:
    """Resolve one explanation per element; never raises for backend failures."""
    requests = build_requests(elements)
    count = len(requests)
    if count == 0:
        return OrchestrationReport(explanations=[], tier=ResolutionTier.EMPTY)

    # Tier 1: single batch call
    batch = await _attempt(backend.explain_batch(requests))
    if batch.ok:
        explanations = reconcile_explanations(list(batch.value or []), count)
        logger.info(
            "event=batch_resolved backend=%s count=%d", backend.name, count
        )
        return OrchestrationReport(
            explanations=explanations, tier=ResolutionTier.BATCH
        )

    assert batch.error is not None
    logger.warning(
        "event=batch_failed backend=%s count=%d error_class=%s"
        " fallback=individual",
        backend.name,
        count,
        classify_error(batch.error).value,
    )

    # Tier 2: one call per element
    resolved: list[str | None] = [None] * count
    individual = await _attempt(
        _explain_individually(
            requests,
            backend,
            resolved,
            max(1, fallback_concurrency),
            on_progress,
        )
    )
    if not individual.ok:
        logger.warning(
            "event=individual_fallback_aborted backend=%s resolved=%d",
            backend.name,
            sum(1 for r in resolved if r is not None),
        )

    # Tier 3: stub placeholder for whatever is left
    explanations = []
    stubbed = 0
    for request, text in zip(requests, resolved, strict=True):
        if text is None:
            stubbed += 1
            text = placeholder_explanation(
                request.signature, request.body, request.custom_prompt
            )
        explanations.append(text)

    tier = (
        ResolutionTier.STUB if stubbed == count else ResolutionTier.INDIVIDUAL
    )
    logger.info(
        "event=fallback_resolved tier=%s count=%d stubbed=%d",
        tier,
        count,
        stubbed,
    )
    return OrchestrationReport(
        explanations=explanations, tier=tier, fallback_count=stubbed
    )


async def _explain_individually(
    requests: list[ExplanationRequest],
    backend: ExplanationBackend,
    resolved: list[str | None],
    concurrency: int,
    on_progress: ProgressCallback | None,
) -> None:
    """Fill ``resolved`` by index; failed positions stay None.

    With ``concurrency`` 1 calls go out one at a time in element order.
    """
    total = len(requests)
    completed = 0
    semaphore = asyncio.Semaphore(concurrency)

    async def resolve(index: int, request: ExplanationRequest) -> None:
        nonlocal completed
        async with semaphore:
            outcome = await _attempt(
                backend.explain_one(
                    request.signature, request.body, request.custom_prompt
                )
            )
        if outcome.ok and outcome.value and outcome.value.strip():
            resolved[index] = outcome.value
        else:
            logger.warning(
                "event=individual_failed position=%d error_class=%s",
                index + 1,
                classify_error(outcome.error).value
                if outcome.error is not None
                else "empty_response",
            )
        completed += 1
        _emit_progress(on_progress, completed, total)

    if concurrency == 1:
        for index, request in enumerate(requests):
            await resolve(index, request)
    else:
        await asyncio.gather(
            *(resolve(i, r) for i, r in enumerate(requests))
        )


def _emit_progress(
    on_progress: ProgressCallback | None,
    completed: int,
    total: int,
) -> None:
    if on_progress is None or total == 0:
        return
    on_progress(
        StageEvent(
            name="explain",
            status=StageProgress.RUNNING,
            message=f"Explained {completed}/{total} elements individually",
            completed=completed,
            total=total,
        )
    )
