"""Backend capability shared by every explanation provider."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from eli5docs.constants import ERROR_TRUNCATION_CHARS
from eli5docs.resilience.errors import BackendError
from eli5docs.scanner.schemas import MarkedElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplanationRequest:
    """Read-only projection of a marked element for a backend."""

    signature: str
    body: str | None = None
    custom_prompt: str | None = None

    @classmethod
    def from_element(cls, element: MarkedElement) -> ExplanationRequest:
        return cls(
            signature=element.signature,
            body=element.body,
            custom_prompt=element.custom_prompt,
        )


class ExplanationBackend(ABC):
    """Pluggable provider of simplified explanations."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def is_available(self) -> bool: ...

    @abstractmethod
    async def explain_one(
        self,
        signature: str,
        body: str | None = None,
        custom_prompt: str | None = None,
    ) -> str:
        """Explain one element. Raises :class:`BackendError` on failure."""

    async def explain_batch(
        self, requests: Sequence[ExplanationRequest]
    ) -> list[str]:
        """Explain many elements; one string per request, in order.

        The default issues sequential ``explain_one`` calls. A failing
        item becomes an inline error string instead of aborting the
        rest.
        """
        explanations: list[str] = []
        for position, request in enumerate(requests, 1):
            try:
                explanations.append(
                    await self.explain_one(
                        request.signature,
                        request.body,
                        request.custom_prompt,
                    )
                )
            except BackendError as exc:
                logger.warning(
                    "event=batch_item_failed backend=%s position=%d",
                    self.name,
                    position,
                )
                explanations.append(_inline_error(exc))
            except Exception as exc:
                logger.warning(
                    "event=batch_item_crashed backend=%s position=%d",
                    self.name,
                    position,
                    exc_info=True,
                )
                explanations.append(_inline_error(exc))
        return explanations


def _inline_error(exc: Exception) -> str:
    return (
        "Error generating explanation: "
        f"{str(exc)[:ERROR_TRUNCATION_CHARS]}"
    )
