"""Backend selection strategy: first available candidate wins."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from eli5docs.backends.base import ExplanationBackend
from eli5docs.backends.remote import RemoteBackend
from eli5docs.backends.stub import StubBackend
from eli5docs.config import Settings

logger = logging.getLogger(__name__)

BackendFactory = Callable[[], ExplanationBackend]


class BackendSelector:
    """Try candidate factories in order, fall back to the stub.

    A candidate that fails to construct or reports itself unavailable
    is skipped. The stub is always appended last, so :meth:`select`
    never fails.
    """

    def __init__(self, candidates: Sequence[BackendFactory]) -> None:
        self._candidates = list(candidates)

    def select(self) -> ExplanationBackend:
        for factory in self._candidates:
            try:
                backend = factory()
            except Exception:
                logger.warning(
                    "event=backend_init_failed factory=%r",
                    factory,
                    exc_info=True,
                )
                continue
            if backend.is_available():
                logger.info("event=backend_selected backend=%s", backend.name)
                return backend
            logger.warning(
                "event=backend_unavailable backend=%s", backend.name
            )

        stub = StubBackend()
        logger.info("event=backend_selected backend=%s", stub.name)
        return stub


def default_selector(settings: Settings) -> BackendSelector:
    """Remote provider first, placeholder otherwise."""
    return BackendSelector([lambda: RemoteBackend(settings)])
