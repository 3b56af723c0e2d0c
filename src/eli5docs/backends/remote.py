"""Remote generative backend: one LiteLLM completion per attempt."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine, Sequence
from typing import TYPE_CHECKING, Any

import litellm
from litellm.exceptions import RateLimitError as LitellmRateLimitError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from eli5docs.backends.base import ExplanationBackend, ExplanationRequest
from eli5docs.backends.protocol import (
    build_batch_prompt,
    build_single_prompt,
    split_batch_response,
)
from eli5docs.config import Settings
from eli5docs.constants import (
    BATCH_TIMEOUT_MULTIPLIER,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_WAIT,
)
from eli5docs.resilience.errors import (
    BackendTransportError,
    BackendUnavailableError,
)

logger = logging.getLogger(__name__)

# litellm stubs have partially unknown types: typed alias
if TYPE_CHECKING:
    _acompletion: Callable[..., Coroutine[Any, Any, Any]]
else:
    _acompletion = litellm.acompletion

_RETRY_WAIT = wait_exponential_jitter(
    initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
)


class RemoteBackend(ExplanationBackend):
    """Chat-completion provider reached through LiteLLM.

    Available iff a non-blank API key is configured. Each call is a
    single attempt unless ``llm_max_attempts`` > 1, in which case only
    rate-limit errors are retried.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key.strip()
        logger.debug(
            "event=remote_backend_init model=%s max_tokens=%d"
            " temperature=%.2f",
            settings.openai_model,
            settings.openai_max_tokens,
            settings.openai_temperature,
        )

    @property
    def name(self) -> str:
        return f"LiteLLM ({self._settings.openai_model})"

    def is_available(self) -> bool:
        return self._settings.has_api_key

    async def explain_one(
        self,
        signature: str,
        body: str | None = None,
        custom_prompt: str | None = None,
    ) -> str:
        self._require_available()
        prompt = build_single_prompt(
            ExplanationRequest(signature, body, custom_prompt)
        )
        text = await self._complete(
            prompt,
            max_tokens=self._settings.openai_max_tokens,
            timeout=self._settings.llm_timeout_seconds,
        )
        logger.debug("event=explain_one_ok length=%d", len(text))
        return text

    async def explain_batch(
        self, requests: Sequence[ExplanationRequest]
    ) -> list[str]:
        """One completion for all requests; token budget and timeout scale."""
        if not requests:
            return []
        self._require_available()

        count = len(requests)
        text = await self._complete(
            build_batch_prompt(requests),
            max_tokens=self._settings.openai_max_tokens * count,
            timeout=(
                self._settings.llm_timeout_seconds
                * BATCH_TIMEOUT_MULTIPLIER
            ),
        )
        explanations = split_batch_response(text, count)
        logger.debug(
            "event=explain_batch_ok count=%d response_len=%d",
            count,
            len(text),
        )
        return explanations

    def _require_available(self) -> None:
        if not self.is_available():
            raise BackendUnavailableError(
                "Remote backend is not available. "
                "Check API key configuration."
            )

    async def _complete(
        self, prompt: str, *, max_tokens: int, timeout: int
    ) -> str:
        """Issue the completion and return the generated text.

        Every failure, including a response without the expected
        ``choices[0].message.content`` shape, becomes a
        :class:`BackendTransportError`.
        """
        kwargs: dict[str, Any] = {
            "model": self._settings.openai_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": self._settings.openai_temperature,
            "timeout": timeout,
            "api_key": self._api_key,
        }
        if self._settings.openai_api_base:
            kwargs["api_base"] = self._settings.openai_api_base

        try:
            response: Any = None
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._settings.llm_max_attempts),
                wait=_RETRY_WAIT,
                retry=retry_if_exception_type(LitellmRateLimitError),
                reraise=True,
            ):
                with attempt:
                    response = await _acompletion(**kwargs)
            content = response.choices[0].message.content
        except Exception as exc:
            error = BackendTransportError.wrap(exc)
            logger.warning(
                "event=completion_failed model=%s error_class=%s"
                " status=%s",
                self._settings.openai_model,
                error.error_class.value,
                error.status_code,
            )
            raise error from exc

        return str(content or "")
