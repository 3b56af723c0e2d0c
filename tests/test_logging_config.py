"""Tests for two-phase singleton logging configuration."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from eli5docs.logging_config import (
    _LITELLM_LOGGERS,
    _SUPPRESSED_LOGGERS,
    LOG_FORMAT,
    cleanup_third_party_handlers,
    set_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_flags() -> Iterator[None]:
    """Reset singleton flags and root level around each test."""
    import eli5docs.logging_config as mod

    root_level = logging.getLogger().level
    mod._phase1_done = False
    mod._phase2_done = False
    yield
    logging.getLogger().setLevel(root_level)
    for name in _LITELLM_LOGGERS:
        logging.getLogger(name).handlers.clear()


def test_setup_logging_is_idempotent() -> None:
    with patch("eli5docs.logging_config.logging.basicConfig") as mock_bc:
        setup_logging()
        setup_logging()
        mock_bc.assert_called_once()


def test_setup_logging_format_and_level() -> None:
    with patch("eli5docs.logging_config.logging.basicConfig") as mock_bc:
        setup_logging("debug")
    kwargs = mock_bc.call_args.kwargs
    assert kwargs["level"] == logging.DEBUG
    assert kwargs["format"] == LOG_FORMAT
    assert "%(name)s" in LOG_FORMAT


def test_litellm_log_env_var_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LITELLM_LOG", raising=False)
    setup_logging()
    assert os.environ.get("LITELLM_LOG") == "WARNING"


def test_litellm_log_env_var_preserves_existing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LITELLM_LOG", "ERROR")
    setup_logging()
    assert os.environ["LITELLM_LOG"] == "ERROR"


def test_suppressed_loggers_at_warning() -> None:
    setup_logging()
    for name in _SUPPRESSED_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_set_level() -> None:
    set_level("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    set_level("bogus")
    assert logging.getLogger().level == logging.INFO


def test_cleanup_clears_handlers_and_enables_propagation() -> None:
    lg = logging.getLogger("LiteLLM")
    lg.addHandler(logging.StreamHandler())
    lg.propagate = False

    cleanup_third_party_handlers()

    assert lg.handlers == []
    assert lg.propagate is True


def test_cleanup_is_idempotent() -> None:
    lg = logging.getLogger("LiteLLM")
    cleanup_third_party_handlers()

    # Second call is a no-op, so a handler added later survives
    lg.addHandler(logging.StreamHandler())
    cleanup_third_party_handlers()
    assert len(lg.handlers) == 1
