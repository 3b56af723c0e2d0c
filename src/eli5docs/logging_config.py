"""Logging for the eli5docs CLI, set up in two steps.

``setup_logging`` runs at the top of ``eli5docs.cli``, before the remote
backend pulls in litellm, so ``LITELLM_LOG`` is in place when litellm
reads it. ``cleanup_third_party_handlers`` runs once every import is
done and strips the handlers litellm installed on its own loggers.
``set_level`` applies ``--verbose`` or the configured ``log_level``
after settings load.

Each step runs at most once per process.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

# Only warnings from the completion stack reach the console
_SUPPRESSED_LOGGERS = (
    *_LITELLM_LOGGERS,
    "openai._base_client",
    "httpx",
    "httpcore",
)

_phase1_done = False
_phase2_done = False


def _to_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger; unknown level names mean INFO."""
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    # Read by litellm._logging at import; a user-set value wins
    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=_to_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def set_level(level: str) -> None:
    logging.getLogger().setLevel(_to_level(level))


def cleanup_third_party_handlers() -> None:
    """Route litellm records through the root handler only.

    Without this every litellm warning is printed twice: once by its
    own StreamHandler and once after propagating to root.
    """
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
