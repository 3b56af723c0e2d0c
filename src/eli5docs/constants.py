"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so renderers and log lines can use
them directly.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class ElementKind(StrEnum):
    """Declaration family of a marked element."""

    CLASS = "Class"
    INTERFACE = "Interface"
    ENUM = "Enum"
    METHOD = "Method"
    FIELD = "Field"


class ResolutionTier(StrEnum):
    """Orchestrator tier that produced the final explanation set.

    ``individual`` means the batch call failed and at least one element
    was resolved one at a time; ``stub`` means nothing came back from the
    remote provider at all.
    """

    BATCH = "batch"
    INDIVIDUAL = "individual"
    STUB = "stub"
    EMPTY = "empty"


class ExportFormat(StrEnum):
    """Supported document export formats."""

    MARKDOWN = "markdown"
    JSON = "json"


class StageProgress(StrEnum):
    """Progress status for pipeline stage events."""

    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


# ── Scanner ──────────────────────────────────────────────

MARKER = "@ExplainLikeImFive"
SOURCE_EXTENSIONS: tuple[str, ...] = (".java",)

# Lines after the marker searched for the declaration
DECLARATION_LOOKAHEAD_LINES = 4
# Continuation lines joined onto a method header missing its ")"
SIGNATURE_CONTINUATION_LINES = 3

DECLARATION_KEYWORDS = frozenset({
    "public",
    "private",
    "protected",
    "class",
    "interface",
    "enum",
    "abstract",
    "final",
    "static",
})

TYPE_KEYWORDS: dict[str, ElementKind] = {
    "class": ElementKind.CLASS,
    "interface": ElementKind.INTERFACE,
    "enum": ElementKind.ENUM,
}

SIGNATURE_MODIFIERS = frozenset({
    "public",
    "private",
    "protected",
    "static",
    "final",
    "abstract",
    "synchronized",
    "native",
    "transient",
    "volatile",
    "default",
    "strictfp",
})

COMMENT_PREFIXES = ("//", "/*", "*")
UNKNOWN_NAME = "Unknown"

# ── Batch protocol ───────────────────────────────────────

BATCH_DELIMITER = "---EXPLANATION---"
BATCH_TIMEOUT_MULTIPLIER = 2
BODY_PREVIEW_CHARS = 100

STUB_NOTICE = (
    "[This is a stub explanation. Configure a real AI service "
    "for actual ELI5 explanations.]"
)

# ── Retry Strategy (rate limits only) ────────────────────

RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── Output ───────────────────────────────────────────────

DEFAULT_OUTPUT_FILE = "target/eli5-docs/eli5.md"
GENERATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200

# ── Stage Labels (user-facing) ─────────────────────────

STAGE_LABELS: dict[str, str] = {
    "scan": "Scanning for marked elements",
    "select_backend": "Selecting explanation backend",
    "explain": "Generating explanations",
    "render": "Writing documentation",
}
