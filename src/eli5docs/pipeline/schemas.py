"""Records produced by the orchestrator, assembler and pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from eli5docs.constants import ElementKind, ResolutionTier
from eli5docs.scanner.schemas import MarkedElement


@dataclass(frozen=True)
class ExplanationResult:
    """One marked element paired with its resolved explanation."""

    element_name: str
    element_kind: ElementKind
    signature: str
    body: str | None
    explanation: str
    custom_prompt: str | None
    source_file: Path | None = None
    source_line: int | None = None


@dataclass(frozen=True)
class OrchestrationReport:
    """Exactly one explanation per input element, in input order."""

    explanations: list[str]
    tier: ResolutionTier
    fallback_count: int = 0  # positions given the stub placeholder


@dataclass
class StageStatus:
    """Status of a pipeline stage."""

    name: str
    ok: bool
    duration_ms: float = 0.0
    error: str | None = None


@dataclass
class PipelineResult:
    """Full result of a pipeline run."""

    elements: list[MarkedElement] = field(
        default_factory=lambda: list[MarkedElement]()
    )
    results: list[ExplanationResult] = field(
        default_factory=lambda: list[ExplanationResult]()
    )
    stages: list[StageStatus] = field(
        default_factory=lambda: list[StageStatus]()
    )
    backend_name: str | None = None
    tier: ResolutionTier = ResolutionTier.EMPTY
    fallback_count: int = 0
    output_path: Path | None = None
    duration_ms: float = 0.0
