"""Orchestration, assembly and the end-to-end pipeline."""

from eli5docs.pipeline.assembler import assemble_results
from eli5docs.pipeline.events import ProgressCallback, StageEvent
from eli5docs.pipeline.orchestrator import build_requests, explain_elements
from eli5docs.pipeline.schemas import (
    ExplanationResult,
    OrchestrationReport,
    PipelineResult,
    StageStatus,
)
from eli5docs.pipeline.service import run_pipeline, validate_source_dir

__all__ = [
    "ExplanationResult",
    "OrchestrationReport",
    "PipelineResult",
    "ProgressCallback",
    "StageEvent",
    "StageStatus",
    "assemble_results",
    "build_requests",
    "explain_elements",
    "run_pipeline",
    "validate_source_dir",
]
