"""Pipeline orchestration: scan, select a backend, explain, render."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from eli5docs.backends.base import ExplanationBackend
from eli5docs.backends.selector import BackendSelector, default_selector
from eli5docs.config import Settings
from eli5docs.constants import ExportFormat, StageProgress
from eli5docs.export import write_document
from eli5docs.pipeline.assembler import assemble_results
from eli5docs.pipeline.events import ProgressCallback, StageEvent
from eli5docs.pipeline.orchestrator import explain_elements
from eli5docs.pipeline.schemas import PipelineResult, StageStatus
from eli5docs.resilience.errors import InvalidSourceError
from eli5docs.scanner import scan_directory

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _RunContext:
    """Shared state for one pipeline run."""

    on_progress: ProgressCallback | None = None

    def report(self, event: StageEvent) -> None:
        if self.on_progress:
            self.on_progress(event)

    def report_running(self, name: str, message: str) -> None:
        self.report(
            StageEvent(
                name=name, status=StageProgress.RUNNING, message=message
            )
        )

    def report_done(self, status: StageStatus, message: str = "") -> None:
        self.report(
            StageEvent(
                name=status.name,
                status=(
                    StageProgress.DONE if status.ok else StageProgress.ERROR
                ),
                duration_ms=status.duration_ms,
                message=status.error or message,
            )
        )


def validate_source_dir(source_dir: str | Path) -> Path:
    """Return ``source_dir`` as a Path or raise :class:`InvalidSourceError`."""
    path = Path(source_dir)
    if not path.exists():
        raise InvalidSourceError(f"Source directory not found: {path}")
    if not path.is_dir():
        raise InvalidSourceError(f"Source path is not a directory: {path}")
    return path


async def run_pipeline(
    source_dir: str | Path,
    output_path: str | Path,
    settings: Settings | None = None,
    *,
    fmt: ExportFormat | str = ExportFormat.MARKDOWN,
    include_bodies: bool = True,
    selector: BackendSelector | None = None,
    on_progress: ProgressCallback | None = None,
) -> PipelineResult:
    """Generate the explanation document for every marked element.

    Raises :class:`InvalidSourceError` before scanning when ``source_dir``
    is missing. Backend failures never propagate; they degrade to the
    per-element and placeholder tiers. With no marked elements the run
    ends after scanning and no document is written.
    """
    root = validate_source_dir(source_dir)
    cfg = settings or Settings()
    ctx = _RunContext(on_progress=on_progress)
    result = PipelineResult()
    t0 = time.monotonic()

    # 1: Scan
    ctx.report_running("scan", f"Scanning {root}...")
    elements, status = _run_stage(
        "scan",
        lambda: scan_directory(
            root,
            include_bodies=include_bodies,
            skip_directories=cfg.skip_directories,
        ),
    )
    result.stages.append(status)
    result.elements = elements or []
    ctx.report_done(
        status, f"Found {len(result.elements)} marked elements"
    )
    if not result.elements:
        logger.info("event=no_marked_elements root=%s", root)
        return _finalize(result, t0)

    # 2: Select backend
    ctx.report_running("select_backend", "Selecting backend...")
    chooser = selector or default_selector(cfg)
    backend, status = _run_stage("select_backend", chooser.select)
    result.stages.append(status)
    if backend is None:
        ctx.report_done(status)
        return _finalize(result, t0)
    result.backend_name = backend.name
    ctx.report_done(status, f"Using {backend.name}")

    # 3: Explain
    ctx.report_running(
        "explain", f"Explaining {len(result.elements)} elements..."
    )
    t_explain = time.monotonic()
    report = await explain_elements(
        result.elements,
        backend,
        fallback_concurrency=cfg.fallback_concurrency,
        on_progress=on_progress,
    )
    status = StageStatus(
        name="explain", ok=True, duration_ms=_elapsed(t_explain)
    )
    result.stages.append(status)
    result.tier = report.tier
    result.fallback_count = report.fallback_count
    result.results = assemble_results(result.elements, report.explanations)
    ctx.report_done(status, f"Resolved via {report.tier} tier")

    # 4: Render
    ctx.report_running("render", f"Writing {output_path}...")
    written, status = _run_stage(
        "render",
        lambda: write_document(result.results, Path(output_path), fmt),
    )
    result.stages.append(status)
    result.output_path = written
    ctx.report_done(status, f"Wrote {written}" if written else "")

    _log_summary(result, backend)
    return _finalize(result, t0)


def _log_summary(result: PipelineResult, backend: ExplanationBackend) -> None:
    logger.info(
        "event=pipeline_complete backend=%s elements=%d tier=%s"
        " fallback=%d output=%s",
        backend.name,
        len(result.results),
        result.tier,
        result.fallback_count,
        result.output_path,
    )


def _finalize(result: PipelineResult, t0: float) -> PipelineResult:
    result.duration_ms = _elapsed(t0)
    return result


def _run_stage(
    name: str,
    fn: Callable[[], T],
) -> tuple[T | None, StageStatus]:
    """Run a sync stage with error capture."""
    t0 = time.monotonic()
    try:
        out = fn()
        return out, StageStatus(
            name=name, ok=True, duration_ms=_elapsed(t0)
        )
    except Exception as exc:
        logger.exception("event=stage_failed stage=%s", name)
        return None, StageStatus(
            name=name,
            ok=False,
            duration_ms=_elapsed(t0),
            error=str(exc),
        )


def _elapsed(t0: float) -> float:
    return (time.monotonic() - t0) * 1000
