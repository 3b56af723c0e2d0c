"""Walk a source tree and collect marked elements file by file."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import pathspec

from eli5docs.constants import SOURCE_EXTENSIONS, ElementKind
from eli5docs.resilience.errors import ScanError
from eli5docs.scanner.body import MethodBodyIndex
from eli5docs.scanner.heuristics import (
    find_declaration,
    find_marker,
    read_marker_args,
)
from eli5docs.scanner.schemas import MarkedElement

logger = logging.getLogger(__name__)


def scan_directory(
    root: Path,
    *,
    include_bodies: bool = True,
    extensions: Iterable[str] = SOURCE_EXTENSIONS,
    skip_directories: Iterable[str] = (),
) -> list[MarkedElement]:
    """Scan every source file under ``root``, in file-then-line order.

    A file that cannot be read or scanned is logged and skipped; the
    rest of the tree is still scanned.
    """
    exts = {e.lower() for e in extensions}
    elements: list[MarkedElement] = []
    files = [
        p
        for p in walk_files(root, set(skip_directories))
        if p.suffix.lower() in exts
    ]
    for path in files:
        try:
            elements.extend(
                scan_file(path, include_bodies=include_bodies)
            )
        except ScanError as exc:
            logger.warning(
                "event=scan_file_failed file=%s error=%s", path, exc
            )

    logger.info(
        "event=scan_complete root=%s files=%d elements=%d",
        root,
        len(files),
        len(elements),
    )
    return elements


def scan_file(
    path: Path, *, include_bodies: bool = True
) -> list[MarkedElement]:
    """Read one file and scan it. Raises :class:`ScanError` on failure."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            source = f.read()
    except OSError as exc:
        raise ScanError(f"cannot read {path}: {exc}") from exc

    try:
        return scan_source(source, path, include_bodies=include_bodies)
    except Exception as exc:
        raise ScanError(f"cannot scan {path}: {exc}") from exc


def scan_source(
    source: str,
    path: Path,
    *,
    include_bodies: bool = True,
) -> list[MarkedElement]:
    """Resolve every marker in ``source`` to a :class:`MarkedElement`.

    Markers without a declaration inside the lookahead window are
    dropped. Body extraction failures leave ``body`` as None.
    """
    lines = source.splitlines()
    bodies = MethodBodyIndex(source)
    elements: list[MarkedElement] = []

    for index, line in enumerate(lines):
        if find_marker(line) < 0:
            continue

        declaration = find_declaration(lines, index)
        if declaration is None:
            logger.debug(
                "event=marker_dropped file=%s line=%d", path, index + 1
            )
            continue

        args = read_marker_args(lines, index)
        body: str | None = None
        if (
            include_bodies
            and args.include_body
            and declaration.kind is ElementKind.METHOD
        ):
            body = _safe_body(bodies, declaration.line_index, path)

        elements.append(
            MarkedElement(
                name=declaration.name,
                kind=declaration.kind,
                signature=declaration.signature,
                body=body,
                custom_prompt=args.prompt,
                source_file=path,
                source_line=index + 1,
            )
        )

    return elements


def _safe_body(
    bodies: MethodBodyIndex, line_index: int, path: Path
) -> str | None:
    try:
        return bodies.body_at(line_index)
    except Exception:  # noqa: BLE001
        # Parser crash on malformed source → no body, keep the element
        logger.warning(
            "event=body_extract_failed file=%s line=%d",
            path,
            line_index + 1,
            exc_info=True,
        )
        return None


def walk_files(root: Path, skip_dirs: set[str]) -> list[Path]:
    """All regular files under ``root``, sorted, honoring .gitignore.

    Hidden directories and ``skip_dirs`` are not descended. Symlinks
    resolving outside the root are skipped, and each real directory or
    file is visited once, so symlink cycles cannot repeat a subtree.
    Entries that cannot be resolved are logged and skipped.
    """
    spec = _load_gitignore(root)
    resolved_root = root.resolve()
    return _walk(root, root, skip_dirs, spec, resolved_root, {resolved_root})


def _walk(
    current: Path,
    root: Path,
    skip_dirs: set[str],
    spec: pathspec.PathSpec,
    resolved_root: Path,
    seen: set[Path],
) -> list[Path]:
    files: list[Path] = []
    try:
        entries = sorted(current.iterdir())
    except OSError:
        logger.warning("event=scan_dir_unreadable dir=%s", current)
        return files

    for item in entries:
        try:
            real = item.resolve()
            if item.is_symlink():
                item.stat()
            is_dir = item.is_dir()
            is_file = not is_dir and item.is_file()
        except (OSError, RuntimeError) as exc:
            # Looping or dangling symlink
            logger.warning(
                "event=scan_entry_skipped path=%s error=%s", item, exc
            )
            continue
        if item.is_symlink() and not real.is_relative_to(resolved_root):
            continue
        if real in seen:
            logger.debug("event=scan_entry_revisited path=%s", item)
            continue

        rel = item.relative_to(root).as_posix()
        if is_dir:
            if item.name.startswith(".") or item.name in skip_dirs:
                continue
            if spec.match_file(rel + "/"):
                continue
            seen.add(real)
            files.extend(
                _walk(item, root, skip_dirs, spec, resolved_root, seen)
            )
        elif is_file and not spec.match_file(rel):
            seen.add(real)
            files.append(item)
    return files


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore patterns using pathspec."""
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return pathspec.PathSpec.from_lines("gitwildmatch", [])
    try:
        with open(gitignore, encoding="utf-8") as f:
            return pathspec.PathSpec.from_lines("gitwildmatch", f)
    except OSError:
        return pathspec.PathSpec.from_lines("gitwildmatch", [])
