"""Element scanner: heuristic discovery of marked declarations."""

from eli5docs.scanner.schemas import MarkedElement
from eli5docs.scanner.walker import scan_directory, scan_file, scan_source

__all__ = [
    "MarkedElement",
    "scan_directory",
    "scan_file",
    "scan_source",
]
