"""
Source loading with per-file failure isolation.

Both the Definition Extractor and the Usage Tracer get their parsed Java files
from here, so a file that cannot be read or parsed is skipped the same way in
both passes.
"""

import logging
import os
from typing import Iterator, Optional

from extraction.diagnostics import AnalysisDiagnostics
from extraction.discovery import discover_java_files, relative_path
from extraction.parser import count_error_nodes
from extraction.syntax import JavaSource

logger = logging.getLogger(__name__)


def load_java_source(
    file_path: str,
    repo_root: str,
    diagnostics: Optional[AnalysisDiagnostics] = None,
    phase: str = "extract-definitions",
) -> Optional[JavaSource]:
    """Parse one Java file, or return None if it cannot be used.

    A file that cannot be read, or whose syntax tree contains errors, is
    skipped. When ``diagnostics`` is given the failure is recorded there;
    otherwise it is only logged.

    Args:
        file_path: Absolute path of the ``.java`` file.
        repo_root: Repository root used for the relative path.
        diagnostics: Collector for processed and failed files.
        phase: Phase name stored with a recorded failure.

    Returns:
        The parsed JavaSource, or None.
    """
    file_path = os.path.abspath(file_path)
    relative = relative_path(file_path, repo_root)

    try:
        source = JavaSource.from_file(file_path, relative)
    except OSError as e:
        if diagnostics is not None:
            diagnostics.record_failure(relative, phase, f"Cannot read file: {e}")
        else:
            logger.debug("Skipping unreadable file %s: %s", relative, e)
        return None

    if source.has_syntax_errors:
        parse_error_count = count_error_nodes(source.tree)
        message = f"Syntax errors ({parse_error_count} error nodes)"
        if diagnostics is not None:
            diagnostics.record_failure(relative, phase, message, parse_error_count=parse_error_count)
        else:
            logger.debug("Skipping %s: %s", relative, message)
        return None

    if diagnostics is not None:
        diagnostics.record_processed()
    return source


def iter_java_sources(
    repo_root: str,
    diagnostics: Optional[AnalysisDiagnostics] = None,
    phase: str = "extract-definitions",
) -> Iterator[JavaSource]:
    """Yield every usable Java file under ``repo_root`` in traversal order."""
    java_files = discover_java_files(repo_root)
    if not java_files:
        logger.warning(f"No Java files found in {repo_root}")

    for file_path in java_files:
        source = load_java_source(file_path, repo_root, diagnostics, phase)
        if source is not None:
            yield source
