"""Per-run diagnostics for file-level failures."""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileError:
    """A file that contributed nothing because it could not be processed."""

    file_path: str
    phase: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class AnalysisDiagnostics:
    """Statistics and recorded failures for one analysis run.

    File-level failures are recorded here instead of being raised, so a run
    always finishes with a (possibly incomplete) catalog.
    """

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.parse_errors = 0
        self.errors: List[FileError] = []

    def record_processed(self) -> None:
        self.files_processed += 1

    def record_failure(self, file_path: str, phase: str, message: str, parse_error_count: int = 0) -> None:
        """Record a skipped file and log it."""
        self.files_failed += 1
        self.parse_errors += parse_error_count
        self.errors.append(FileError(file_path=file_path, phase=phase, message=message))
        logger.warning("Skipping %s during %s: %s", file_path, phase, message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostics to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "parse_errors": self.parse_errors,
            "errors": [error.to_dict() for error in self.errors],
        }

    def __str__(self) -> str:
        return (
            f"AnalysisDiagnostics(processed={self.files_processed}, "
            f"failed={self.files_failed}, parse_errors={self.parse_errors})"
        )
