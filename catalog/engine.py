"""
Catalog engine: runs the analysis phases over one repository.

Phases run strictly in order, each inside its own logging phase scope:

1. resolve-defaults: merge literal values from every config file;
2. extract-definitions: discover variables in config files and sources;
3. trace-usages: attach consuming methods to every variable.

Each run owns its catalog, diagnostics and rule table.
"""

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from core.run_artifacts import write_run_report
from core.structured_logging import phase_scope, repository_scope, set_run_id
from extraction.defaults import PHASE as RESOLVE_PHASE, resolve_property_defaults
from extraction.definitions import PHASE as EXTRACT_PHASE, extract_definitions
from extraction.diagnostics import AnalysisDiagnostics
from extraction.models import Variable, VariableCatalog
from usage.config import PHASE as TRACE_PHASE
from usage.patterns import build_purpose_rules
from usage.tracer import trace_usages

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of one analysis run.

    Attributes:
        project_name: Display name of the analyzed project.
        repository_root: Absolute path that was analyzed.
        run_id: Log correlation ID of the run.
        catalog: Frozen variable catalog.
        diagnostics: Processed and failed file counts.
        started_at: UTC start time.
        finished_at: UTC finish time.
        duration_seconds: Wall-clock duration.
    """

    project_name: str
    repository_root: str
    run_id: str
    catalog: VariableCatalog
    diagnostics: AnalysisDiagnostics
    started_at: datetime
    finished_at: datetime
    duration_seconds: float = 0.0
    property_default_count: int = 0

    @property
    def variables(self) -> List[Variable]:
        return self.catalog.variables()

    @property
    def total_variables(self) -> int:
        return len(self.catalog)

    @property
    def required_variables(self) -> int:
        return sum(1 for v in self.catalog.variables() if v.required)

    @property
    def optional_variables(self) -> int:
        return self.total_variables - self.required_variables

    def documentation_input(self) -> Tuple[str, List[Variable], str]:
        """``(project_name, variables, repository_root)`` for the doc generator."""
        return self.project_name, self.variables, self.repository_root

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "project_name": self.project_name,
            "repository_root": self.repository_root,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration_seconds": round(self.duration_seconds, 3),
            "total_variables": self.total_variables,
            "required_variables": self.required_variables,
            "optional_variables": self.optional_variables,
            "property_defaults": self.property_default_count,
            "diagnostics": self.diagnostics.to_dict(),
            "variables": self.catalog.to_dict(),
        }


def analyze_repository(
    repo_root: str,
    project_name: Optional[str] = None,
    run_id: Optional[str] = None,
) -> AnalysisResult:
    """Build the environment variable catalog for a repository.

    File-level failures never abort the run; they are logged and collected
    in ``result.diagnostics``.

    Args:
        repo_root: Path to the checked-out repository.
        project_name: Display name; defaults to the root directory's name.
        run_id: Correlation ID; generated if not given.

    Returns:
        AnalysisResult holding the frozen catalog.

    Raises:
        FileNotFoundError: If repo_root is not a directory.
    """
    repo_root = os.path.abspath(repo_root)
    if not os.path.isdir(repo_root):
        raise FileNotFoundError(f"Directory not found: {repo_root}")

    project_name = project_name or os.path.basename(os.path.normpath(repo_root)) or repo_root
    run_id = set_run_id(run_id)
    diagnostics = AnalysisDiagnostics()
    started_at = datetime.now(timezone.utc)
    start = time.monotonic()

    with repository_scope(project_name):
        logger.info("Analyzing repository %s", repo_root)

        with phase_scope(RESOLVE_PHASE):
            defaults = resolve_property_defaults(repo_root, diagnostics)

        with phase_scope(EXTRACT_PHASE):
            catalog = extract_definitions(repo_root, defaults, diagnostics)

        with phase_scope(TRACE_PHASE):
            trace_usages(repo_root, catalog, build_purpose_rules())

        catalog.freeze()
        result = AnalysisResult(
            project_name=project_name,
            repository_root=repo_root,
            run_id=run_id,
            catalog=catalog,
            diagnostics=diagnostics,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            duration_seconds=time.monotonic() - start,
            property_default_count=len(defaults),
        )
        logger.info(
            "Analysis complete: %d variables (%d required, %d optional); %s",
            result.total_variables,
            result.required_variables,
            result.optional_variables,
            diagnostics,
        )

    return result


def write_catalog_report(result: AnalysisResult, output_dir: Optional[str] = None) -> str:
    """Write ``result`` as a JSON run report and return the file path."""
    path = write_run_report(result.to_dict(), result.run_id, output_dir)
    logger.info("Catalog report written to %s", path)
    return path
