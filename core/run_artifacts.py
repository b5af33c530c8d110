"""Run artifact helpers for catalog reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

from core.settings import resolve_report_dir


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str | None = None,
) -> str:
    """Write a JSON run report and return its path.

    ``output_dir`` defaults to the ``ENVCATALOG_REPORT_DIR`` setting.
    """
    output_dir = output_dir or resolve_report_dir()
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return path
