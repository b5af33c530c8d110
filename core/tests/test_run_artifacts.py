"""Tests for run artifact writer."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.run_artifacts import write_run_report


class TestRunArtifacts(unittest.TestCase):
    def test_write_run_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_run_report(
                report={"total_variables": 3, "project_name": "billing"},
                run_id="run-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            self.assertEqual(Path(path).name, "run-123.json")
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["run_id"], "run-123")
            self.assertEqual(payload["total_variables"], 3)
            self.assertEqual(payload["project_name"], "billing")
            self.assertIn("timestamp_utc", payload)

    def test_output_dir_from_setting(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            target = os.path.join(tmpdir, "nested", "reports")
            with mock.patch.dict(os.environ, {"ENVCATALOG_REPORT_DIR": target}):
                path = write_run_report(report={}, run_id="run-env")
            self.assertEqual(os.path.dirname(path), target)
            self.assertTrue(os.path.isfile(path))


if __name__ == "__main__":
    unittest.main()
