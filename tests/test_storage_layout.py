"""Tests for storage.layout path conventions."""

import os

from ai_visibility_tracker.storage.layout import (
    ANALYSIS_FILENAME,
    REPORT_FILENAME,
    RUN_META_FILENAME,
    get_analysis_path,
    get_report_path,
    get_run_directory,
    get_run_meta_path,
)


class TestLayout:
    def test_run_directory_is_output_dir_plus_run_id(self):
        assert get_run_directory("./output", "2025-11-02T08-00-00Z") == os.path.join(
            "./output", "2025-11-02T08-00-00Z"
        )

    def test_run_directory_not_created(self, tmp_path):
        path = get_run_directory(str(tmp_path), "run-1")

        assert not os.path.exists(path)

    def test_artifact_paths(self):
        run_dir = os.path.join("output", "run-1")

        assert get_analysis_path(run_dir) == os.path.join(run_dir, ANALYSIS_FILENAME)
        assert get_run_meta_path(run_dir) == os.path.join(run_dir, RUN_META_FILENAME)
        assert get_report_path(run_dir) == os.path.join(run_dir, REPORT_FILENAME)

    def test_filenames(self):
        assert ANALYSIS_FILENAME == "analysis.json"
        assert RUN_META_FILENAME == "run_meta.json"
        assert REPORT_FILENAME == "report.html"
