"""Tests for the Typer CLI — evaluate and measures commands."""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    p = tmp_path / "settings.yaml"
    p.write_text("alignment:\n  relevance_threshold: 1\n")
    return p


class TestEvaluateCommand:
    def test_summary_rows(self, results_file: Path, qrels_file: Path, settings_file: Path):
        result = runner.invoke(
            app,
            [
                "evaluate", str(results_file), str(qrels_file),
                "-m", "num_ret", "-m", "P.5",
                "--settings", str(settings_file),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "num_ret" in result.output
        assert "P_5" in result.output
        assert "0.3000" in result.output
        assert "Skipped (no judgments): 1" in result.output

    def test_per_query_rows(self, results_file: Path, qrels_file: Path, settings_file: Path):
        result = runner.invoke(
            app,
            [
                "evaluate", str(results_file), str(qrels_file),
                "-m", "num_rel", "-q",
                "--settings", str(settings_file),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "q1" in result.output
        assert "q2" in result.output

    def test_missing_file_exits_nonzero(self, qrels_file: Path, tmp_path: Path):
        result = runner.invoke(
            app, ["evaluate", str(tmp_path / "missing.txt"), str(qrels_file)]
        )
        assert result.exit_code == 1

    def test_settings_file_applies(self, results_file: Path, qrels_file: Path, tmp_path: Path):
        p = tmp_path / "judged.yaml"
        p.write_text("alignment:\n  judged_docs_only: true\n")
        result = runner.invoke(
            app,
            ["evaluate", str(results_file), str(qrels_file), "-m", "num_ret", "-s", str(p)],
        )
        assert result.exit_code == 0, result.output
        assert re.search(r"num_ret\W+0\W+all\W+4\b", result.output)

    def test_missing_settings_file_exits_nonzero(
        self, results_file: Path, qrels_file: Path, tmp_path: Path
    ):
        result = runner.invoke(
            app,
            [
                "evaluate", str(results_file), str(qrels_file),
                "--settings", str(tmp_path / "absent.yaml"),
            ],
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, FileNotFoundError)

    def test_invalid_settings_exit_nonzero(
        self, results_file: Path, qrels_file: Path, tmp_path: Path
    ):
        p = tmp_path / "bad.yaml"
        p.write_text("alignment:\n  relevance_threshold: -1\n")
        result = runner.invoke(app, ["evaluate", str(results_file), str(qrels_file), "-s", str(p)])
        assert result.exit_code == 1

    def test_duplicate_document_exits_nonzero(self, tmp_path: Path, qrels_file: Path):
        run = tmp_path / "dup.txt"
        run.write_text("q1 Q0 d1 1 2.0 r\nq1 Q0 d1 2 1.0 r\n")
        result = runner.invoke(app, ["evaluate", str(run), str(qrels_file)])
        assert result.exit_code == 1


class TestMeasuresCommand:
    def test_lists_measures(self):
        result = runner.invoke(app, ["measures"])
        assert result.exit_code == 0
        assert "ndcg_rel" in result.output
        assert "map_cut" in result.output
