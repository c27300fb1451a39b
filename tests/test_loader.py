"""Tests for RunLoader — results and qrels_jg parsing, error cases."""

from __future__ import annotations

from pathlib import Path

import pytest

from releval.errors import DuplicateDocumentError, MalformedInputError
from releval.runs.loader import RunLoader
from releval.runs.schemas import QRELS_JG_FORMAT, RESULTS_FORMAT, JudgmentEntry


@pytest.fixture
def loader() -> RunLoader:
    return RunLoader()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestResultsLoader:
    def test_load_results_text(self, loader: RunLoader, results_text: str):
        run = loader.load_results_text(results_text)
        assert [q.qid for q in run.queries] == ["q1", "q2", "q3"]
        assert run.run_id == "runA"
        assert run.line_count == 8

    def test_items_keep_file_order(self, loader: RunLoader, results_text: str):
        run = loader.load_results_text(results_text)
        q2 = run.queries[1]
        assert [i.docno for i in q2.items] == ["a", "b", "c", "d"]
        assert [i.score for i in q2.items] == [5.0, 4.0, 3.0, 2.0]
        assert q2.format == RESULTS_FORMAT
        assert q2.run_id == "runA"

    def test_queries_sorted_by_qid(self, loader: RunLoader):
        run = loader.load_results_text("q9 Q0 a 1 1.0 r\nq10 Q0 b 1 1.0 r\n")
        assert [q.qid for q in run.queries] == ["q10", "q9"]

    def test_rank_format_synthesizes_score(self, loader: RunLoader):
        run = loader.load_results_text("q1 d1 1\nq1 d2 2\n")
        items = run.queries[0].items
        assert [i.score for i in items] == [-1.0, -2.0]
        assert run.run_id is None

    def test_extra_fields_ignored(self, loader: RunLoader):
        run = loader.load_results_text("q1 Q0 d1 1 2.5 runB extra stuff\n")
        assert run.queries[0].items[0].score == 2.5
        assert run.run_id == "runB"

    def test_blank_lines_skipped(self, loader: RunLoader):
        run = loader.load_results_text("\n   \nq1 Q0 d1 1 2.5 r\n\n")
        assert run.line_count == 1

    def test_wrong_field_count(self, loader: RunLoader):
        with pytest.raises(MalformedInputError) as excinfo:
            loader.load_results_text("q1 Q0 d1 1 2.0 r\nq1 Q0 d2 1\n")
        assert excinfo.value.line_number == 2

    def test_non_numeric_score(self, loader: RunLoader):
        with pytest.raises(MalformedInputError, match="not a number"):
            loader.load_results_text("q1 Q0 d1 1 high r\n")

    def test_load_results_file(self, loader: RunLoader, results_file: Path):
        run = loader.load_results_file(results_file)
        assert run.source_path == str(results_file)
        assert len(run.queries) == 3

    def test_missing_file(self, loader: RunLoader, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            loader.load_results_file(tmp_path / "nope.txt")


# ---------------------------------------------------------------------------
# Judgments
# ---------------------------------------------------------------------------


class TestQrelsLoader:
    def test_load_qrels_text(self, loader: RunLoader, qrels_text: str):
        judgments = loader.load_qrels_text(qrels_text)
        assert list(judgments) == ["q1", "q2"]
        q2 = judgments["q2"]
        assert q2.format == QRELS_JG_FORMAT
        assert [g.name for g in q2.groups] == ["0"]

    def test_entries_sorted_by_docno(self, loader: RunLoader, qrels_text: str):
        group = loader.load_qrels_text(qrels_text)["q2"].groups[0]
        assert [e.docno for e in group.entries] == ["a", "c", "d", "e"]

    def test_negative_level_is_unjudged(self, loader: RunLoader, qrels_text: str):
        group = loader.load_qrels_text(qrels_text)["q2"].groups[0]
        assert JudgmentEntry(docno="d", level=None) in group.entries
        assert group.max_level == 2

    def test_multiple_groups_ordered_by_name(self, loader: RunLoader):
        text = "q1 B d1 1\nq1 A d1 0\nq1 A d2 2\n"
        groups = loader.load_qrels_text(text)["q1"].groups
        assert [g.name for g in groups] == ["A", "B"]
        assert len(groups[0].entries) == 2

    def test_duplicate_docno_in_group(self, loader: RunLoader):
        with pytest.raises(DuplicateDocumentError):
            loader.load_qrels_text("q1 0 d1 1\nq1 0 d1 0\n")

    def test_same_docno_in_different_groups(self, loader: RunLoader):
        judgments = loader.load_qrels_text("q1 A d1 1\nq1 B d1 0\n")
        assert len(judgments["q1"].groups) == 2

    def test_non_integer_level(self, loader: RunLoader):
        with pytest.raises(MalformedInputError) as excinfo:
            loader.load_qrels_text("q1 0 d1 1\nq1 0 d2 maybe\n")
        assert excinfo.value.line_number == 2

    def test_wrong_field_count(self, loader: RunLoader):
        with pytest.raises(MalformedInputError):
            loader.load_qrels_text("q1 d1 1\n")

    def test_load_qrels_file(self, loader: RunLoader, qrels_file: Path):
        assert set(loader.load_qrels_file(qrels_file)) == {"q1", "q2"}
