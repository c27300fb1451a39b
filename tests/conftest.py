"""Shared fixtures for tests — synthetic runs and judgments, no files unless asked."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from releval.runs.schemas import (
    JudgmentEntry,
    JudgmentGroup,
    QueryJudgments,
    QueryResults,
    RetrievedItem,
)

# ---------------------------------------------------------------------------
# Text fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def results_text() -> str:
    """Three queries; q3 has no judgments."""
    return textwrap.dedent("""\
        q1 Q0 d1 1 3.0 runA
        q1 Q0 d2 2 3.0 runA
        q1 Q0 d3 3 2.0 runA

        q2 Q0 a 1 5.0 runA
        q2 Q0 b 2 4.0 runA
        q2 Q0 c 3 3.0 runA
        q2 Q0 d 4 2.0 runA
        q3 Q0 x 1 1.0 runA
    """)


@pytest.fixture
def qrels_text() -> str:
    return textwrap.dedent("""\
        q1 0 d1 1
        q1 0 d3 0
        q2 0 a 2
        q2 0 c 1
        q2 0 e 1
        q2 0 d -1
    """)


@pytest.fixture
def results_file(tmp_path: Path, results_text: str) -> Path:
    p = tmp_path / "run.txt"
    p.write_text(results_text)
    return p


@pytest.fixture
def qrels_file(tmp_path: Path, qrels_text: str) -> Path:
    p = tmp_path / "qrels.txt"
    p.write_text(qrels_text)
    return p


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


def make_results(qid: str, *pairs: tuple[str, float]) -> QueryResults:
    return QueryResults(
        qid=qid,
        items=tuple(RetrievedItem(docno=docno, score=score) for docno, score in pairs),
    )


def make_judgments(qid: str, **groups: dict[str, int | None]) -> QueryJudgments:
    return QueryJudgments(
        qid=qid,
        groups=tuple(
            JudgmentGroup(
                name=name,
                entries=tuple(JudgmentEntry(docno=d, level=lvl) for d, lvl in entries.items()),
                qid=qid,
            )
            for name, entries in groups.items()
        ),
    )


@pytest.fixture
def q1_results() -> QueryResults:
    return make_results("q1", ("d1", 3.0), ("d2", 3.0), ("d3", 2.0))


@pytest.fixture
def q1_judgments() -> QueryJudgments:
    return make_judgments("q1", main={"d1": 1, "d3": 0})


@pytest.fixture
def q2_results() -> QueryResults:
    return make_results("q2", ("a", 5.0), ("b", 4.0), ("c", 3.0), ("d", 2.0))


@pytest.fixture
def q2_judgments() -> QueryJudgments:
    """``a`` level 2, ``c`` level 1, ``d`` unjudged, ``e`` relevant but not retrieved."""
    return make_judgments("q2", main={"a": 2, "c": 1, "e": 1, "d": None})
