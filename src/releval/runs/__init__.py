"""Runs — retrieved results, relevance judgments and their loaders."""

from releval.runs.loader import RunLoader
from releval.runs.schemas import (
    QRELS_JG_FORMAT,
    RESULTS_FORMAT,
    JudgmentEntry,
    JudgmentGroup,
    QueryJudgments,
    QueryResults,
    RetrievedItem,
    RunResults,
)

__all__ = [
    "QRELS_JG_FORMAT",
    "RESULTS_FORMAT",
    "JudgmentEntry",
    "JudgmentGroup",
    "QueryJudgments",
    "QueryResults",
    "RetrievedItem",
    "RunLoader",
    "RunResults",
]
