"""Data models for run evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Aggregate(StrEnum):
    """How per-query values combine into the run-level value."""

    MEAN = "mean"
    SUM = "sum"


@dataclass(frozen=True)
class MeasureSpec:
    """A measure name plus its optional parameter string.

    ``"P.5,10"`` parses to name ``P`` with params ``"5,10"``;
    ``"ndcg_p.1=3.5,2=9.0"`` to name ``ndcg_p`` with params ``"1=3.5,2=9.0"``.
    """

    name: str
    params: str | None = None

    @classmethod
    def parse(cls, text: str) -> MeasureSpec:
        name, sep, params = text.strip().partition(".")
        if not name:
            raise ValueError(f"Empty measure name in '{text}'")
        return cls(name=name, params=params if sep and params else None)

    def __str__(self) -> str:
        return f"{self.name}.{self.params}" if self.params else self.name


@dataclass
class QueryEvaluation:
    """Measure values for one (query, judgment group) pair."""

    qid: str
    group: str
    values: dict[str, float | None] = field(default_factory=dict)


@dataclass
class EvalReport:
    """Result of evaluating a whole run.

    Attributes:
        run_id: Run tag from the results file.
        queries: Per-query evaluations, in query id then group order.
        summary: Run-level values per judgment group.
        num_queries: Queries evaluated.
        num_skipped: Queries with results but no judgments.
    """

    run_id: str | None = None
    queries: list[QueryEvaluation] = field(default_factory=list)
    summary: dict[str, dict[str, float]] = field(default_factory=dict)
    num_queries: int = 0
    num_skipped: int = 0
