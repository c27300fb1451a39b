"""Evaluation harness — align each query, run the measures, aggregate over the run."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from releval.alignment.engine import EvaluationSession
from releval.config import DEFAULT_MEASURES
from releval.evaluation.factory import aggregate_for, compute_measure, get_measure
from releval.evaluation.schemas import Aggregate, EvalReport, MeasureSpec, QueryEvaluation
from releval.runs.schemas import QueryJudgments, QueryResults, RunResults

logger = logging.getLogger(__name__)


class EvalRunner:
    """Run a battery of measures over every query of a run.

    Any ``EvaluationError`` raised while aligning or scoring a query
    propagates: a run with a broken query is not reported.
    """

    def __init__(
        self,
        session: EvaluationSession | None = None,
        measures: Sequence[str | MeasureSpec] | None = None,
    ):
        self.session = session or EvaluationSession()
        self.measures = [
            m if isinstance(m, MeasureSpec) else MeasureSpec.parse(m)
            for m in (measures if measures is not None else DEFAULT_MEASURES)
        ]
        # Fail on unknown names before any query is touched
        for spec in self.measures:
            get_measure(spec.name)
        self._aggregates: dict[str, Aggregate] = {}

    def evaluate_query(
        self,
        results: QueryResults,
        judgments: QueryJudgments,
    ) -> list[QueryEvaluation]:
        """Evaluate every measure for every judgment group of one query.

        Each measure asks the session for the alignment; all but the first
        request are served from the session's cache.
        """
        by_group: dict[str, QueryEvaluation] = {}
        for spec in self.measures:
            alignment = self.session.align(results, judgments)
            for result in alignment.groups:
                evaluation = by_group.setdefault(
                    result.group, QueryEvaluation(qid=results.qid, group=result.group)
                )
                values = compute_measure(spec, result)
                for output in values:
                    self._aggregates.setdefault(output, aggregate_for(spec.name))
                evaluation.values.update(values)
        return list(by_group.values())

    def run(
        self,
        run: RunResults,
        judgments: Mapping[str, QueryJudgments],
    ) -> EvalReport:
        """Evaluate all queries of a run that have judgments.

        Args:
            run: Loaded results, one entry per query.
            judgments: Map of qid → judgments.

        Returns:
            An ``EvalReport`` with per-query values and run-level summaries.
        """
        report = EvalReport(run_id=run.run_id)

        for results in sorted(run.queries, key=lambda q: q.qid):
            query_judgments = judgments.get(results.qid)
            if query_judgments is None:
                report.num_skipped += 1
                continue
            report.queries.extend(self.evaluate_query(results, query_judgments))
            report.num_queries += 1

        report.summary = self.summary(report.queries)
        logger.info(
            "Evaluated %d queries (%d skipped without judgments), %d measures",
            report.num_queries,
            report.num_skipped,
            len(self.measures),
        )
        return report

    def summary(self, evaluations: Sequence[QueryEvaluation]) -> dict[str, dict[str, float]]:
        """Combine per-query values into run-level values per judgment group.

        Count measures are summed; all others are averaged over the evaluated
        queries, with undefined values counting as 0.0.

        Returns:
            Map of group → output name → value.
        """
        grouped: dict[str, list[QueryEvaluation]] = {}
        for evaluation in evaluations:
            grouped.setdefault(evaluation.group, []).append(evaluation)

        summary: dict[str, dict[str, float]] = {}
        for group, rows in grouped.items():
            totals: dict[str, float] = {}
            for row in rows:
                for output, value in row.values.items():
                    totals[output] = totals.get(output, 0.0) + (value or 0.0)
            n = len(rows)
            summary[group] = {
                output: total if self._aggregates.get(output) is Aggregate.SUM else total / n
                for output, total in totals.items()
            }
        return summary
