"""Loaders for TREC-style results and qrels_jg judgment files.

Results lines come in two shapes:

    030  Q0  ZF08-175-870  0  4238  prise1      (qid iter docno rank score run_id)
    030  ZF08-175-870  1                        (qid docno rank)

The rank column of the six-field shape is ignored; ranks are assigned later
by sorting on score. In the three-field shape the score is synthesized as
``-rank`` so rank 1 sorts first.

Judgment lines are ``qid group docno level``; a negative level marks a
document that is in the pool but unjudged.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from releval.errors import MalformedInputError
from releval.runs.schemas import (
    JudgmentEntry,
    JudgmentGroup,
    QueryJudgments,
    QueryResults,
    RetrievedItem,
    RunResults,
)

logger = logging.getLogger(__name__)


class RunLoader:
    """Parse results and judgment text into structured records."""

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def load_results_file(self, path: str | Path) -> RunResults:
        """Load a results file from a filesystem path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Results file not found: {path}")

        run = self.load_results_text(path.read_text(encoding="utf-8"))
        run.source_path = str(path)
        return run

    def load_results_text(self, text: str) -> RunResults:
        """Parse results from in-memory text."""
        by_qid: dict[str, list[RetrievedItem]] = defaultdict(list)
        run_id: str | None = None
        line_count = 0

        for line_number, line in enumerate(text.splitlines(), start=1):
            fields = line.split()
            if not fields:
                continue
            line_count += 1

            if len(fields) == 3:
                qid, docno, raw = fields
                score = -self._parse_float(raw, "rank", line_number)
            elif len(fields) >= 6:
                qid, docno, raw, run_id = fields[0], fields[2], fields[4], fields[5]
                score = self._parse_float(raw, "score", line_number)
            else:
                raise MalformedInputError(
                    f"expected 3 or at least 6 fields, got {len(fields)}", line_number
                )
            by_qid[qid].append(RetrievedItem(docno=docno, score=score))

        queries = [
            QueryResults(qid=qid, items=tuple(by_qid[qid]), run_id=run_id)
            for qid in sorted(by_qid)
        ]
        logger.info("Loaded %d results lines for %d queries", line_count, len(queries))
        return RunResults(queries=queries, run_id=run_id, line_count=line_count)

    # ------------------------------------------------------------------
    # Judgments
    # ------------------------------------------------------------------

    def load_qrels_file(self, path: str | Path) -> dict[str, QueryJudgments]:
        """Load a qrels_jg file from a filesystem path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Judgments file not found: {path}")
        return self.load_qrels_text(path.read_text(encoding="utf-8"))

    def load_qrels_text(self, text: str) -> dict[str, QueryJudgments]:
        """Parse qrels_jg judgments from in-memory text.

        Returns:
            Map of qid → ``QueryJudgments``, groups ordered by name.
        """
        by_query: dict[str, dict[str, list[JudgmentEntry]]] = defaultdict(
            lambda: defaultdict(list)
        )
        line_count = 0

        for line_number, line in enumerate(text.splitlines(), start=1):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 4:
                raise MalformedInputError(
                    f"expected 4 fields (qid group docno level), got {len(fields)}",
                    line_number,
                )
            qid, group, docno, raw = fields
            try:
                level = int(raw)
            except ValueError:
                raise MalformedInputError(
                    f"relevance level '{raw}' is not an integer", line_number
                ) from None
            line_count += 1
            by_query[qid][group].append(
                JudgmentEntry(docno=docno, level=level if level >= 0 else None)
            )

        judgments = {
            qid: QueryJudgments(
                qid=qid,
                groups=tuple(
                    JudgmentGroup(name=name, entries=tuple(groups[name]), qid=qid)
                    for name in sorted(groups)
                ),
            )
            for qid, groups in sorted(by_query.items())
        }
        logger.info("Loaded %d judgments for %d queries", line_count, len(judgments))
        return judgments

    @staticmethod
    def _parse_float(raw: str, what: str, line_number: int) -> float:
        try:
            return float(raw)
        except ValueError:
            raise MalformedInputError(f"{what} '{raw}' is not a number", line_number) from None
