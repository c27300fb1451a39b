"""Data models for retrieval runs and relevance judgments."""

from __future__ import annotations

from dataclasses import dataclass, field

from releval.errors import DuplicateDocumentError

RESULTS_FORMAT = "trec_results"
QRELS_JG_FORMAT = "qrels_jg"


@dataclass(frozen=True)
class RetrievedItem:
    """One (docno, score) pair from a query's ranked output."""

    docno: str
    score: float


@dataclass(frozen=True)
class JudgmentEntry:
    """One judged document.

    ``level`` is ``None`` for a document that is in the pool but was never
    assigned a relevance level.
    """

    docno: str
    level: int | None = None

    def __post_init__(self) -> None:
        if self.level is not None and self.level < 0:
            raise ValueError(f"Relevance level must be >= 0, got {self.level} for '{self.docno}'")

    @property
    def is_judged(self) -> bool:
        return self.level is not None


@dataclass(frozen=True)
class JudgmentGroup:
    """A named partition of the judgments for one query.

    Entries are kept sorted by docno so the alignment engine can merge them
    against the retrieved list in a single pass.
    """

    name: str
    entries: tuple[JudgmentEntry, ...] = ()
    qid: str = ""

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.entries, key=lambda e: e.docno))
        for prev, cur in zip(ordered, ordered[1:]):
            if prev.docno == cur.docno:
                raise DuplicateDocumentError(
                    self.qid, cur.docno, where=f"judgment group '{self.name}'"
                )
        object.__setattr__(self, "entries", ordered)

    @property
    def max_level(self) -> int:
        """Highest assigned level, 0 when nothing is judged."""
        return max((e.level for e in self.entries if e.level is not None), default=0)


@dataclass(frozen=True)
class QueryResults:
    """All retrieved items for one query."""

    qid: str
    items: tuple[RetrievedItem, ...] = ()
    run_id: str | None = None
    format: str = RESULTS_FORMAT


@dataclass(frozen=True)
class QueryJudgments:
    """All judgment groups for one query."""

    qid: str
    groups: tuple[JudgmentGroup, ...] = ()
    format: str = QRELS_JG_FORMAT


@dataclass
class RunResults:
    """A complete run: every query's results, ordered by query id.

    Attributes:
        queries: Per-query results, sorted by ``qid``.
        run_id: Run tag taken from the last line of the results file.
        source_path: Filesystem path or identifier.
        line_count: Number of non-blank lines parsed.
    """

    queries: list[QueryResults] = field(default_factory=list)
    run_id: str | None = None
    source_path: str | None = None
    line_count: int = 0
