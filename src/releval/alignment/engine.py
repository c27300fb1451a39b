"""Alignment engine — rank a query's results and classify them against judgments.

For every judgment group of a query the engine produces the ordered
relevance-category vector plus the level histogram and summary counts that
the scoring formulas consume. Results are memoized per query inside an
``EvaluationSession``; asking for a different query replaces the cache.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import takewhile

from releval.alignment.ordering import docno_key, judged_rank_key, rank_order_key
from releval.alignment.schemas import (
    NON_POOL,
    UNJUDGED,
    AlignmentResult,
    CategoryKind,
    QueryAlignment,
    RankedItem,
    RelevanceCategory,
)
from releval.config import AlignmentSettings
from releval.errors import DuplicateDocumentError, FormatMismatchError, ResourceExhaustedError
from releval.runs.schemas import (
    QRELS_JG_FORMAT,
    RESULTS_FORMAT,
    JudgmentEntry,
    JudgmentGroup,
    QueryJudgments,
    QueryResults,
    RetrievedItem,
)

logger = logging.getLogger(__name__)


@dataclass
class _DocSlot:
    """Mutable working record for one retrieved document."""

    docno: str = ""
    score: float = 0.0
    rank: int = 0
    category: RelevanceCategory = NON_POOL


class ScratchBuffers:
    """Reusable working storage, grown to the largest query seen and never shrunk."""

    def __init__(self) -> None:
        self._slots: list[_DocSlot] = []

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def reserve(self, size: int) -> list[_DocSlot]:
        """Return ``size`` working slots, growing the pool if needed."""
        missing = size - len(self._slots)
        if missing > 0:
            try:
                self._slots.extend(_DocSlot() for _ in range(missing))
            except MemoryError as exc:
                raise ResourceExhaustedError(
                    f"Cannot grow scratch buffers to {size} documents"
                ) from exc
            logger.debug("Scratch buffers grown to %d slots", size)
        return self._slots[:size]


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------


def align(
    items: Sequence[RetrievedItem],
    groups: Sequence[JudgmentGroup],
    *,
    max_items_per_query: int = sys.maxsize,
    relevance_threshold: int = 1,
    judged_docs_only: bool = False,
    qid: str = "",
    scratch: ScratchBuffers | None = None,
) -> tuple[AlignmentResult, ...]:
    """Align retrieved items against every judgment group.

    Args:
        items: The query's retrieved (docno, score) pairs, in any order.
        groups: Judgment groups; each is evaluated independently.
        max_items_per_query: Only the top-ranked prefix of this size is kept.
        relevance_threshold: Minimum level counted as relevant.
        judged_docs_only: Drop non-pool and unjudged documents and renumber
            the remaining ranks contiguously.
        qid: Query id, used in error messages.
        scratch: Working storage to reuse across queries.

    Returns:
        One ``AlignmentResult`` per group, in group order.

    Raises:
        DuplicateDocumentError: Two kept items share a docno.
    """
    scratch = scratch or ScratchBuffers()
    slots = scratch.reserve(len(items))
    for slot, item in zip(slots, items):
        slot.docno = item.docno
        slot.score = item.score
        slot.rank = 0
        slot.category = NON_POOL

    slots.sort(key=rank_order_key, reverse=True)
    del slots[max_items_per_query:]
    for rank, slot in enumerate(slots, start=1):
        slot.rank = rank

    slots.sort(key=docno_key)
    for prev, cur in zip(slots, slots[1:]):
        if prev.docno == cur.docno:
            raise DuplicateDocumentError(qid, cur.docno)

    # Histograms share one width across groups
    max_level = max((group.max_level for group in groups), default=0)

    return tuple(
        _align_group(slots, group, max_level, relevance_threshold, judged_docs_only)
        for group in groups
    )


def align_query(
    results: QueryResults,
    judgments: QueryJudgments,
    settings: AlignmentSettings | None = None,
    scratch: ScratchBuffers | None = None,
) -> QueryAlignment:
    """Check input formats and align one query."""
    if results.format != RESULTS_FORMAT:
        raise FormatMismatchError(RESULTS_FORMAT, results.format)
    if judgments.format != QRELS_JG_FORMAT:
        raise FormatMismatchError(QRELS_JG_FORMAT, judgments.format)
    if results.qid != judgments.qid:
        raise ValueError(
            f"Query id mismatch: results for '{results.qid}', judgments for '{judgments.qid}'"
        )

    cfg = settings or AlignmentSettings()
    groups = align(
        results.items,
        judgments.groups,
        max_items_per_query=cfg.max_items_per_query,
        relevance_threshold=cfg.relevance_threshold,
        judged_docs_only=cfg.judged_docs_only,
        qid=results.qid,
        scratch=scratch,
    )
    return QueryAlignment(qid=results.qid, groups=groups)


def _count_level(levels: list[int], entry: JudgmentEntry) -> None:
    if entry.level is not None:
        levels[entry.level] += 1


def _align_group(
    slots: list[_DocSlot],
    group: JudgmentGroup,
    max_level: int,
    threshold: int,
    judged_docs_only: bool,
) -> AlignmentResult:
    # slots are docno-sorted, as are group.entries: merge them in one pass
    levels = [0] * (max_level + 1)
    entries = group.entries
    j = 0
    for slot in slots:
        while j < len(entries) and entries[j].docno < slot.docno:
            _count_level(levels, entries[j])
            j += 1
        if j < len(entries) and entries[j].docno == slot.docno:
            entry = entries[j]
            if entry.level is None:
                slot.category = UNJUDGED
            else:
                slot.category = RelevanceCategory.judged(entry.level)
            _count_level(levels, entry)
            j += 1
        else:
            slot.category = NON_POOL
    for entry in entries[j:]:
        _count_level(levels, entry)

    if judged_docs_only:
        kept = list(
            takewhile(lambda s: s.category.is_judged, sorted(slots, key=judged_rank_key))
        )
    else:
        kept = sorted(slots, key=lambda s: s.rank)

    items = tuple(
        RankedItem(docno=s.docno, score=s.score, rank=rank, category=s.category)
        for rank, s in enumerate(kept, start=1)
    )

    result = AlignmentResult(
        group=group.name,
        items=items,
        levels=tuple(levels),
        num_ret=len(items),
        num_rel=sum(count for level, count in enumerate(levels) if level >= threshold),
        num_rel_ret=sum(1 for item in items if item.category.is_relevant(threshold)),
        num_nonpool=sum(1 for item in items if item.category.kind is CategoryKind.NON_POOL),
        num_unjudged_in_pool=sum(
            1 for item in items if item.category.kind is CategoryKind.UNJUDGED
        ),
        num_rel_levels=max((level + 1 for level, count in enumerate(levels) if count), default=0),
        relevance_threshold=threshold,
    )
    logger.debug(
        "Aligned group %s: ret=%d rel=%d rel_ret=%d nonpool=%d unjudged=%d",
        group.name,
        result.num_ret,
        result.num_rel,
        result.num_rel_ret,
        result.num_nonpool,
        result.num_unjudged_in_pool,
    )
    return result


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class EvaluationSession:
    """Per-run evaluation context: alignment settings, cache and scratch buffers.

    The cache holds a single query. Repeated requests with the same query
    inputs return the stored alignment; any other query replaces it. Sessions
    share nothing, so independent runs never interfere.
    """

    def __init__(self, settings: AlignmentSettings | None = None):
        self.settings = settings or AlignmentSettings()
        self._scratch = ScratchBuffers()
        self._current: QueryAlignment | None = None
        self._inputs: tuple[QueryResults, QueryJudgments] | None = None

    @property
    def current_qid(self) -> str | None:
        return self._current.qid if self._current is not None else None

    @property
    def scratch_capacity(self) -> int:
        return self._scratch.capacity

    def align(self, results: QueryResults, judgments: QueryJudgments) -> QueryAlignment:
        """Align a query, reusing the cached alignment when the inputs are unchanged."""
        if self._current is not None and self._inputs == (results, judgments):
            logger.debug("Alignment cache hit for query %s", results.qid)
            return self._current

        self.clear()
        alignment = align_query(results, judgments, self.settings, scratch=self._scratch)
        self._current = alignment
        self._inputs = (results, judgments)
        return alignment

    def clear(self) -> None:
        """Drop the cached query."""
        self._current = None
        self._inputs = None
