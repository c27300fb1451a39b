"""Data models for aligned relevance output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CategoryKind(StrEnum):
    """How a retrieved document relates to a judgment group."""

    LEVEL = "level"
    NON_POOL = "nonpool"
    UNJUDGED = "unjudged"


@dataclass(frozen=True)
class RelevanceCategory:
    """Relevance of one retrieved document w.r.t. one judgment group.

    Either a judged level (``kind == LEVEL``, ``level >= 0``), or one of the
    two unjudged kinds, which never carry a level.
    """

    kind: CategoryKind
    level: int | None = None

    def __post_init__(self) -> None:
        if self.kind is CategoryKind.LEVEL:
            if self.level is None or self.level < 0:
                raise ValueError(f"Judged category needs a level >= 0, got {self.level}")
        elif self.level is not None:
            raise ValueError(f"{self.kind} category cannot carry a level")

    @classmethod
    def judged(cls, level: int) -> RelevanceCategory:
        return cls(CategoryKind.LEVEL, level)

    @property
    def is_judged(self) -> bool:
        return self.kind is CategoryKind.LEVEL

    def is_relevant(self, threshold: int) -> bool:
        """True for a judged level at or above ``threshold``."""
        return self.level is not None and self.level >= threshold

    def __str__(self) -> str:
        return str(self.level) if self.is_judged else self.kind.value


NON_POOL = RelevanceCategory(CategoryKind.NON_POOL)
UNJUDGED = RelevanceCategory(CategoryKind.UNJUDGED)


@dataclass(frozen=True)
class RankedItem:
    """A retrieved document after the total order has been imposed.

    ``rank`` is 1-based. In judged-docs-only mode it is the compacted rank
    among judged documents.
    """

    docno: str
    score: float
    rank: int
    category: RelevanceCategory


@dataclass(frozen=True)
class AlignmentResult:
    """Outcome of aligning one query's results against one judgment group.

    Attributes:
        group: Judgment group name.
        items: Ranked items in rank order; ``items[i].rank == i + 1``.
        levels: Histogram of judged levels (retrieved or not), indexed by level.
        num_ret: Number of retrieved documents kept.
        num_rel: Judged documents at or above the relevance threshold.
        num_rel_ret: Retrieved documents at or above the relevance threshold.
        num_nonpool: Retrieved documents without a judgment entry.
        num_unjudged_in_pool: Retrieved documents in the pool but unjudged.
        num_rel_levels: One plus the highest level with a non-zero count.
        relevance_threshold: Minimum level counted as relevant.
    """

    group: str
    items: tuple[RankedItem, ...]
    levels: tuple[int, ...]
    num_ret: int
    num_rel: int
    num_rel_ret: int
    num_nonpool: int
    num_unjudged_in_pool: int
    num_rel_levels: int
    relevance_threshold: int

    @property
    def categories(self) -> tuple[RelevanceCategory, ...]:
        """Relevance-category vector; index is rank - 1."""
        return tuple(item.category for item in self.items)


@dataclass(frozen=True)
class QueryAlignment:
    """Per-group alignment results for one query, in judgment group order."""

    qid: str
    groups: tuple[AlignmentResult, ...]

    def group(self, name: str) -> AlignmentResult:
        for result in self.groups:
            if result.group == name:
                return result
        available = [r.group for r in self.groups]
        raise KeyError(f"No judgment group '{name}' for query '{self.qid}'. Available: {available}")
