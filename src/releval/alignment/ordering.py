"""Sort orders used by the alignment engine.

Each order is a key function so it can be tested on its own:

- ``rank_order_key`` with ``reverse=True``: descending score, exact ties
  broken by descending docno (``"d2"`` ranks ahead of ``"d1"``).
- ``docno_key``: ascending docno, the order judgments are stored in.
- ``judged_rank_key``: judged documents first in rank order, then everything
  else.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from releval.alignment.schemas import RelevanceCategory


class _Scored(Protocol):
    docno: str
    score: float


class _Ranked(Protocol):
    rank: int
    category: RelevanceCategory


T = TypeVar("T", bound=_Scored)


def rank_order_key(item: _Scored) -> tuple[float, str]:
    """Key for ranking; use with ``reverse=True``."""
    return (item.score, item.docno)


def in_rank_order(items: Iterable[T]) -> list[T]:
    """Return ``items`` sorted into the deterministic retrieval order."""
    return sorted(items, key=rank_order_key, reverse=True)


def docno_key(item: _Scored) -> str:
    return item.docno


def judged_rank_key(item: _Ranked) -> tuple[int, int]:
    """Judged documents first by rank; unjudged ones compare equal."""
    if item.category.is_judged:
        return (0, item.rank)
    return (1, 0)
