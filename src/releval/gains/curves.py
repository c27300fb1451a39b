"""Ideal and achieved discounted cumulative-gain curves.

Rank positions are 0-based. The gain at position ``i`` is divided by
``log2(i + offset)``, never by less than 1. With the default offset of 1 the
first two positions carry full weight (Jarvelin and Kekalainen, ACM ToIS 20,
2002); an offset of 2 gives the usual ``log2(i + 2)`` discount.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence

import numpy as np

from releval.alignment.schemas import RelevanceCategory
from releval.gains.schemas import GainTable


def discount(rank: int, offset: int = 1) -> float:
    """Discount factor at 0-based rank position ``rank``."""
    return 1.0 / max(math.log2(rank + offset), 1.0)


def _divisors(n: int, offset: int = 1) -> np.ndarray:
    return np.fromiter((1.0 / discount(i, offset) for i in range(n)), dtype=np.float64, count=n)


def dcg_curve(gains: Sequence[float] | np.ndarray, offset: int = 1) -> np.ndarray:
    """Cumulative discounted gain after each rank position."""
    gains = np.asarray(gains, dtype=np.float64)
    return np.cumsum(gains / _divisors(len(gains), offset))


def achieved_gains(categories: Sequence[RelevanceCategory], table: GainTable) -> np.ndarray:
    """Gain of each retrieved document, in rank order."""
    return np.array([table.gain_for(c) for c in categories], dtype=np.float64)


def _walk_ideal(table: GainTable) -> Iterator[float]:
    # Consume entries from the highest gain down, one document per position.
    # Stop for good at the first entry whose gain is not positive.
    entries = table.entries
    cur = len(entries) - 1
    used = 0
    for _ in range(table.total_count):
        used += 1
        while used > entries[cur].count:
            used = 1
            cur -= 1
            if cur < 0 or entries[cur].gain <= 0.0:
                break
        if cur < 0 or entries[cur].gain <= 0.0:
            return
        yield entries[cur].gain


def ideal_gains(table: GainTable) -> np.ndarray:
    """Gains of the best possible ranking, positive gains only."""
    return np.fromiter(_walk_ideal(table), dtype=np.float64)


def achieved_dcg_curve(
    categories: Sequence[RelevanceCategory], table: GainTable, offset: int = 1
) -> np.ndarray:
    return dcg_curve(achieved_gains(categories, table), offset)


def ideal_dcg_curve(table: GainTable, offset: int = 1) -> np.ndarray:
    return dcg_curve(ideal_gains(table), offset)


def final_value(curve: np.ndarray) -> float:
    """Last point of a cumulative curve, 0.0 for an empty one."""
    return float(curve[-1]) if len(curve) else 0.0
