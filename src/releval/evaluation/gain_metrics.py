"""Cumulative-gain metrics — nDCG over the full ranking and nDCG averaged at relevant docs.

Both take their gains from a ``GainTable`` built from the query's level
histogram, so per-level gain overrides (``"1=3.5,2=9.0"``) apply to the ideal
and the achieved ranking alike.
"""

from __future__ import annotations

import logging

from releval.alignment.schemas import AlignmentResult
from releval.evaluation.retrieval_metrics import MeasureValues
from releval.gains.curves import achieved_gains, dcg_curve, final_value, ideal_dcg_curve
from releval.gains.schemas import GainTable
from releval.gains.table import gain_table_for, parse_gain_overrides

logger = logging.getLogger(__name__)

# ndcg_rel discounts every position by log2(i + 2)
REL_DISCOUNT_OFFSET = 2


def ndcg(result: AlignmentResult, table: GainTable) -> float | None:
    """Achieved DCG over the whole retrieved list divided by the ideal DCG.

    Returns:
        ``None`` when the ideal DCG is zero (no positive-gain documents),
        0.0 when nothing relevant was retrieved.
    """
    ideal = final_value(ideal_dcg_curve(table))
    if ideal <= 0.0:
        return None
    if result.num_rel_ret == 0:
        return 0.0
    achieved = final_value(dcg_curve(achieved_gains(result.categories, table)))
    return achieved / ideal


def ndcg_rel(result: AlignmentResult, table: GainTable) -> float | None:
    """nDCG averaged over relevant documents.

    Unlike ``ndcg``, position ``i`` is discounted by ``log2(i + 2)`` on both
    the achieved and the ideal side, so only rank 0 carries full weight.
    nDCG is sampled at every retrieved document with positive gain. Each
    positive-gain document that was never retrieved contributes the final
    achieved/ideal ratio. The sum is divided by the number of positive-gain
    documents in the ideal ranking.

    Returns:
        ``None`` when the ideal DCG is zero.
    """
    ideal_curve = ideal_dcg_curve(table, REL_DISCOUNT_OFFSET)
    num_rel = len(ideal_curve)
    if num_rel == 0:
        return None

    gains = achieved_gains(result.categories, table)
    achieved_curve = dcg_curve(gains, REL_DISCOUNT_OFFSET)

    total = 0.0
    num_rel_ret = 0
    for i, gain in enumerate(gains):
        if gain > 0.0:
            # Past the end of the ideal ranking the ideal DCG stays frozen
            total += float(achieved_curve[i] / ideal_curve[min(i, num_rel - 1)])
            num_rel_ret += 1

    missing = max(num_rel - num_rel_ret, 0)
    total += missing * final_value(achieved_curve) / float(ideal_curve[-1])
    logger.debug("ndcg_rel: num_rel=%d num_rel_ret=%d sum=%.4f", num_rel, num_rel_ret, total)
    return total / num_rel if total > 0.0 else 0.0


# ---------------------------------------------------------------------------
# Registry adapters
# ---------------------------------------------------------------------------


def ndcg_p_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    table = gain_table_for(result, parse_gain_overrides(params))
    return {"ndcg_p": ndcg(result, table)}


def ndcg_rel_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    table = gain_table_for(result, parse_gain_overrides(params))
    return {"ndcg_rel": ndcg_rel(result, table)}
