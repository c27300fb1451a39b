"""Gains — gain tables and ideal/achieved cumulative-gain curves."""

from releval.gains.curves import (
    achieved_dcg_curve,
    achieved_gains,
    dcg_curve,
    discount,
    ideal_dcg_curve,
    ideal_gains,
)
from releval.gains.schemas import GainEntry, GainTable
from releval.gains.table import build_gain_table, gain_table_for, parse_gain_overrides

__all__ = [
    "GainEntry",
    "GainTable",
    "achieved_dcg_curve",
    "achieved_gains",
    "build_gain_table",
    "dcg_curve",
    "discount",
    "gain_table_for",
    "ideal_dcg_curve",
    "ideal_gains",
    "parse_gain_overrides",
]
