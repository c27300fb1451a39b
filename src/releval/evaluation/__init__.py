"""Evaluation — scoring formulas, measure registry, run harness."""

from releval.evaluation.factory import available_measures, compute_measure, get_measure
from releval.evaluation.gain_metrics import ndcg, ndcg_rel
from releval.evaluation.retrieval_metrics import map_at_cutoffs, precision_at_cutoffs
from releval.evaluation.runner import EvalRunner
from releval.evaluation.schemas import EvalReport, MeasureSpec, QueryEvaluation

__all__ = [
    "EvalReport",
    "EvalRunner",
    "MeasureSpec",
    "QueryEvaluation",
    "available_measures",
    "compute_measure",
    "get_measure",
    "map_at_cutoffs",
    "ndcg",
    "ndcg_rel",
    "precision_at_cutoffs",
]
