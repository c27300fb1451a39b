"""Measure factory — registry, lazy import, function cache."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable

from releval.alignment.schemas import AlignmentResult
from releval.evaluation.schemas import Aggregate, MeasureSpec

logger = logging.getLogger(__name__)

MeasureFn = Callable[[AlignmentResult, str | None], dict[str, float | None]]

# ---------------------------------------------------------------------------
# Measure registry: (name, module_path, function_name, aggregate, description)
# ---------------------------------------------------------------------------

_RETRIEVAL = "releval.evaluation.retrieval_metrics"
_GAIN = "releval.evaluation.gain_metrics"

_MEASURE_REGISTRY: list[tuple[str, str, str, Aggregate, str]] = [
    ("num_ret", _RETRIEVAL, "num_ret_measure", Aggregate.SUM,
     "Number of documents retrieved"),
    ("num_rel", _RETRIEVAL, "num_rel_measure", Aggregate.SUM,
     "Number of relevant documents judged"),
    ("num_rel_ret", _RETRIEVAL, "num_rel_ret_measure", Aggregate.SUM,
     "Number of relevant documents retrieved"),
    ("P", _RETRIEVAL, "precision_measure", Aggregate.MEAN,
     "Precision at cutoffs (params: k1,k2,...)"),
    ("map_cut", _RETRIEVAL, "map_cut_measure", Aggregate.MEAN,
     "Mean average precision at cutoffs (params: k1,k2,...)"),
    ("ndcg_p", _GAIN, "ndcg_p_measure", Aggregate.MEAN,
     "Normalized discounted cumulative gain (params: level=gain,...)"),
    ("ndcg_rel", _GAIN, "ndcg_rel_measure", Aggregate.MEAN,
     "nDCG averaged over relevant documents (params: level=gain,...)"),
]

_measure_cache: dict[str, MeasureFn] = {}


def get_measure(name: str) -> MeasureFn:
    """Get a measure implementation by name.

    Returns:
        A callable ``(alignment_result, params) -> {output_name: value}``.
    """
    if name in _measure_cache:
        return _measure_cache[name]

    for reg_name, module_path, fn_name, _, _ in _MEASURE_REGISTRY:
        if reg_name == name:
            mod = importlib.import_module(module_path)
            fn = getattr(mod, fn_name)
            _measure_cache[name] = fn
            return fn

    available = available_measures()
    raise ValueError(f"Unknown measure '{name}'. Available: {available}")


def aggregate_for(name: str) -> Aggregate:
    for reg_name, _, _, aggregate, _ in _MEASURE_REGISTRY:
        if reg_name == name:
            return aggregate
    raise ValueError(f"Unknown measure '{name}'. Available: {available_measures()}")


def compute_measure(spec: MeasureSpec, result: AlignmentResult) -> dict[str, float | None]:
    """Evaluate one measure spec against one alignment result."""
    return get_measure(spec.name)(result, spec.params)


def available_measures() -> list[str]:
    """Return names of registered measures."""
    return [name for name, _, _, _, _ in _MEASURE_REGISTRY]


def describe_measures() -> list[tuple[str, str]]:
    """Return (name, description) for every registered measure."""
    return [(name, desc) for name, _, _, _, desc in _MEASURE_REGISTRY]


def clear_cache() -> None:
    """Clear the function cache (for testing)."""
    _measure_cache.clear()
