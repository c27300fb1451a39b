"""Retrieval quality metrics over an aligned relevance vector — counts, P@k, MAP@k."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from releval.alignment.schemas import AlignmentResult

DEFAULT_CUTOFFS = (5, 10, 15, 20, 30, 100, 200, 500, 1000)

MeasureValues = dict[str, float | None]


def validate_cutoffs(cutoffs: Iterable[int]) -> tuple[int, ...]:
    """Return cutoffs in ascending order; they must be positive and unique."""
    values = list(cutoffs)
    if any(k <= 0 for k in values):
        raise ValueError(f"Cutoffs must be positive, got {values}")
    if len(set(values)) != len(values):
        raise ValueError(f"Cutoffs must not repeat, got {values}")
    return tuple(sorted(values))


def parse_cutoffs(text: str | None) -> tuple[int, ...]:
    """Parse ``"5,10,20"``; ``None`` or empty gives the default cutoffs."""
    if not text:
        return DEFAULT_CUTOFFS
    try:
        values = [int(part) for part in text.split(",")]
    except ValueError:
        raise ValueError(f"Cutoffs must be integers, got '{text}'") from None
    return validate_cutoffs(values)


def _relevant_flags(result: AlignmentResult) -> list[bool]:
    threshold = result.relevance_threshold
    return [item.category.is_relevant(threshold) for item in result.items]


def precision_at_cutoffs(
    result: AlignmentResult,
    cutoffs: Sequence[int] = DEFAULT_CUTOFFS,
) -> dict[int, float]:
    """Precision@k for each cutoff.

    A cutoff deeper than the retrieved list counts the missing positions as
    non-relevant.
    """
    flags = _relevant_flags(result)
    return {k: sum(flags[:k]) / k for k in validate_cutoffs(cutoffs)}


def map_at_cutoffs(
    result: AlignmentResult,
    cutoffs: Sequence[int] = DEFAULT_CUTOFFS,
) -> dict[int, float | None]:
    """Average precision truncated at each cutoff.

    Precision is taken after each relevant document within the cutoff and
    summed, then divided by the number of relevant documents for the query.
    Undefined when the query has no relevant documents.
    """
    cutoffs = validate_cutoffs(cutoffs)
    if result.num_rel == 0:
        return {k: None for k in cutoffs}

    # sums[n] is the precision sum over the first n ranks
    sums = [0.0]
    rel_so_far = 0
    for i, relevant in enumerate(_relevant_flags(result)):
        total = sums[-1]
        if relevant:
            rel_so_far += 1
            total += rel_so_far / (i + 1)
        sums.append(total)

    depth = len(sums) - 1
    return {k: sums[min(k, depth)] / result.num_rel for k in cutoffs}


# ---------------------------------------------------------------------------
# Registry adapters: (result, params) -> {output name: value}
# ---------------------------------------------------------------------------


def num_ret_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    return {"num_ret": float(result.num_ret)}


def num_rel_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    return {"num_rel": float(result.num_rel)}


def num_rel_ret_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    return {"num_rel_ret": float(result.num_rel_ret)}


def precision_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    values = precision_at_cutoffs(result, parse_cutoffs(params))
    return {f"P_{k}": v for k, v in values.items()}


def map_cut_measure(result: AlignmentResult, params: str | None = None) -> MeasureValues:
    values = map_at_cutoffs(result, parse_cutoffs(params))
    return {f"map_cut_{k}": v for k, v in values.items()}
