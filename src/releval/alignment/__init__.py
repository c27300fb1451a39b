"""Alignment — rank retrieved documents and classify them against judgments."""

from releval.alignment.engine import EvaluationSession, ScratchBuffers, align, align_query
from releval.alignment.schemas import (
    NON_POOL,
    UNJUDGED,
    AlignmentResult,
    CategoryKind,
    QueryAlignment,
    RankedItem,
    RelevanceCategory,
)

__all__ = [
    "NON_POOL",
    "UNJUDGED",
    "AlignmentResult",
    "CategoryKind",
    "EvaluationSession",
    "QueryAlignment",
    "RankedItem",
    "RelevanceCategory",
    "ScratchBuffers",
    "align",
    "align_query",
]
