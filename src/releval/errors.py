"""Error hierarchy for the evaluation engine.

Every error here is fatal for the query being processed: the engine never
hands back a partially aligned relevance vector.
"""

from __future__ import annotations


class EvaluationError(Exception):
    """Base class for all evaluation failures."""


class FormatMismatchError(EvaluationError):
    """Inputs were tagged with an unexpected source format."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected input format '{expected}', got '{actual}'")


class DuplicateDocumentError(EvaluationError):
    """A docno occurs twice where docnos must be unique."""

    def __init__(self, qid: str, docno: str, where: str = "retrieved list"):
        self.qid = qid
        self.docno = docno
        super().__init__(f"Duplicate document '{docno}' in {where} of query '{qid}'")


class ResourceExhaustedError(EvaluationError):
    """Scratch storage could not be grown."""


class MalformedGainOverrideError(EvaluationError, ValueError):
    """A ``level=gain`` override could not be parsed."""


class MalformedInputError(EvaluationError, ValueError):
    """A results or judgments line could not be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
