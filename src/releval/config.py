"""Application settings loaded from YAML with a profile override."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------

DEFAULT_MEASURES = [
    "num_ret",
    "num_rel",
    "num_rel_ret",
    "P",
    "map_cut",
    "ndcg_p",
    "ndcg_rel",
]


class AlignmentSettings(BaseModel):
    max_items_per_query: int = Field(default=sys.maxsize, gt=0)
    relevance_threshold: int = Field(default=1, ge=0)
    judged_docs_only: bool = False


class EvaluationSettings(BaseModel):
    measures: list[str] = Field(default_factory=lambda: list(DEFAULT_MEASURES))
    per_query: bool = False


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    alignment: AlignmentSettings = Field(default_factory=AlignmentSettings)
    evaluation: EvaluationSettings = Field(default_factory=EvaluationSettings)


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("RELEVAL_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML, falling back to defaults when none is found.

    An explicit ``path`` must exist; only the cwd walk-up may come back empty.

    Raises:
        FileNotFoundError: ``path`` was given but does not exist.
        ValueError: The file's top level is not a mapping.
        pydantic.ValidationError: A setting is out of range.
    """
    if path is None:
        found = _find_settings_file()
        if found is None:
            return Settings()
        path = found
    else:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Settings file not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(raw).__name__}")

    logger.debug("Loaded settings from %s", path)
    return Settings(**raw)
