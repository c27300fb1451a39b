"""Data models for gain tables."""

from __future__ import annotations

from dataclasses import dataclass

from releval.alignment.schemas import RelevanceCategory


@dataclass(frozen=True)
class GainEntry:
    """One relevance level, its gain and how many judged documents carry it."""

    level: int
    gain: float
    count: int = 0


@dataclass(frozen=True)
class GainTable:
    """Gain entries sorted by ascending gain, unique by level."""

    entries: tuple[GainEntry, ...]
    total_count: int

    def gain_for(self, category: RelevanceCategory) -> float:
        """Gain credited for a category; 0.0 for unjudged or unlisted levels."""
        if category.level is None:
            return 0.0
        for entry in self.entries:
            if entry.level == category.level:
                return entry.gain
        return 0.0

    @property
    def levels(self) -> tuple[int, ...]:
        return tuple(entry.level for entry in self.entries)
