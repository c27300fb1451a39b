"""Gain table builder.

Gains default to the relevance level itself. Overrides are ``level=gain``
pairs, e.g. ``"1=3.5,2=9.0,4=7.0"`` gives gains 3.5, 9.0, 3.0, 7.0 for levels
1 to 4 (level 3 keeps its default). Gains may be zero or negative, and level 0
may be given a gain.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from releval.alignment.schemas import AlignmentResult
from releval.errors import MalformedGainOverrideError
from releval.gains.schemas import GainEntry, GainTable

logger = logging.getLogger(__name__)

GainOverride = tuple[int, float]


def parse_gain_overrides(text: str | None) -> list[GainOverride]:
    """Parse ``"1=3.5,2=9.0"`` into ``[(1, 3.5), (2, 9.0)]``."""
    if not text:
        return []
    pairs: list[tuple[str, str]] = []
    for part in text.split(","):
        level, sep, gain = part.partition("=")
        if not sep:
            raise MalformedGainOverrideError(f"Gain override '{part}' is not of the form level=gain")
        pairs.append((level.strip(), gain.strip()))
    return normalize_overrides(pairs)


def normalize_overrides(
    pairs: Iterable[tuple[int | str, float | str]] | Mapping[int, float],
) -> list[GainOverride]:
    """Coerce raw (level, gain) pairs, rejecting non-numeric values.

    A level given twice keeps its last gain; first-seen order is preserved.
    """
    if isinstance(pairs, Mapping):
        pairs = pairs.items()
    overrides: dict[int, float] = {}
    for raw_level, raw_gain in pairs:
        if isinstance(raw_level, bool):
            raise MalformedGainOverrideError(f"Gain override level {raw_level!r} is not an integer")
        try:
            level = int(raw_level)
        except (TypeError, ValueError):
            raise MalformedGainOverrideError(
                f"Gain override level {raw_level!r} is not an integer"
            ) from None
        if isinstance(raw_level, float) and raw_level != level:
            raise MalformedGainOverrideError(f"Gain override level {raw_level!r} is not an integer")
        if level < 0:
            raise MalformedGainOverrideError(f"Gain override level {level} is negative")
        try:
            gain = float(raw_gain)
        except (TypeError, ValueError):
            raise MalformedGainOverrideError(
                f"Gain {raw_gain!r} for level {level} is not a number"
            ) from None
        overrides[level] = gain
    return list(overrides.items())


def build_gain_table(
    levels: Sequence[int],
    max_level: int,
    overrides: Iterable[tuple[int | str, float | str]] | Mapping[int, float] = (),
) -> GainTable:
    """Build the gain table for one judgment group.

    Args:
        levels: Level histogram from the alignment (count per level).
        max_level: Highest level to take from the histogram.
        overrides: Explicit (level, gain) settings.

    Returns:
        A ``GainTable`` sorted by ascending gain. Override levels always get an
        entry; other levels only when the histogram has documents there.
    """
    pairs = normalize_overrides(overrides)
    counts = {level: 0 for level, _ in pairs}
    gains = dict(pairs)

    for level in range(min(max_level + 1, len(levels))):
        if level in counts:
            counts[level] = levels[level]
        elif levels[level] > 0:
            counts[level] = levels[level]
            gains[level] = float(level)

    entries = sorted(
        (GainEntry(level=level, gain=gains[level], count=counts[level]) for level in counts),
        key=lambda e: e.gain,
    )
    table = GainTable(entries=tuple(entries), total_count=sum(e.count for e in entries))
    logger.debug("Gain table: %s", [(e.level, e.gain, e.count) for e in entries])
    return table


def gain_table_for(
    result: AlignmentResult,
    overrides: Iterable[tuple[int | str, float | str]] | Mapping[int, float] = (),
) -> GainTable:
    """Build the gain table from an alignment result's histogram."""
    return build_gain_table(result.levels, result.num_rel_levels - 1, overrides)
