# markerinject/engine/gate.py
from __future__ import annotations

import logging
import math
from typing import Iterable

from .resolver import Interval

logger = logging.getLogger(__name__)


def passes_length_bounds(
    interval: Interval,
    srate: float,
    min_length: float = 0.0,
    max_length: float = math.inf,
) -> bool:
    """True if the interval is not reversed and its duration lies in [min_length, max_length]."""
    if interval.end < interval.start:
        return False
    duration = interval.duration(srate)
    return min_length <= duration <= max_length


def gate_intervals(
    intervals: Iterable[Interval],
    srate: float,
    min_length: float = 0.0,
    max_length: float = math.inf,
) -> list[Interval]:
    """Keep the intervals that pass the length bounds, order preserved."""
    kept: list[Interval] = []
    for ival in intervals:
        if passes_length_bounds(ival, srate, min_length, max_length):
            kept.append(ival)
        else:
            logger.debug(
                "dropping interval [%g, %g] (%.6g s outside [%g, %g])",
                ival.start, ival.end, ival.duration(srate), min_length, max_length,
            )
    return kept
