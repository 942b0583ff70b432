# markerinject/engine/placer.py
from __future__ import annotations

import numpy as np

from markerinject.core import InvalidPlacementConfig, PlacementError


def round_half_away(x) -> np.ndarray:
    """Round to the nearest integer, halves away from zero (np.round rounds halves to even)."""
    x = np.asarray(x, dtype=float)
    return np.sign(x) * np.floor(np.abs(x) + 0.5)


def effective_count(lo: float, hi: float, count: float, counting: str, srate: float) -> int:
    """
    Number of markers for the interval [lo, hi] (sample units).

    counting:
      - "perinterval": count as given
      - "persecond": count per second of interval length, at least one
    """
    if counting == "perinterval":
        return int(count)
    if counting == "persecond":
        return max(1, int(round_half_away(count * (hi - lo) / srate)))
    raise InvalidPlacementConfig(f"Unsupported counting scheme {counting!r}.")


def place_markers(
    lo: float,
    hi: float,
    count: int,
    placement: str,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """
    Sample positions of `count` markers within [lo, hi], rounded to whole samples.

    placement:
      - "equidistant": evenly spaced from lo to hi inclusive (a single marker sits at lo)
      - "random": uniform draws from `rng`; a reversed interval yields no markers
    A zero-length interval places every marker at lo.
    """
    if placement == "equidistant":
        if hi < lo:
            raise PlacementError(f"Reversed interval [{lo}, {hi}] reached the placer.")
        if hi > lo:
            positions = np.linspace(lo, hi, count)
        else:
            positions = np.full(count, lo, dtype=float)
    elif placement == "random":
        if hi < lo:
            return np.empty(0)
        if hi > lo:
            if rng is None:
                raise PlacementError("Random placement requires a random generator.")
            positions = lo + rng.random(count) * (hi - lo)
        else:
            positions = np.full(count, lo, dtype=float)
    else:
        raise InvalidPlacementConfig(f"Unsupported placement scheme {placement!r}.")
    return round_half_away(positions)
