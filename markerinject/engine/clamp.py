# markerinject/engine/clamp.py
from __future__ import annotations

from typing import Sequence

import numpy as np

from markerinject.core import Signal


def limits_to_samples(limits: Sequence[float], signal: Signal) -> tuple[float, float]:
    """Global placement window (seconds after xmin) clipped to the recording and converted to samples."""
    lims = np.sort(np.clip(np.asarray(limits, dtype=float), 0.0, signal.duration))
    return signal.seconds_to_samples(lims[0]), signal.seconds_to_samples(lims[1])


def clamp_positions(
    positions: np.ndarray,
    sample_limits: tuple[float, float],
    n_samples: int,
) -> np.ndarray:
    """
    Drop positions outside `sample_limits` (inclusive), then clip the rest
    into the physical sample range [1, n_samples].

    Clipping may put several markers on the same boundary sample.
    """
    pos = np.asarray(positions, dtype=float)
    lo, hi = sample_limits
    kept = pos[(pos >= lo) & (pos <= hi)]
    return np.clip(kept, 1, max(n_samples, 1))
