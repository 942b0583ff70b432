# markerinject/io/load.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import numpy as np
from asammdf import MDF

from markerinject.core import Event, InvalidSignal, Signal

logger = logging.getLogger(__name__)


def _iter_all_channels(mdf: MDF) -> Iterable[tuple[str, np.ndarray, np.ndarray]]:
    for group_index, group in enumerate(mdf.groups):
        for channel_index, channel in enumerate(group.channels):
            sig = mdf.get(group=group_index, index=channel_index)
            t = np.asarray(sig.timestamps)
            v = np.asarray(sig.samples)
            # master (time) channels carry their own timestamps as samples
            if t.shape == v.shape and np.array_equal(t, v):
                continue
            yield channel.name, t, v


def _iter_named_channels(mdf: MDF, names: Iterable[str]) -> Iterable[tuple[str, np.ndarray, np.ndarray]]:
    for name in names:
        sig = mdf.get(name)
        yield name, np.asarray(sig.timestamps), np.asarray(sig.samples)


def _sample_rate(t: np.ndarray) -> float:
    if t.size < 2:
        raise InvalidSignal("At least two timestamps are needed to infer the sampling rate.")
    step = float(np.median(np.diff(t)))
    if not np.isfinite(step) or step <= 0:
        raise InvalidSignal(f"Cannot infer a sampling rate from a median time step of {step}.")
    return 1.0 / step


def load_mdf_signal(
    path: str,
    channels: Iterable[str] | None = None,
    events: Iterable[Event] = (),
) -> Signal:
    """
    Load MDF channels sharing one time base into a continuous Signal.

    channels:
      - None: every non-master channel with the same length as the first one
        (others are skipped with a warning)
      - names: exactly these channels; a length mismatch is an error
    events:
      - initial event list (latencies in samples counted from the first timestamp)
    """
    mdf = MDF(path)
    explicit = channels is not None
    source = _iter_named_channels(mdf, channels) if explicit else _iter_all_channels(mdf)

    names: list[str] = []
    rows: list[np.ndarray] = []
    time: np.ndarray | None = None
    for name, t, v in source:
        if time is None:
            time = t
        elif v.shape != time.shape:
            if explicit:
                raise InvalidSignal(
                    f"Channel '{name}' has {v.size} samples, expected {time.size}."
                )
            logger.warning("skipping channel '%s': %d samples vs %d", name, v.size, time.size)
            continue
        names.append(name)
        rows.append(v.astype(float))

    if time is None:
        raise InvalidSignal(f"No channels to load from {path}.")

    return Signal(
        srate=_sample_rate(time),
        xmin=float(time[0]),
        xmax=float(time[-1]),
        data=np.vstack(rows),
        events=tuple(events),
        name=Path(path).stem,
        attrs={"source": path, "channels": names},
    )
