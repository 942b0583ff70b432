# markerinject/engine/insert.py
from __future__ import annotations

import logging
from typing import Any

from markerinject.core import (
    InvalidPlacementConfig,
    InvalidSignal,
    PlacementConfig,
    Signal,
    parse_segment_spec,
)

from .clamp import clamp_positions, limits_to_samples
from .gate import gate_intervals
from .merger import EventMerger
from .placer import effective_count, place_markers
from .resolver import resolve_intervals, resolve_template

logger = logging.getLogger(__name__)


def insert_markers(
    signal: Signal,
    segment: Any = None,
    config: PlacementConfig | None = None,
    **options: Any,
) -> Signal:
    """
    Return a copy of `signal` with markers inserted into the given segments.

    Parameters
    ----------
    signal:
        Continuous recording whose events anchor the segments.
    segment:
        Segment specification, either a SegmentSpec instance or any form
        accepted by `parse_segment_spec` (default: the whole recording).
    config:
        Placement options. Alternatively pass them as keyword arguments
        (inserted_event=..., count=..., placement=..., ...).

    The input signal is left untouched. The returned event list is sorted
    by latency.
    """
    if not isinstance(signal, Signal):
        raise InvalidSignal(f"insert_markers() expects a Signal, got {type(signal).__name__}.")
    if config is None:
        try:
            config = PlacementConfig(**options)
        except TypeError as e:
            raise InvalidPlacementConfig(str(e)) from e
    elif options:
        raise InvalidPlacementConfig("Pass either a PlacementConfig or keyword options, not both.")

    spec = parse_segment_spec(segment)
    template = resolve_template(spec, config.inserted_event, signal)
    sample_limits = limits_to_samples(config.limits, signal)
    # One generator per call; draws are consumed in interval order.
    rng = config.make_rng() if config.is_random else None

    intervals = resolve_intervals(spec, signal)
    kept = gate_intervals(intervals, signal.srate, config.min_length, config.max_length)

    merger = EventMerger(signal)
    n_samples = signal.n_samples
    for ival in kept:
        count = effective_count(ival.start, ival.end, config.count, config.counting, signal.srate)
        positions = place_markers(ival.start, ival.end, count, config.placement, rng)
        latencies = clamp_positions(positions, sample_limits, n_samples)
        added = merger.add(template, latencies)
        logger.debug(
            "interval [%g, %g]: placed %d, kept %d after limits", ival.start, ival.end, count, added
        )

    logger.info(
        "%s: inserted %d '%s' markers into %d of %d intervals",
        spec.kind, len(merger), template.type, len(kept), len(intervals),
    )
    return merger.merge()
