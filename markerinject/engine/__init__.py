# markerinject/engine/__init__.py
"""
Marker insertion pipeline.

resolve_intervals -> gate_intervals -> effective_count / place_markers
-> clamp_positions -> EventMerger, driven by insert_markers().
"""

from .resolver import Interval, default_event_type, resolve_intervals, resolve_template
from .gate import gate_intervals, passes_length_bounds
from .placer import effective_count, place_markers, round_half_away
from .clamp import clamp_positions, limits_to_samples
from .merger import EventMerger, reconcile_urevents
from .insert import insert_markers


__all__ = [
    # resolution
    "Interval",
    "default_event_type",
    "resolve_intervals",
    "resolve_template",

    # gating / placement
    "gate_intervals",
    "passes_length_bounds",
    "effective_count",
    "place_markers",
    "round_half_away",
    "clamp_positions",
    "limits_to_samples",

    # merging
    "EventMerger",
    "reconcile_urevents",

    # top level
    "insert_markers",
]
