# markerinject/core/__init__.py
"""
Core domain objects for markerinject.

This module defines the data model the insertion engine works on:
- Event: named marker with a latency in sample units
- Signal: continuous recording time base + its event list
- AbsoluteRange / RelativeRange / SpannedRange: segment specifications
- PlacementConfig: how many markers to place, and where

The core layer is independent from I/O and storage formats.
"""

from .event import Event, make_template, instantiate
from .signal import Signal
from .segment_spec import (
    IGNORE_ALL,
    AbsoluteRange,
    RelativeRange,
    SpannedRange,
    SegmentSpec,
    parse_segment_spec,
)
from .config import PlacementConfig, COUNTING_SCHEMES, PLACEMENT_SCHEMES
from .exceptions import (
    CoreError,
    InvalidEvent,
    InvalidSignal,
    EpochedDataError,
    InvalidSegmentSpec,
    InvalidPlacementConfig,
    PlacementError,
    BackReferenceError,
)


__all__ = [
    # events
    "Event",
    "make_template",
    "instantiate",

    # signal
    "Signal",

    # segment specifications
    "IGNORE_ALL",
    "AbsoluteRange",
    "RelativeRange",
    "SpannedRange",
    "SegmentSpec",
    "parse_segment_spec",

    # placement
    "PlacementConfig",
    "COUNTING_SCHEMES",
    "PLACEMENT_SCHEMES",

    # exceptions
    "CoreError",
    "InvalidEvent",
    "InvalidSignal",
    "EpochedDataError",
    "InvalidSegmentSpec",
    "InvalidPlacementConfig",
    "PlacementError",
    "BackReferenceError",
]
