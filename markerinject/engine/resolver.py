# markerinject/engine/resolver.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from markerinject.core import (
    AbsoluteRange,
    Event,
    InvalidPlacementConfig,
    InvalidSegmentSpec,
    RelativeRange,
    SegmentSpec,
    Signal,
    SpannedRange,
    make_template,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Interval:
    """Candidate insertion interval in sample units; `anchor` is the index of the reference event."""
    start: float
    end: float
    anchor: int | None = None

    @property
    def length(self) -> float:
        return self.end - self.start

    def duration(self, srate: float) -> float:
        """Length in seconds."""
        return self.length / srate


def default_event_type(spec: SegmentSpec) -> str | None:
    """Type name used for inserted markers when the caller gives none."""
    if isinstance(spec, RelativeRange):
        return f"{spec.event_type}_i"
    if isinstance(spec, SpannedRange):
        return f"{spec.open_type}_{spec.close_type}"
    return None


def resolve_template(
    spec: SegmentSpec,
    inserted_event: str | Event | Mapping[str, Any] | None,
    signal: Signal,
) -> Event:
    """Template event for the inserted markers, falling back to the segment's default type."""
    if inserted_event is None or inserted_event == "":
        inserted_event = default_event_type(spec)
        if inserted_event is None:
            raise InvalidPlacementConfig(
                "An inserted event type must be specified for absolute ranges."
            )
    return make_template(inserted_event, signal.events)


def _absolute(spec: AbsoluteRange, signal: Signal) -> list[Interval]:
    lo = signal.first_sample if spec.lo == -math.inf else signal.seconds_to_samples(spec.lo)
    if spec.hi == math.inf:
        hi = signal.last_sample
    elif spec.hi < 0:
        # negative upper bound counts backward from the end of the recording
        hi = signal.last_sample + signal.seconds_to_samples(spec.hi)
    else:
        hi = signal.seconds_to_samples(spec.hi)
    return [Interval(lo, hi)]


def _relative(spec: RelativeRange, signal: Signal) -> list[Interval]:
    lo = signal.seconds_to_samples(spec.lo)
    hi = signal.seconds_to_samples(spec.hi)
    return [
        Interval(ev.latency + lo, ev.latency + hi, anchor=i)
        for i, ev in enumerate(signal.events)
        if ev.type == spec.event_type
    ]


def _spanned(spec: SpannedRange, signal: Signal) -> list[Interval]:
    lo = signal.seconds_to_samples(spec.lo)
    hi = signal.seconds_to_samples(spec.hi)
    events = signal.events
    types = signal.event_types

    opens = [i for i, t in enumerate(types) if t == spec.open_type]
    # Each open searches up to the next open; the last one up to the end of the list.
    bounds = opens[1:] + [len(types)]

    out: list[Interval] = []
    for k, stop in zip(opens, bounds):
        close = next((j for j in range(k + 1, stop) if types[j] == spec.close_type), None)
        if close is None:
            logger.debug("open event #%d (%s) has no matching close event", k + 1, spec.open_type)
            continue
        if not spec.inner_types_allowed(types[k + 1:close]):
            logger.debug(
                "span #%d..#%d rejected: inner event types %s", k + 1, close + 1, types[k + 1:close]
            )
            continue
        out.append(Interval(events[k].latency + lo, events[close].latency + hi, anchor=k))
    return out


def resolve_intervals(spec: SegmentSpec, signal: Signal) -> list[Interval]:
    """
    Turn a segment specification into candidate intervals (sample units).

    Intervals come out in processing order: event occurrence order for
    relative ranges, open-event order for spanned ranges.
    """
    if isinstance(spec, AbsoluteRange):
        return _absolute(spec, signal)
    if isinstance(spec, RelativeRange):
        return _relative(spec, signal)
    if isinstance(spec, SpannedRange):
        return _spanned(spec, signal)
    raise InvalidSegmentSpec(f"Unsupported segment specification {spec!r}.")
