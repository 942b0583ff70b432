# markerinject/engine/merger.py
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from markerinject.core import BackReferenceError, Event, Signal, instantiate

logger = logging.getLogger(__name__)


def reconcile_urevents(
    events: Sequence[Event],
    was_trivial: bool,
) -> tuple[tuple[Event, ...], tuple[Event, ...]]:
    """
    Rebuild an identity back-reference table over `events`.

    Returns (events, urevents) where every event points at its own 1-based
    position. Raises BackReferenceError if the table was not trivial before
    the run, since it cannot be extended consistently then.
    """
    if not was_trivial:
        raise BackReferenceError(
            "the urevent table is not an identity mapping over the events"
        )
    urevents = tuple(ev.with_urevent(None) for ev in events)
    renumbered = tuple(ev.with_urevent(i) for i, ev in enumerate(events, start=1))
    return renumbered, urevents


class EventMerger:
    """
    Accumulates inserted markers for one Signal and merges them back.

    Markers are appended in interval-processing order; `merge()` sorts the
    combined list by latency and reconciles back-references.
    """

    def __init__(self, signal: Signal):
        self.signal = signal
        self._was_trivial = signal.has_trivial_urevents()
        self._added: list[Event] = []

    def __len__(self) -> int:
        return len(self._added)

    @property
    def added(self) -> tuple[Event, ...]:
        return tuple(self._added)

    def add(self, template: Event, latencies: Iterable[float]) -> int:
        new = instantiate(template, latencies)
        self._added.extend(new)
        return len(new)

    def merge(self) -> Signal:
        events = sorted(self.signal.events + tuple(self._added), key=lambda ev: ev.latency)
        urevents = None
        try:
            events, urevents = reconcile_urevents(events, self._was_trivial)
        except BackReferenceError as e:
            if self._added:
                logger.warning("Could not update the urevent table, skipping... (%s)", e)
        return self.signal.with_events(events, urevents=urevents)
