# markerinject/core/signal.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import numpy as np

from .event import Event
from .exceptions import EpochedDataError, InvalidEvent, InvalidSignal


def _scalar_latency(value: Any, index: int) -> float:
    """Validate a single event latency and return it as a float."""
    if value is None:
        raise InvalidEvent(f"Event #{index + 1} has an empty latency. This is not permitted.")
    arr = np.asarray(value)
    if arr.dtype.kind not in "iuf":
        raise InvalidEvent(f"Event #{index + 1} has a non-numeric latency {value!r}.")
    if arr.size == 0:
        raise InvalidEvent(f"Event #{index + 1} has an empty latency. This is not permitted.")
    if arr.size != 1:
        raise InvalidEvent(
            f"Event #{index + 1} has a latency that is not a scalar (size {arr.size}). "
            "This is not permitted."
        )
    lat = float(arr.reshape(()))
    if not np.isfinite(lat):
        raise InvalidEvent(f"Event #{index + 1} has a non-finite latency.")
    return lat


def _normalize_events(events: Iterable[Event | Mapping[str, Any]] | None) -> tuple[Event, ...]:
    if events is None:
        return ()
    if isinstance(events, (str, bytes, Mapping)):
        raise InvalidSignal("Signal.events must be a sequence of events.")

    normalized: list[Event] = []
    for i, ev in enumerate(events):
        if isinstance(ev, Mapping):
            ev = Event.from_mapping(ev, require_fields=True)
        elif not isinstance(ev, Event):
            raise InvalidSignal("Signal.events items must be Event instances or mappings.")
        if ev.type is None:
            raise InvalidEvent(f"Event #{i + 1} is missing the required field 'type'.")
        lat = _scalar_latency(ev.latency, i)
        if not isinstance(ev.latency, float):
            ev = ev.with_latency(lat)
        normalized.append(ev)
    return tuple(normalized)


@dataclass(frozen=True, slots=True)
class Signal:
    """
    Immutable continuous recording: a time base plus its event list.

    - srate: sampling rate in Hz
    - xmin / xmax: recording bounds in seconds
    - data: optional channels x time array (2-D only; epoched data is rejected)
    - events: event records, latencies in samples counted from xmin
    - urevents: raw/historical event table referenced by Event.urevent (1-based)
    """
    srate: float
    xmin: float = 0.0
    xmax: float = 0.0
    data: np.ndarray | None = field(default=None, repr=False)
    events: tuple[Event, ...] = field(default=(), repr=False)
    urevents: tuple[Event, ...] = field(default=(), repr=False)
    name: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        try:
            srate = float(self.srate)
        except (TypeError, ValueError) as e:
            raise InvalidSignal(f"Signal.srate must be a number, got {self.srate!r}.") from e
        if not np.isfinite(srate) or srate <= 0:
            raise InvalidSignal(f"Signal.srate must be positive and finite, got {srate}.")

        try:
            xmin, xmax = float(self.xmin), float(self.xmax)
        except (TypeError, ValueError) as e:
            raise InvalidSignal("Signal.xmin / Signal.xmax must be numbers.") from e
        if not (np.isfinite(xmin) and np.isfinite(xmax)):
            raise InvalidSignal("Signal.xmin / Signal.xmax must be finite.")
        if xmin > xmax:
            raise InvalidSignal(f"Signal.xmin ({xmin}) must not exceed Signal.xmax ({xmax}).")

        if self.attrs is None:
            object.__setattr__(self, "attrs", {})
        elif not isinstance(self.attrs, dict):
            raise InvalidSignal("Signal.attrs must be a dict.")
        epoch = self.attrs.get("epoch")
        if epoch is not None and np.size(epoch) > 0:
            raise EpochedDataError(
                "The data set appears to contain epochs: only continuous data sets are supported."
            )

        if self.data is not None:
            d = np.asarray(self.data)
            if d.ndim > 2:
                raise EpochedDataError(
                    f"The data set appears to contain epochs (data shape {d.shape}): "
                    "only continuous data sets are supported."
                )
            if d.ndim != 2:
                raise InvalidSignal(f"Signal.data must be 2D (channels x time), got shape {d.shape}")
            object.__setattr__(self, "data", d)

        urevents = tuple(self.urevents) if self.urevents is not None else ()
        for ev in urevents:
            if not isinstance(ev, Event):
                raise InvalidSignal("Signal.urevents items must be Event instances.")

        object.__setattr__(self, "srate", srate)
        object.__setattr__(self, "xmin", xmin)
        object.__setattr__(self, "xmax", xmax)
        object.__setattr__(self, "events", _normalize_events(self.events))
        object.__setattr__(self, "urevents", urevents)

    # ---- time base ----
    @property
    def n_samples(self) -> int:
        if self.data is not None:
            return int(self.data.shape[1])
        return int(round(self.duration * self.srate)) + 1

    @property
    def duration(self) -> float:
        """Recording length in seconds."""
        return self.xmax - self.xmin

    # Sample positions count from the start of the recording, whatever its
    # xmin: time arguments are seconds after xmin.
    @property
    def first_sample(self) -> float:
        return 0.0

    @property
    def last_sample(self) -> float:
        return self.seconds_to_samples(self.duration)

    def seconds_to_samples(self, t: float) -> float:
        return float(t) * self.srate

    # ---- event access ----
    def __len__(self) -> int:
        return len(self.events)

    @property
    def latencies(self) -> np.ndarray:
        return np.array([ev.latency for ev in self.events], dtype=float)

    @property
    def event_types(self) -> list[str]:
        return [ev.type for ev in self.events]  # type: ignore[misc]

    def has_trivial_urevents(self) -> bool:
        """True if the back-reference table is empty or the identity mapping 1..N."""
        if not self.urevents:
            return True
        return [ev.urevent for ev in self.events] == list(range(1, len(self.events) + 1))

    # ---- transformations ----
    def with_events(
        self,
        events: Iterable[Event],
        urevents: Iterable[Event] | None = None,
    ) -> "Signal":
        """Return a new Signal sharing this time base with a replaced event list."""
        return Signal(
            srate=self.srate,
            xmin=self.xmin,
            xmax=self.xmax,
            data=self.data,
            events=tuple(events),
            urevents=self.urevents if urevents is None else tuple(urevents),
            name=self.name,
            attrs=self.attrs.copy(),
        )
