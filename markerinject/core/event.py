# markerinject/core/event.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Sequence

from .exceptions import InvalidEvent


# Keys of an event record that map onto Event fields; everything else is passthrough.
_FIELDS = ("type", "latency", "duration", "urevent")


@dataclass(frozen=True, slots=True)
class Event:
    """
    A named, instantaneous marker on a continuous signal.

    - type: event type name
    - latency: position in sample units (None only for templates)
    - duration: optional duration in samples
    - urevent: optional 1-based index into the Signal's raw event table
    - attrs: arbitrary passthrough fields, copied verbatim from templates
    """
    type: str | None
    latency: Any = None
    duration: Any = None
    urevent: int | None = None
    attrs: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.type is not None and not isinstance(self.type, str):
            raise InvalidEvent(f"Event.type must be a string, got {type(self.type).__name__}.")
        if self.attrs is None:
            object.__setattr__(self, "attrs", {})
        elif not isinstance(self.attrs, dict):
            raise InvalidEvent("Event.attrs must be a dict.")

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any], *, require_fields: bool = False) -> "Event":
        """
        Build an Event from a dict-like record.

        Unknown keys are kept in `attrs`. With require_fields=True the record
        must carry both a `latency` and a `type` key.
        """
        if not isinstance(record, Mapping):
            raise InvalidEvent(f"Event records must be mappings, got {type(record).__name__}.")
        if require_fields:
            for key in ("latency", "type"):
                if key not in record:
                    raise InvalidEvent(f"Event record is missing the required field '{key}'.")

        attrs = {k: v for k, v in record.items() if k not in _FIELDS}
        return cls(
            type=record.get("type"),
            latency=record.get("latency"),
            duration=record.get("duration"),
            urevent=record.get("urevent"),
            attrs=attrs,
        )

    def with_latency(self, latency: Any) -> "Event":
        return replace(self, latency=latency, attrs=self.attrs.copy())

    def with_urevent(self, urevent: int | None) -> "Event":
        return replace(self, urevent=urevent, attrs=self.attrs.copy())


def make_template(
    inserted_event: str | Event | Mapping[str, Any],
    existing: Sequence[Event] = (),
) -> Event:
    """
    Turn the caller's inserted-event argument into a template Event.

    A bare type string yields an event whose passthrough fields (as found on
    the first existing event) are all empty and whose duration is one sample.
    Event records are used verbatim; their latency is overwritten per insertion.
    """
    if isinstance(inserted_event, Event):
        return inserted_event
    if isinstance(inserted_event, Mapping):
        return Event.from_mapping(inserted_event)
    if isinstance(inserted_event, str) and inserted_event:
        attrs = {k: None for k in existing[0].attrs} if existing else {}
        return Event(type=inserted_event, latency=None, duration=1, urevent=None, attrs=attrs)
    raise InvalidEvent(f"Cannot build an event template from {inserted_event!r}.")


def instantiate(template: Event, latencies: Iterable[float]) -> list[Event]:
    """One new event per latency, all other fields copied from the template."""
    return [template.with_latency(float(lat)) for lat in latencies]
