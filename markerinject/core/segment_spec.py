# markerinject/core/segment_spec.py
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from numbers import Real
from typing import Any, ClassVar, Mapping, Sequence, Union

from .exceptions import InvalidSegmentSpec


# Sentinel for SpannedRange.ignored_types: any event type may occur between open and close.
IGNORE_ALL = "ignoreall"


def _time_value(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidSegmentSpec(f"{what} must be a number (seconds), got {value!r}.")
    v = float(value)
    if math.isnan(v):
        raise InvalidSegmentSpec(f"{what} must not be NaN.")
    return v


def _type_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidSegmentSpec(f"{what} must be a non-empty string.")
    return value


def _type_list(value: Any, what: str) -> tuple[str, ...]:
    if isinstance(value, str):
        value = (value,)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidSegmentSpec(f"{what} must be a list of event types.")
    return tuple(_type_name(v, what) for v in value)


@dataclass(frozen=True, slots=True)
class AbsoluteRange:
    """
    A fixed window of the recording, in seconds.

    lo=-inf starts at the first sample, hi=+inf ends at the last sample;
    a negative hi counts backward from the end of the recording.
    """
    kind: ClassVar[str] = "absoluterange"

    lo: float = 0.0
    hi: float = math.inf

    def __post_init__(self) -> None:
        object.__setattr__(self, "lo", _time_value(self.lo, "AbsoluteRange.lo"))
        object.__setattr__(self, "hi", _time_value(self.hi, "AbsoluteRange.hi"))


@dataclass(frozen=True, slots=True)
class RelativeRange:
    """A window [lo, hi] seconds around every event of `event_type`."""
    kind: ClassVar[str] = "relativerange"

    event_type: str
    lo: float = -0.5
    hi: float = 1.0

    def __post_init__(self) -> None:
        _type_name(self.event_type, "RelativeRange.event_type")
        object.__setattr__(self, "lo", _time_value(self.lo, "RelativeRange.lo"))
        object.__setattr__(self, "hi", _time_value(self.hi, "RelativeRange.hi"))


@dataclass(frozen=True, slots=True)
class SpannedRange:
    """
    The window between each open event and the next close event.

    lo shifts the window start relative to the open event, hi shifts the
    window end relative to the close event (both in seconds).

    ignored_types:
      - tuple of types allowed between open and close (empty: none allowed)
      - IGNORE_ALL: any type allowed
    forbidden_types:
      - tuple of types that must not occur between open and close
    """
    kind: ClassVar[str] = "spannedrange"

    open_type: str
    close_type: str
    lo: float = 0.5
    hi: float = -0.5
    ignored_types: tuple[str, ...] | str = ()
    forbidden_types: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _type_name(self.open_type, "SpannedRange.open_type")
        _type_name(self.close_type, "SpannedRange.close_type")
        object.__setattr__(self, "lo", _time_value(self.lo, "SpannedRange.lo"))
        object.__setattr__(self, "hi", _time_value(self.hi, "SpannedRange.hi"))

        ignored = self.ignored_types
        if ignored == IGNORE_ALL or (isinstance(ignored, (list, tuple)) and list(ignored) == [IGNORE_ALL]):
            ignored = IGNORE_ALL
        else:
            ignored = _type_list(ignored, "SpannedRange.ignored_types")
        object.__setattr__(self, "ignored_types", ignored)
        object.__setattr__(
            self, "forbidden_types", _type_list(self.forbidden_types, "SpannedRange.forbidden_types")
        )

    @property
    def ignores_all(self) -> bool:
        return self.ignored_types == IGNORE_ALL

    def inner_types_allowed(self, inner_types: Sequence[str]) -> bool:
        """Check the event types strictly between an open and a close event."""
        if not self.ignores_all and any(t not in self.ignored_types for t in inner_types):
            return False
        if self.forbidden_types and any(t in self.forbidden_types for t in inner_types):
            return False
        return True


SegmentSpec = Union[AbsoluteRange, RelativeRange, SpannedRange]

_KINDS: dict[str, type] = {
    AbsoluteRange.kind: AbsoluteRange,
    RelativeRange.kind: RelativeRange,
    SpannedRange.kind: SpannedRange,
}

# Alternative parameter names accepted in name/value form.
_ALIASES = {
    "event": "event_type",
    "eventtype": "event_type",
    "openevent": "open_type",
    "closeevent": "close_type",
    "beginoffset": "lo",
    "endoffset": "hi",
    "openoffset": "lo",
    "closeoffset": "hi",
    "ignored": "ignored_types",
    "ignoredevents": "ignored_types",
    "forbidden": "forbidden_types",
    "forbiddenevents": "forbidden_types",
}


def _build(kind: Any, params: Mapping[str, Any]) -> SegmentSpec:
    cls = _KINDS.get(str(kind).lower()) if kind is not None else None
    if cls is None:
        raise InvalidSegmentSpec(
            f"Unknown segment kind {kind!r}; expected one of {sorted(_KINDS)}."
        )
    names = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in params.items():
        if not isinstance(key, str):
            raise InvalidSegmentSpec(f"Segment parameter names must be strings, got {key!r}.")
        name = _ALIASES.get(key.lower(), key)
        if name not in names:
            raise InvalidSegmentSpec(f"Unknown parameter '{key}' for {cls.kind}.")
        kwargs[name] = value
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise InvalidSegmentSpec(f"Incomplete {cls.kind} specification: {e}") from e


def _parse_shorthand(items: Sequence[Any]) -> SegmentSpec:
    types: list[str] = []
    times: list[float] = []
    ignored: list[str] | None = None
    forbidden: list[str] = []

    for item in items:
        if isinstance(item, str):
            types.append(item)
        elif isinstance(item, (list, tuple)):
            if item and isinstance(item[0], (list, tuple)):
                forbidden.extend(item[0])
            else:
                ignored = (ignored or []) + list(item)
        else:
            times.append(_time_value(item, "Segment time value"))

    if len(times) != 2:
        raise InvalidSegmentSpec(
            f"Segment specification {list(items)!r} needs exactly two time values, got {len(times)}."
        )
    if len(types) < 2 and (ignored is not None or forbidden):
        raise InvalidSegmentSpec("Ignored/forbidden event lists only apply to spanned ranges.")

    if not types:
        return AbsoluteRange(lo=min(times), hi=max(times))
    if len(types) == 1:
        return RelativeRange(event_type=types[0], lo=min(times), hi=max(times))
    if len(types) == 2:
        if ignored == [] or (forbidden and ignored is None):
            ignored_types: tuple[str, ...] | str = IGNORE_ALL
        else:
            ignored_types = tuple(ignored or ())
        return SpannedRange(
            open_type=types[0],
            close_type=types[1],
            lo=times[0],
            hi=times[1],
            ignored_types=ignored_types,
            forbidden_types=tuple(forbidden),
        )
    raise InvalidSegmentSpec(f"Unsupported segment specification: {list(items)!r}.")


def parse_segment_spec(spec: Any) -> SegmentSpec:
    """
    Normalize any accepted segment specification into a SegmentSpec variant.

    Accepted forms:
      - an AbsoluteRange / RelativeRange / SpannedRange instance
      - None or an empty sequence: AbsoluteRange() (whole recording)
      - a mapping with a "kind" key plus parameters
      - a sequence starting with a kind tag, followed by name/value pairs
      - shorthand sequences of types and times, e.g.
          [1000, 2000]                   absolute range
          ["A", -5, 10]                  relative to each "A"
          [-5, "A", ["p", "q"], 0, "B"]  spanned A..B, "p"/"q" may occur in between
          [-5, "A", [["p"]], 0, "B"]     spanned A..B, "p" must not occur in between
          [-5, "A", [], 0, "B"]          spanned A..B, anything may occur in between
    """
    if isinstance(spec, (AbsoluteRange, RelativeRange, SpannedRange)):
        return spec
    if spec is None:
        return AbsoluteRange()
    if isinstance(spec, Mapping):
        params = {k: v for k, v in spec.items() if k not in ("kind", "arg_selection")}
        return _build(spec.get("kind", spec.get("arg_selection")), params)
    if isinstance(spec, str):
        spec = [spec]
    if not isinstance(spec, (list, tuple)):
        raise InvalidSegmentSpec(f"Cannot interpret {spec!r} as a segment specification.")

    items = list(spec)
    if not items:
        return AbsoluteRange()
    head = items[0]
    if isinstance(head, str) and head.lower() in _KINDS:
        rest = items[1:]
        if len(rest) % 2:
            raise InvalidSegmentSpec(f"Parameters for {head} must come in name/value pairs.")
        return _build(head, dict(zip(rest[0::2], rest[1::2])))
    return _parse_shorthand(items)
