# markerinject/core/config.py
from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping

import numpy as np

from .event import Event
from .exceptions import InvalidPlacementConfig


COUNTING_SCHEMES = ("perinterval", "persecond")
PLACEMENT_SCHEMES = ("equidistant", "random")

# Combined with `repeatable` to form the seed of repeatable random placement.
SEED_OFFSET = 5182


def _real(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidPlacementConfig(f"{what} must be a number, got {value!r}.")
    v = float(value)
    if math.isnan(v):
        raise InvalidPlacementConfig(f"{what} must not be NaN.")
    return v


@dataclass(frozen=True, slots=True)
class PlacementConfig:
    """
    How many markers to insert per segment, and where.

    - inserted_event: type string or template event (None: derive from the segment)
    - count: markers per interval, or per second with counting="persecond"
    - placement: "equidistant" or "random"
    - repeatable: 0 for non-reproducible random placement, otherwise the seed selector
    - limits: global (lo, hi) window in seconds outside which no marker is placed
    - min_length / max_length: segment duration bounds in seconds (inclusive)
    """
    inserted_event: str | Event | Mapping[str, Any] | None = None
    count: float = 1
    counting: str = "perinterval"
    placement: str = "equidistant"
    repeatable: int = 1
    limits: tuple[float, float] = (-math.inf, math.inf)
    min_length: float = 0.0
    max_length: float = math.inf

    def __post_init__(self) -> None:
        ev = self.inserted_event
        if ev is not None and not isinstance(ev, (str, Event, Mapping)):
            raise InvalidPlacementConfig(
                "inserted_event must be a type string, an Event or an event mapping."
            )

        if self.counting not in COUNTING_SCHEMES:
            raise InvalidPlacementConfig(f"counting must be one of: {', '.join(COUNTING_SCHEMES)}")
        if self.placement not in PLACEMENT_SCHEMES:
            raise InvalidPlacementConfig(f"placement must be one of: {', '.join(PLACEMENT_SCHEMES)}")

        count = _real(self.count, "count")
        if not math.isfinite(count) or count <= 0:
            raise InvalidPlacementConfig(f"count must be a positive finite number, got {count}.")
        if self.counting == "perinterval":
            if count != int(count):
                raise InvalidPlacementConfig(
                    f"count must be a whole number with counting='perinterval', got {count}."
                )
            count = int(count)
        object.__setattr__(self, "count", count)

        if isinstance(self.repeatable, bool) or not isinstance(self.repeatable, (int, np.integer)):
            raise InvalidPlacementConfig(f"repeatable must be an integer, got {self.repeatable!r}.")
        object.__setattr__(self, "repeatable", int(self.repeatable))

        try:
            limits = np.asarray(self.limits, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidPlacementConfig("limits needs to be of the form (lower, upper).") from e
        if limits.shape != (2,):
            raise InvalidPlacementConfig("limits needs to be of the form (lower, upper).")
        lo = _real(limits[0], "limits[0]")
        hi = _real(limits[1], "limits[1]")
        if lo > hi:
            raise InvalidPlacementConfig(f"limits lower bound ({lo}) exceeds upper bound ({hi}).")
        object.__setattr__(self, "limits", (lo, hi))

        min_length = _real(self.min_length, "min_length")
        max_length = _real(self.max_length, "max_length")
        if min_length < 0:
            raise InvalidPlacementConfig("min_length must be >= 0.")
        if min_length > max_length:
            raise InvalidPlacementConfig("min_length must not exceed max_length.")
        object.__setattr__(self, "min_length", min_length)
        object.__setattr__(self, "max_length", max_length)

    @property
    def is_random(self) -> bool:
        return self.placement == "random"

    def make_rng(self) -> np.random.Generator:
        """A fresh generator for one invocation: seeded if repeatable, else from OS entropy."""
        if self.repeatable:
            # negative values wrap into the unsigned seed space
            return np.random.default_rng([SEED_OFFSET, self.repeatable % 2**64])
        return np.random.default_rng()
