# markerinject/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all markerinject exceptions."""


# ---- Validation / construction errors ----
class InvalidEvent(CoreError):
    """Raised when an Event record is missing required fields or malformed."""


class InvalidSignal(CoreError):
    """Raised when a Signal is constructed with invalid inputs."""


class EpochedDataError(InvalidSignal):
    """Raised when segmented (multi-trial) data is passed where continuous data is required."""


class InvalidSegmentSpec(CoreError):
    """Raised when a segment specification cannot be parsed or resolved."""


class InvalidPlacementConfig(CoreError):
    """Raised when placement options are out of range or inconsistent."""


# ---- Engine errors ----
class PlacementError(CoreError):
    """Raised when the placer receives an interval it cannot place markers in."""


class BackReferenceError(CoreError):
    """Raised when the back-reference (urevent) table cannot be rebuilt."""
