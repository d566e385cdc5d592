"""Configuration errors raised by the track, roster and engine layers.

None of these are retried: an invalid track or roster request is a caller bug.
"""

from __future__ import annotations


class RaceProgressError(Exception):
    """Base class for all race-progress errors."""


class InvalidTrack(RaceProgressError, ValueError):
    """Raised when a checkpoint sequence cannot form a track (fewer than two checkpoints)."""


class DegenerateTrack(InvalidTrack):
    """Raised when all checkpoints coincide and the track length is zero."""


class InvalidArgument(RaceProgressError, ValueError):
    """Raised on an out-of-range request, e.g. a negative roster size."""
