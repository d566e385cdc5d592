"""Track modeling: checkpoint placements, precomputed checkpoint graph, track files."""

from race_progress.track.graph import CheckpointGraph, distance
from race_progress.track.loader import TrackDefinition, load_track, parse_track
from race_progress.track.models import Checkpoint, CheckpointPlacement, RespawnState
from race_progress.track.shapes import oval_placements

__all__ = [
    "Checkpoint",
    "CheckpointGraph",
    "CheckpointPlacement",
    "RespawnState",
    "TrackDefinition",
    "distance",
    "load_track",
    "oval_placements",
    "parse_track",
]
