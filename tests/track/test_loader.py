"""JSON track file loading."""

from __future__ import annotations

import json

import pytest

from race_progress.errors import InvalidTrack
from race_progress.track.graph import CheckpointGraph
from race_progress.track.loader import load_track, parse_track


def _doc(**overrides) -> dict:
    doc = {
        "name": "sprint",
        "checkpoints": [
            {"x": 0, "y": 0, "radius": 2},
            {"x": 10, "y": 0, "radius": 2, "respawn": True},
            {"x": 20, "y": 5, "radius": 3},
        ],
    }
    doc.update(overrides)
    return doc


def test_parse_track_builds_placements_in_order():
    definition = parse_track(_doc())
    assert definition.name == "sprint"
    assert [p.position for p in definition.placements] == [(0.0, 0.0), (10.0, 0.0), (20.0, 5.0)]
    assert [p.respawn_here for p in definition.placements] == [False, True, False]
    assert definition.placements[2].capture_radius == 3.0


def test_parse_track_missing_key_raises_invalid_track():
    doc = _doc(checkpoints=[{"x": 0, "y": 0}])
    with pytest.raises(InvalidTrack):
        parse_track(doc)


def test_parse_track_without_checkpoints_raises_invalid_track():
    with pytest.raises(InvalidTrack):
        parse_track({"name": "empty"})


def test_load_track_reads_file(tmp_path):
    path = tmp_path / "sprint.json"
    path.write_text(json.dumps(_doc()), encoding="utf-8")

    definition = load_track(path)
    graph = CheckpointGraph.from_placements(definition.placements)
    assert len(graph) == 3
    assert graph[-1].accumulated_reward == pytest.approx(1.0)


def test_load_track_defaults_name_to_file_stem(tmp_path):
    doc = _doc()
    del doc["name"]
    path = tmp_path / "hill_climb.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    assert load_track(path).name == "hill_climb"


def test_load_track_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidTrack):
        load_track(path)


def test_load_track_rejects_non_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(InvalidTrack):
        load_track(path)
