"""RankTracker: best / second-best slots, markers and change events."""

from __future__ import annotations

import random

from race_progress.race.agents import RankMarker, StubAgent
from race_progress.race.models import AgentEntry
from race_progress.race.ranking import RankTracker


def _make_entries(*scores: float) -> list[AgentEntry]:
    return [AgentEntry(handle=StubAgent(), score=s) for s in scores]


def _make_tracker() -> tuple[RankTracker, list[tuple]]:
    events: list[tuple] = []
    tracker = RankTracker(subscribers=[lambda prev, new: events.append((prev, new))])
    return tracker, events


def _run_pass(tracker: RankTracker, entries: list[AgentEntry]) -> None:
    for entry in entries:
        tracker.update(entry)
    tracker.settle(entries)


class TestUpdate:
    def test_scores_in_roster_order_pick_best_and_second(self):
        tracker, _ = _make_tracker()
        a, b, c = _make_entries(0.2, 0.9, 0.5)
        _run_pass(tracker, [a, b, c])
        assert tracker.best is b
        assert tracker.second_best is c

    def test_overtaken_best_drops_to_second(self):
        tracker, _ = _make_tracker()
        a, b = _make_entries(0.4, 0.1)
        _run_pass(tracker, [a, b])
        b.score = 0.6
        _run_pass(tracker, [a, b])
        assert tracker.best is b
        assert tracker.second_best is a

    def test_ties_go_to_first_encountered(self):
        tracker, _ = _make_tracker()
        a, b, c = _make_entries(0.5, 0.5, 0.5)
        _run_pass(tracker, [a, b, c])
        assert tracker.best is a
        assert tracker.second_best is b

    def test_single_agent_only_fills_best(self):
        tracker, _ = _make_tracker()
        (a,) = _make_entries(0.3)
        _run_pass(tracker, [a])
        _run_pass(tracker, [a])
        assert tracker.best is a
        assert tracker.second_best is None

    def test_ranks_persist_when_nobody_improves(self):
        tracker, events = _make_tracker()
        a, b = _make_entries(0.7, 0.3)
        _run_pass(tracker, [a, b])
        events.clear()
        _run_pass(tracker, [a, b])
        assert tracker.best is a
        assert tracker.second_best is b
        assert events == []

    def test_second_promoted_to_best_is_not_also_second(self):
        tracker, _ = _make_tracker()
        a, b, c = _make_entries(0.5, 0.3, 0.1)
        _run_pass(tracker, [a, b, c])
        b.score = 0.8
        _run_pass(tracker, [a, b, c])
        assert tracker.best is b
        assert tracker.second_best is a

    def test_falling_best_is_swapped_by_settle(self):
        tracker, events = _make_tracker()
        a, b = _make_entries(0.9, 0.6)
        _run_pass(tracker, [a, b])
        a.score = 0.4
        # b is not re-evaluated this pass (e.g. disabled); a's own update changes nothing
        _run_pass(tracker, [a])
        assert tracker.best is b
        assert tracker.second_best is a
        assert events[-1] == (a.handle, b.handle)

    def test_unranked_agent_overtakes_leaders_that_fell_later_in_pass(self):
        tracker, events = _make_tracker()
        a, b, c = _make_entries(0.9, 0.5, 0.0)
        _run_pass(tracker, [a, b, c])

        c.score = 0.3
        tracker.update(c)  # compared against the old 0.9 / 0.5
        b.score = 0.2
        tracker.update(b)
        a.score = 0.1
        tracker.update(a)
        tracker.settle([c, b, a])

        assert tracker.best is c
        assert tracker.second_best is b
        assert events[-1] == (a.handle, c.handle)
        assert a.handle.marker is RankMarker.NONE
        assert b.handle.marker is RankMarker.SECOND
        assert c.handle.marker is RankMarker.FIRST

    def test_settle_keeps_holders_on_ties(self):
        tracker, events = _make_tracker()
        a, b, c = _make_entries(0.5, 0.4, 0.0)
        _run_pass(tracker, [a, b, c])
        events.clear()

        for entry in (a, b, c):
            entry.score = 0.4
        _run_pass(tracker, [c, b, a])

        assert tracker.best is a
        assert tracker.second_best is b
        assert events == []

    def test_rank_invariant_over_random_ticks(self):
        rng = random.Random(1234)
        tracker, _ = _make_tracker()
        entries = _make_entries(*([0.0] * 6))
        for _ in range(300):
            for entry in entries:
                entry.score = min(1.0, max(0.0, entry.score + rng.uniform(-0.05, 0.1)))
            order = entries[:]
            rng.shuffle(order)
            _run_pass(tracker, order)

            best, second = tracker.best, tracker.second_best
            assert best is not None
            if second is not None:
                assert best is not second
                assert best.score >= second.score
            top_two = sorted((e.score for e in entries), reverse=True)[:2]
            assert best.score == top_two[0]
            assert second is not None and second.score == top_two[1]


class TestMarkersAndEvents:
    def test_markers_follow_slots(self):
        tracker, _ = _make_tracker()
        a, b, c = _make_entries(0.2, 0.9, 0.5)
        _run_pass(tracker, [a, b, c])
        assert b.handle.marker is RankMarker.FIRST
        assert c.handle.marker is RankMarker.SECOND
        assert a.handle.marker is RankMarker.NONE

    def test_demoted_best_goes_none_then_second(self):
        tracker, _ = _make_tracker()
        a, b = _make_entries(0.2, 0.9)
        _run_pass(tracker, [a, b])
        assert a.handle.marker_history == [RankMarker.FIRST, RankMarker.NONE, RankMarker.SECOND]

    def test_promoted_second_keeps_first_marker(self):
        tracker, _ = _make_tracker()
        a, b = _make_entries(0.5, 0.3)
        _run_pass(tracker, [a, b])
        b.score = 0.9
        _run_pass(tracker, [a, b])
        assert b.handle.marker is RankMarker.FIRST
        assert a.handle.marker is RankMarker.SECOND

    def test_event_carries_previous_and_new_handles(self):
        tracker, events = _make_tracker()
        a, b, c = _make_entries(0.2, 0.9, 0.5)
        _run_pass(tracker, [a, b, c])
        assert events == [(None, a.handle), (a.handle, b.handle)]

    def test_second_best_change_emits_nothing(self):
        tracker, events = _make_tracker()
        a, b, c = _make_entries(0.9, 0.2, 0.5)
        _run_pass(tracker, [a, b, c])
        assert events == [(None, a.handle)]
        assert tracker.second_best is c

    def test_subscribe_after_construction(self):
        tracker = RankTracker()
        seen = []
        tracker.subscribe(lambda prev, new: seen.append(new))
        (a,) = _make_entries(0.1)
        tracker.update(a)
        assert seen == [a.handle]


class TestClearAndForget:
    def test_clear_empties_slots_and_emits(self):
        tracker, events = _make_tracker()
        a, b = _make_entries(0.9, 0.1)
        _run_pass(tracker, [a, b])
        events.clear()

        tracker.clear()

        assert tracker.best is None
        assert tracker.second_best is None
        assert events == [(a.handle, None)]
        assert a.handle.marker is RankMarker.NONE
        assert b.handle.marker is RankMarker.NONE

    def test_clear_on_empty_tracker_is_silent(self):
        tracker, events = _make_tracker()
        tracker.clear()
        assert events == []

    def test_forget_best_promotes_second(self):
        tracker, events = _make_tracker()
        a, b = _make_entries(0.9, 0.1)
        _run_pass(tracker, [a, b])

        tracker.forget(a)

        assert tracker.best is b
        assert tracker.second_best is None
        assert events[-1] == (a.handle, b.handle)
        assert b.handle.marker is RankMarker.FIRST

    def test_forget_second_leaves_best(self):
        tracker, _ = _make_tracker()
        a, b = _make_entries(0.9, 0.1)
        _run_pass(tracker, [a, b])
        tracker.forget(b)
        assert tracker.best is a
        assert tracker.second_best is None

    def test_forget_unranked_entry_changes_nothing(self):
        tracker, events = _make_tracker()
        a, b, c = _make_entries(0.9, 0.5, 0.1)
        _run_pass(tracker, [a, b, c])
        events.clear()
        tracker.forget(c)
        assert tracker.best is a
        assert tracker.second_best is b
        assert events == []

    def test_best_score_reports_last_known_score(self):
        tracker, _ = _make_tracker()
        assert tracker.best_score is None
        (a,) = _make_entries(0.42)
        tracker.update(a)
        assert tracker.best_score == 0.42
