import pytest

from kinetic.engine import Exercise, SessionAggregator, SessionFinishedError, SessionStats


def test_accuracy_defaults_to_100_without_frames():
    stats = SessionStats()
    assert stats.accuracy_score == 100
    assert stats.average_angle == 0


def test_accuracy_rounds_half_up():
    assert SessionStats(good_frames=2, total_frames=3).accuracy_score == 67
    assert SessionStats(good_frames=1, total_frames=8).accuracy_score == 13
    assert SessionStats(good_frames=0, total_frames=5).accuracy_score == 0


def test_average_angle_floors_denominator_to_one():
    assert SessionStats(angle_sum=0.0, angle_frame_count=0).average_angle == 0
    assert SessionStats(angle_sum=301.0, angle_frame_count=2).average_angle == 151


def test_record_frame_counts_good_and_angle(clock):
    aggregator = SessionAggregator(Exercise.SQUATS, clock=clock)
    aggregator.record_frame(is_good=True, angle=150)
    aggregator.record_frame(is_good=False, angle=130)
    aggregator.record_frame(is_good=True)

    stats = aggregator.stats
    assert stats.total_frames == 3
    assert stats.good_frames == 2
    assert stats.angle_sum == 280
    assert stats.angle_frame_count == 2


def test_angles_ignored_outside_cyclic_family(clock):
    aggregator = SessionAggregator(Exercise.PLANK, clock=clock)
    aggregator.record_frame(is_good=True, angle=90)
    assert aggregator.stats.angle_frame_count == 0
    assert aggregator.stats.angle_sum == 0


def test_finish_builds_summary(clock):
    aggregator = SessionAggregator(Exercise.SQUATS, clock=clock)
    for angle in (170, 150, 130):
        aggregator.record_frame(is_good=angle != 130, angle=angle)
    aggregator.record_rep()
    clock.advance(42.9)

    summary = aggregator.finish()
    assert summary.duration_seconds == 42
    assert summary.exercises == ("Squats",)
    assert summary.reps == 1
    assert summary.average_angle == 150
    assert summary.accuracy_score == 67
    assert summary.to_dict()["exercises"] == ["Squats"]


def test_hold_family_reports_zero_reps(clock):
    aggregator = SessionAggregator(Exercise.PLANK, clock=clock)
    aggregator.record_frame(is_good=True)
    aggregator.record_hold_tick()
    aggregator.record_hold_tick()
    aggregator.stats.rep_count = 4

    summary = aggregator.finish()
    assert summary.reps == 0
    assert summary.hold_seconds == 2


def test_finish_is_terminal(clock):
    aggregator = SessionAggregator(Exercise.SQUATS, clock=clock)
    summary = aggregator.finish()
    assert aggregator.finish() is summary

    with pytest.raises(SessionFinishedError):
        aggregator.record_frame(is_good=True)
    with pytest.raises(SessionFinishedError):
        aggregator.record_rep()
    with pytest.raises(SessionFinishedError):
        aggregator.reset()


def test_reset_clears_counters_and_restarts_clock(clock):
    aggregator = SessionAggregator(Exercise.SQUATS, clock=clock)
    aggregator.record_frame(is_good=True, angle=150)
    aggregator.record_rep()
    clock.advance(30)

    aggregator.reset(Exercise.PLANK)
    assert aggregator.exercise == Exercise.PLANK
    assert aggregator.stats == SessionStats(session_start_time=clock.now)
