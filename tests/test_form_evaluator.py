import pytest

from conftest import build_frame, lateral_frame, plank_frame, squat_frame
from kinetic.engine import Exercise, FormQualityEvaluator, Landmark, Orientation, Side
from kinetic.engine.form_evaluator import HEAD_FORWARD, KNEE_VALGUS, SHOULDERS_UNLEVEL


@pytest.fixture
def evaluator(settings):
    return FormQualityEvaluator(settings)


def test_lateral_head_forward(evaluator):
    frame = lateral_frame(ear_offset=0.10)
    check = evaluator.evaluate(frame, Exercise.SQUATS, Orientation.LATERAL, Side.LEFT)
    assert check.is_bad_form
    assert check.message == HEAD_FORWARD


def test_lateral_head_aligned(evaluator):
    check = evaluator.evaluate(lateral_frame(ear_offset=0.05), Exercise.PLANK,
                               Orientation.LATERAL, Side.LEFT)
    assert not check.is_bad_form
    assert check.message == ""


def test_head_check_applies_to_every_exercise_in_lateral_view(evaluator):
    frame = lateral_frame(ear_offset=0.12)
    for exercise in Exercise:
        assert evaluator.evaluate(frame, exercise, Orientation.LATERAL, Side.LEFT).is_bad_form


def test_knee_valgus(evaluator):
    # Hip separation 0.16, knee separation 0.10 < 0.12
    frame = squat_frame(
        150,
        left_knee=Landmark(0.45, 0.72, 0.0, 0.95),
        right_knee=Landmark(0.55, 0.72, 0.0, 0.95),
    )
    check = evaluator.evaluate(frame, Exercise.SQUATS, Orientation.FRONTAL)
    assert check.is_bad_form
    assert check.message == KNEE_VALGUS


def test_knees_tracking_over_feet(evaluator):
    check = evaluator.evaluate(squat_frame(150), Exercise.SQUATS, Orientation.FRONTAL)
    assert not check.is_bad_form


@pytest.mark.parametrize("slope, is_bad", [(0.05, False), (0.149, False), (0.151, True), (0.3, True)])
def test_plank_shoulder_level(evaluator, slope, is_bad):
    check = evaluator.evaluate(plank_frame(slope), Exercise.PLANK, Orientation.FRONTAL)
    assert check.is_bad_form is is_bad
    assert check.message == (SHOULDERS_UNLEVEL if is_bad else "")


def test_unmodeled_exercise_has_no_frontal_checks(evaluator):
    frame = plank_frame(0.4)
    check = evaluator.evaluate(frame, Exercise.PUSHUPS, Orientation.FRONTAL)
    assert not check.is_bad_form


def test_squat_frontal_ignores_shoulders(evaluator):
    frame = build_frame(right_shoulder=Landmark(0.60, 0.60, 0.0, 0.95))
    assert not evaluator.evaluate(frame, Exercise.SQUATS, Orientation.FRONTAL).is_bad_form
