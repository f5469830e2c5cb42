import pytest
from core.presence import is_person_present, is_visible
from models.schemas import PoseLandmark
from tests.conftest import make_landmarks


def test_fully_visible_person_is_present():
    assert is_person_present(make_landmarks(visibility=0.9))


def test_one_ear_is_enough():
    landmarks = make_landmarks()
    del landmarks[PoseLandmark.LEFT_EAR]
    assert is_person_present(landmarks)
    landmarks[PoseLandmark.RIGHT_EAR]['visibility'] = 0.2
    assert not is_person_present(landmarks)


@pytest.mark.parametrize("idx", [
    PoseLandmark.NOSE, PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER,
])
def test_low_confidence_required_landmark_fails(idx):
    landmarks = make_landmarks()
    landmarks[idx]['visibility'] = 0.5
    assert not is_person_present(landmarks)


@pytest.mark.parametrize("visibility", [0.0, 0.3, 0.5])
def test_nothing_visible_regardless_of_position(visibility):
    assert not is_person_present(make_landmarks(visibility=visibility))
    assert not is_person_present(make_landmarks(nose_y=-3.0, shoulder_y=7.0, visibility=visibility))


def test_cutoff_is_strict():
    landmarks = make_landmarks(visibility=0.51)
    assert is_person_present(landmarks)
    assert not is_visible({0: {'x': 0.5, 'y': 0.5, 'visibility': 0.5}}, PoseLandmark.NOSE)


def test_missing_visibility_counts_as_hidden():
    assert not is_visible({0: {'x': 0.5, 'y': 0.5}}, PoseLandmark.NOSE)


def test_empty_scene():
    assert not is_person_present({})
