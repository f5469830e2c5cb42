import pytest
from models.schemas import PoseLandmark


def make_landmarks(nose_y: float = 0.2, shoulder_y: float = 0.5, visibility: float = 0.9,
                   ears: bool = True) -> dict:
    """Minimal upper-body landmark set with metric = shoulder_y - nose_y."""
    landmarks = {
        PoseLandmark.NOSE: {'x': 0.5, 'y': nose_y, 'visibility': visibility},
        PoseLandmark.LEFT_SHOULDER: {'x': 0.65, 'y': shoulder_y, 'visibility': visibility},
        PoseLandmark.RIGHT_SHOULDER: {'x': 0.35, 'y': shoulder_y, 'visibility': visibility},
    }
    if ears:
        landmarks[PoseLandmark.LEFT_EAR] = {'x': 0.55, 'y': nose_y - 0.02, 'visibility': visibility}
        landmarks[PoseLandmark.RIGHT_EAR] = {'x': 0.45, 'y': nose_y - 0.02, 'visibility': visibility}
    return {int(k): v for k, v in landmarks.items()}


def with_metric(metric: float, **kwargs) -> dict:
    return make_landmarks(nose_y=0.5 - metric, shoulder_y=0.5, **kwargs)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()
