import pytest
from models.schemas import PostureStatus, SessionState
from services.display import deviation_score, sensitivity_label, status_text


@pytest.mark.parametrize("threshold,label", [
    (0.005, "Extreme"), (0.015, "Extreme"), (0.02, "High"),
    (0.045, "High"), (0.05, "Medium"), (0.1, "Medium"),
])
def test_sensitivity_label(threshold, label):
    assert sensitivity_label(threshold) == label


def test_deviation_score():
    assert deviation_score(0.1234) == 12.3
    assert deviation_score(0.0) == 0.0


def test_status_text():
    assert status_text(PostureStatus.WAITING, SessionState.UNCALIBRATED) == "Not Calibrated"
    assert status_text(PostureStatus.WAITING, SessionState.CALIBRATING) == "Calibrating..."
    assert status_text(PostureStatus.WAITING, SessionState.CALIBRATED) == "No Person Detected"
    assert status_text(PostureStatus.GOOD, SessionState.CALIBRATED) == "Good Posture"
    assert status_text(PostureStatus.BAD, SessionState.CALIBRATED) == "Poor Posture"
