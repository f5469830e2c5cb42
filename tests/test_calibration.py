import pytest
from core.calibration import Calibrator
from tests.conftest import make_landmarks, with_metric


def test_mean_of_valid_frames():
    calibrator = Calibrator()
    for metric in (0.28, 0.30, 0.32):
        assert calibrator.add_frame(with_metric(metric))
    assert calibrator.progress() == {'count': 3}
    assert calibrator.finalize() == pytest.approx(0.30)


def test_absent_person_is_skipped():
    calibrator = Calibrator()
    assert not calibrator.add_frame(make_landmarks(visibility=0.1))
    assert not calibrator.add_frame({})
    assert calibrator.count == 0


def test_finalize_without_frames_returns_none():
    assert Calibrator().finalize() is None


def test_finalize_clears_accumulator():
    calibrator = Calibrator()
    calibrator.add_frame(with_metric(0.3))
    calibrator.finalize()
    assert calibrator.count == 0
    assert calibrator.total == 0.0
    assert calibrator.finalize() is None
