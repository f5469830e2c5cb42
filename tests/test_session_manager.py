import pytest
from models.schemas import PostureEvaluation, PostureStatus
from services.session_manager import SessionManager


def evaluation(status, alert=False):
    return PostureEvaluation(status=status, deviation=0.0, alert_fired=alert)


def test_time_is_split_by_status():
    manager = SessionManager()
    session_id = manager.start()
    assert manager.is_active

    manager.update_stats(evaluation(PostureStatus.GOOD), 0)
    manager.update_stats(evaluation(PostureStatus.GOOD), 300)
    manager.update_stats(evaluation(PostureStatus.BAD, alert=True), 400)
    manager.update_stats(evaluation(PostureStatus.WAITING), 500)

    assert manager.good_time_sec == pytest.approx(0.3)
    assert manager.bad_time_sec == pytest.approx(0.1)
    assert manager.waiting_time_sec == pytest.approx(0.1)

    summary = manager.stop()
    assert summary.session_id == session_id
    assert summary.frames_evaluated == 4
    assert summary.alerts_fired == 1
    assert summary.good_posture_percentage == 75.0
    assert not manager.is_active


def test_stalled_stream_delta_is_capped():
    manager = SessionManager()
    manager.start()
    manager.update_stats(evaluation(PostureStatus.GOOD), 0)
    manager.update_stats(evaluation(PostureStatus.GOOD), 60000)
    assert manager.good_time_sec == pytest.approx(SessionManager.MAX_DELTA_SEC)


def test_inactive_session_ignores_updates():
    manager = SessionManager()
    manager.update_stats(evaluation(PostureStatus.BAD), 0)
    assert manager.frames_evaluated == 0


def test_no_tracked_time_is_full_score():
    manager = SessionManager()
    manager.start()
    assert manager.stop().good_posture_percentage == 100
