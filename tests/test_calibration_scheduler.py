import asyncio
import pytest
from core.posture_analyzer import PostureSession
from models.schemas import SessionState
from services.calibration_scheduler import CalibrationScheduler
from tests.conftest import make_landmarks, with_metric


async def test_window_finalizes_with_collected_frames(clock):
    results = []

    async def on_complete(result):
        results.append(result)

    session = PostureSession(clock=clock)
    scheduler = CalibrationScheduler(session, window_ms=20, on_complete=on_complete)
    epoch = scheduler.start()
    assert scheduler.pending
    session.on_frame_during_calibration(with_metric(0.30))
    session.on_frame_during_calibration(with_metric(0.34))

    result = await scheduler.wait()
    assert result.success
    assert result.epoch == epoch
    assert result.frames_used == 2
    assert result.baseline == pytest.approx(0.32)
    assert session.state == SessionState.CALIBRATED
    assert results == [result]
    assert not scheduler.pending


async def test_empty_window_reports_failure(clock):
    session = PostureSession(clock=clock)
    scheduler = CalibrationScheduler(session, window_ms=10)
    scheduler.start()
    session.on_frame_during_calibration(make_landmarks(visibility=0.0))

    result = await scheduler.wait()
    assert not result.success
    assert result.baseline is None
    assert session.state == SessionState.UNCALIBRATED


async def test_restart_supersedes_pending_window(clock):
    results = []

    async def on_complete(result):
        results.append(result)

    session = PostureSession(clock=clock)
    scheduler = CalibrationScheduler(session, window_ms=30, on_complete=on_complete)
    scheduler.start()
    session.on_frame_during_calibration(with_metric(0.5))
    await asyncio.sleep(0.01)

    second = scheduler.start()
    session.on_frame_during_calibration(with_metric(0.3))
    result = await scheduler.wait()

    assert result.epoch == second
    assert result.baseline == pytest.approx(0.3)
    assert [r.epoch for r in results] == [second]


async def test_cancel(clock):
    session = PostureSession(clock=clock)
    scheduler = CalibrationScheduler(session, window_ms=1000)
    scheduler.start()
    scheduler.cancel()
    assert not scheduler.pending
    assert await scheduler.wait() is None
    assert session.state == SessionState.CALIBRATING


async def test_wait_without_start(clock):
    scheduler = CalibrationScheduler(PostureSession(clock=clock))
    assert await scheduler.wait() is None
