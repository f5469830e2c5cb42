"""
Calibration window scheduling.

Each start() opens a new calibration epoch on the session and schedules a
single finalize for it. Starting again cancels the pending task, and the
finalize itself carries its epoch, so an old window can never close a new one.
"""

import asyncio
from typing import Awaitable, Callable, Optional
from core.posture_analyzer import PostureSession
from models.schemas import CalibrationResult
from utils.debug import debug_log
import config as cfg


CompletionCallback = Callable[[CalibrationResult], Awaitable[None]]


class CalibrationScheduler:

    def __init__(self, session: PostureSession,
                 window_ms: float = cfg.CALIBRATION_WINDOW_MS,
                 on_complete: Optional[CompletionCallback] = None):
        self.session = session
        self.window_ms = window_ms
        self.on_complete = on_complete
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> int:
        """Begin calibrating and schedule the finalize. Must run inside an event loop."""
        self.cancel()
        epoch = self.session.start_calibration()
        self._task = asyncio.create_task(self._finalize_after_window(epoch))
        return epoch

    def cancel(self):
        if self.pending:
            self._task.cancel()
        self._task = None

    async def wait(self) -> Optional[CalibrationResult]:
        """Wait for the pending window to close. Returns None if nothing is pending or it was cancelled."""
        if self._task is None:
            return None
        try:
            return await self._task
        except asyncio.CancelledError:
            return None

    async def _finalize_after_window(self, epoch: int) -> CalibrationResult:
        await asyncio.sleep(self.window_ms / 1000)

        frames_used = self.session.calibration_progress['count']
        success = self.session.finalize_calibration(epoch)
        result = CalibrationResult(
            success=success,
            epoch=epoch,
            baseline=self.session.baseline if success else None,
            frames_used=frames_used if success else 0,
        )

        if not success:
            debug_log(f"[CALIBRATION] Window {epoch} closed without a baseline")

        if self.on_complete:
            await self.on_complete(result)
        return result
