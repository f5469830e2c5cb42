import uuid
from datetime import datetime
from typing import Optional
from models.schemas import PostureEvaluation, PostureStatus, SessionSummary


class SessionManager:
    """
    Manages the lifecycle of a single posture monitoring session.
    Tracks good, bad and waiting time separately from evaluation timestamps.
    """
    # Maximum delta to prevent a stalled stream inflating the timers (seconds)
    MAX_DELTA_SEC = 0.5

    def __init__(self):
        self.session_id: Optional[str] = None
        self.start_time: Optional[datetime] = None
        self.good_time_sec: float = 0
        self.bad_time_sec: float = 0
        self.waiting_time_sec: float = 0
        self.frames_evaluated: int = 0
        self.alerts_fired: int = 0
        self.is_active: bool = False
        self.last_update_ms: Optional[float] = None

    def start(self) -> str:
        self.session_id = str(uuid.uuid4())
        self.start_time = datetime.now()
        self.good_time_sec = 0
        self.bad_time_sec = 0
        self.waiting_time_sec = 0
        self.frames_evaluated = 0
        self.alerts_fired = 0
        self.last_update_ms = None
        self.is_active = True
        return self.session_id

    def update_stats(self, evaluation: PostureEvaluation, now_ms: float):
        """Attribute the time since the previous frame to this frame's status."""
        if not self.is_active:
            return

        self.frames_evaluated += 1
        if evaluation.alert_fired:
            self.alerts_fired += 1

        if self.last_update_ms is not None:
            delta = max(0.0, min((now_ms - self.last_update_ms) / 1000, self.MAX_DELTA_SEC))
            if evaluation.status == PostureStatus.GOOD:
                self.good_time_sec += delta
            elif evaluation.status == PostureStatus.BAD:
                self.bad_time_sec += delta
            else:
                self.waiting_time_sec += delta
        self.last_update_ms = now_ms

    def stop(self) -> SessionSummary:
        self.is_active = False
        end_time = datetime.now()

        total_tracked = self.good_time_sec + self.bad_time_sec
        good_percentage = (self.good_time_sec / total_tracked * 100) if total_tracked > 0 else 100

        return SessionSummary(
            session_id=self.session_id,
            start_time=self.start_time,
            end_time=end_time,
            duration_minutes=(end_time - self.start_time).total_seconds() / 60.0,
            good_time_minutes=self.good_time_sec / 60.0,
            bad_time_minutes=self.bad_time_sec / 60.0,
            waiting_time_minutes=self.waiting_time_sec / 60.0,
            good_posture_percentage=round(good_percentage, 1),
            frames_evaluated=self.frames_evaluated,
            alerts_fired=self.alerts_fired,
        )
