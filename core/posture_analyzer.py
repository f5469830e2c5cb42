import math
import numbers
import time
from typing import Callable, Dict, Optional
from core.calibration import Calibrator
from core.posture_metric import compute_metric
from core.presence import is_person_present
from models.schemas import PostureEvaluation, PostureStatus, SessionState
from utils.debug import debug_log
import config as cfg


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class PostureSession:
    """
    Forward-head posture state machine for a single tracked user.

    Turns the noisy per-frame deviation from a calibrated baseline into a
    stable waiting/good/bad status:
    1. Presence gating - no person (or an unreadable frame) always means "waiting"
    2. Confirmation delay - bad posture must persist before the status flips
    3. Cooldown - alerts are rate limited, suppressed alerts are dropped

    The session never reads the wall clock on its own; timestamps (ms) are
    passed in or taken from the injected clock.
    """

    def __init__(self,
                 threshold: float = cfg.DEFAULT_THRESHOLD,
                 clock: Optional[Callable[[], float]] = None,
                 on_alert: Optional[Callable[[], None]] = None,
                 bad_posture_delay_ms: float = cfg.BAD_POSTURE_DELAY_MS,
                 alert_cooldown_ms: float = cfg.ALERT_COOLDOWN_MS):
        self.clock = clock or monotonic_ms
        self.on_alert = on_alert
        self.bad_posture_delay_ms = bad_posture_delay_ms
        self.alert_cooldown_ms = alert_cooldown_ms

        self._threshold = threshold
        self._state = SessionState.UNCALIBRATED
        self._baseline: Optional[float] = None
        self._calibrator = Calibrator()
        self._epoch = 0

        # State to restore if a recalibration collects nothing
        self._previous_state = SessionState.UNCALIBRATED
        self._previous_baseline: Optional[float] = None

        self.bad_posture_start_time: Optional[float] = None
        self.last_alert_time: Optional[float] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def baseline(self) -> Optional[float]:
        return self._baseline

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def is_calibrated(self) -> bool:
        return self._state == SessionState.CALIBRATED

    @property
    def calibration_progress(self) -> Dict:
        return self._calibrator.progress()

    # === CALIBRATION ===

    def start_calibration(self) -> int:
        """
        Begin a new calibration window. Returns the calibration epoch; a
        finalize carrying an older epoch is ignored.
        """
        if self._state != SessionState.CALIBRATING:
            self._previous_state = self._state
            self._previous_baseline = self._baseline

        self._calibrator.reset()
        self._baseline = None
        self._state = SessionState.CALIBRATING
        self.bad_posture_start_time = None
        self._epoch += 1

        debug_log(f"[CALIBRATION] Started (epoch {self._epoch})")
        return self._epoch

    def on_frame_during_calibration(self, landmarks: Dict[int, Dict[str, float]]) -> bool:
        if self._state != SessionState.CALIBRATING:
            return False
        return self._calibrator.add_frame(landmarks)

    def finalize_calibration(self, epoch: Optional[int] = None) -> bool:
        """
        Close the calibration window.
        Returns True if a baseline was set, False if no valid frames were
        collected (the previous state is restored) or the request is stale.
        """
        if self._state != SessionState.CALIBRATING:
            return False
        if epoch is not None and epoch != self._epoch:
            debug_log(f"[CALIBRATION] Ignoring stale finalize (epoch {epoch}, current {self._epoch})")
            return False

        frames_used = self._calibrator.count
        baseline = self._calibrator.finalize()

        if baseline is None:
            self._state = self._previous_state
            self._baseline = self._previous_baseline
            debug_log("[CALIBRATION] Failed: no valid frames processed")
            return False

        self._baseline = baseline
        self._state = SessionState.CALIBRATED
        self._previous_state = SessionState.CALIBRATED
        self._previous_baseline = baseline
        debug_log(f"[CALIBRATION] Finalized from {frames_used} frames. Baseline: {baseline:.4f}")
        return True

    def set_threshold(self, value: float):
        """Takes effect on the next evaluation. Range enforcement is up to the caller."""
        self._threshold = value

    # === EVALUATION ===

    def _waiting(self) -> PostureEvaluation:
        self.bad_posture_start_time = None
        return PostureEvaluation(status=PostureStatus.WAITING, deviation=0.0)

    def evaluate_frame(self, landmarks: Dict[int, Dict[str, float]],
                       now: Optional[float] = None) -> PostureEvaluation:
        if self._state != SessionState.CALIBRATED:
            return PostureEvaluation(status=PostureStatus.WAITING, deviation=0.0)

        if not is_person_present(landmarks):
            return self._waiting()

        metric = compute_metric(landmarks)
        if metric is None:
            return self._waiting()

        if now is None:
            now = self.clock()
        if isinstance(now, bool) or not isinstance(now, numbers.Real) or not math.isfinite(now):
            return self._waiting()

        # Positive deviation = head moved forward/down since calibration
        deviation = self._baseline - metric

        if deviation <= self._threshold:
            self.bad_posture_start_time = None
            return PostureEvaluation(status=PostureStatus.GOOD, deviation=deviation)

        if self.bad_posture_start_time is None:
            self.bad_posture_start_time = now
            return PostureEvaluation(status=PostureStatus.GOOD, deviation=deviation)

        if now - self.bad_posture_start_time <= self.bad_posture_delay_ms:
            return PostureEvaluation(status=PostureStatus.GOOD, deviation=deviation)

        alert_fired = self._try_alert(now)
        return PostureEvaluation(status=PostureStatus.BAD, deviation=deviation, alert_fired=alert_fired)

    def _try_alert(self, now: float) -> bool:
        if self.last_alert_time is not None and now - self.last_alert_time <= self.alert_cooldown_ms:
            return False

        self.last_alert_time = now
        if self.on_alert:
            self.on_alert()
        return True

    def process_frame(self, landmarks: Dict[int, Dict[str, float]],
                      now: Optional[float] = None) -> PostureEvaluation:
        """Route a frame to calibration or evaluation depending on the state."""
        if self._state == SessionState.CALIBRATING:
            self.on_frame_during_calibration(landmarks)
            return PostureEvaluation(status=PostureStatus.WAITING, deviation=0.0)
        return self.evaluate_frame(landmarks, now)
