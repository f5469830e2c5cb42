from typing import Dict, Optional
from core.posture_metric import compute_metric
from core.presence import is_person_present


class Calibrator:
    """
    Accumulates the posture metric over the calibration window.

    Frames without a confidently present person, or without the landmarks
    needed for the metric, are skipped rather than rejected. The baseline is
    the plain mean of everything that was collected.
    """

    def __init__(self):
        self.total: float = 0.0
        self.count: int = 0

    def reset(self):
        self.total = 0.0
        self.count = 0

    def add_frame(self, landmarks: Dict[int, Dict[str, float]]) -> bool:
        """Add a frame. Returns True if it contributed to the baseline."""
        if not is_person_present(landmarks):
            return False

        metric = compute_metric(landmarks)
        if metric is None:
            return False

        self.total += metric
        self.count += 1
        return True

    def progress(self) -> Dict:
        return {'count': self.count}

    def finalize(self) -> Optional[float]:
        """
        Mean metric of the collected frames, or None if nothing was collected.
        The accumulator is cleared in both cases.
        """
        baseline = self.total / self.count if self.count > 0 else None
        self.reset()
        return baseline
