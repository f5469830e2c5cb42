"""Dashboard text for the posture status panel."""

from models.schemas import PostureStatus, SessionState


def sensitivity_label(threshold: float) -> str:
    if threshold < 0.02:
        return "Extreme"
    if threshold < 0.05:
        return "High"
    return "Medium"


def deviation_score(deviation: float) -> float:
    """Deviation as shown to the user (lower is better)."""
    return round(deviation * 100, 1)


def status_text(status: PostureStatus, state: SessionState) -> str:
    if state == SessionState.CALIBRATING:
        return "Calibrating..."
    if state == SessionState.UNCALIBRATED:
        return "Not Calibrated"
    if status == PostureStatus.GOOD:
        return "Good Posture"
    if status == PostureStatus.BAD:
        return "Poor Posture"
    return "No Person Detected"
