from typing import Dict, Optional
from models.schemas import PoseLandmark


def _landmark_y(landmarks: Dict[int, Dict[str, float]], idx: int) -> Optional[float]:
    lm = landmarks.get(idx)
    if not lm:
        return None
    return lm.get('y')


def compute_metric(landmarks: Dict[int, Dict[str, float]]) -> Optional[float]:
    """
    Vertical distance between the nose and the shoulder midpoint.

    y grows downwards in frame coordinates, so sitting upright gives a larger
    value and a head that drops or comes forward shrinks it. Only positions are
    read here; visibility gating belongs to the presence check.
    Returns None when the nose or either shoulder is missing.
    """
    nose_y = _landmark_y(landmarks, PoseLandmark.NOSE)
    left_y = _landmark_y(landmarks, PoseLandmark.LEFT_SHOULDER)
    right_y = _landmark_y(landmarks, PoseLandmark.RIGHT_SHOULDER)

    if nose_y is None or left_y is None or right_y is None:
        return None

    shoulder_mid_y = (left_y + right_y) / 2
    return shoulder_mid_y - nose_y
