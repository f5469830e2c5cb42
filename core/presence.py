"""Confidence-gated person presence check."""

from typing import Dict
from models.schemas import PoseLandmark
import config as cfg


def is_visible(landmarks: Dict[int, Dict[str, float]], idx: int) -> bool:
    """True if the landmark exists and its visibility is above the cutoff."""
    lm = landmarks.get(idx)
    if not lm:
        return False
    visibility = lm.get('visibility')
    if visibility is None:
        return False
    return visibility > cfg.VISIBILITY_THRESHOLD


def is_person_present(landmarks: Dict[int, Dict[str, float]]) -> bool:
    """
    A person is present when:
    1. the nose is visible AND
    2. at least one ear is visible AND
    3. both shoulders are visible.

    Guards calibration and evaluation against an empty scene, non-human
    objects and a user who has walked away.
    """
    nose_visible = is_visible(landmarks, PoseLandmark.NOSE)
    ear_visible = (is_visible(landmarks, PoseLandmark.LEFT_EAR)
                   or is_visible(landmarks, PoseLandmark.RIGHT_EAR))
    shoulders_visible = (is_visible(landmarks, PoseLandmark.LEFT_SHOULDER)
                         and is_visible(landmarks, PoseLandmark.RIGHT_SHOULDER))

    return nose_visible and ear_visible and shoulders_visible
