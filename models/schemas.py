from enum import Enum, IntEnum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class PoseLandmark(IntEnum):
    """MediaPipe BlazePose landmark indices (33-point topology)."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


class PostureStatus(str, Enum):
    WAITING = "waiting"
    GOOD = "good"
    BAD = "bad"


class SessionState(str, Enum):
    UNCALIBRATED = "uncalibrated"
    CALIBRATING = "calibrating"
    CALIBRATED = "calibrated"


class Landmark(BaseModel):
    x: float
    y: float
    z: Optional[float] = None
    # Missing score means "not confidently located"
    visibility: float = Field(default=0.0, ge=0.0, le=1.0)


class PostureEvaluation(BaseModel):
    status: PostureStatus
    deviation: float = 0.0
    alert_fired: bool = False


class CalibrationResult(BaseModel):
    success: bool
    epoch: int
    baseline: Optional[float] = None
    frames_used: int = 0


class SessionSummary(BaseModel):
    session_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: float
    good_time_minutes: float
    bad_time_minutes: float
    waiting_time_minutes: float
    good_posture_percentage: float
    frames_evaluated: int
    alerts_fired: int
