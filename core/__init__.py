"""Posture evaluation core: metric, presence gating, calibration and session state machine."""
