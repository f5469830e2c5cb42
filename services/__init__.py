"""
Services package for PostureGuard.
Provides calibration scheduling, session statistics, voice alerts and dashboard text.
"""

from services.calibration_scheduler import CalibrationScheduler
from services.session_manager import SessionManager
from services.voice_alert import VoiceAlertGenerator, voice_alerts
from services.display import sensitivity_label, deviation_score, status_text

__all__ = [
    'CalibrationScheduler',
    'SessionManager',
    'VoiceAlertGenerator',
    'voice_alerts',
    'sensitivity_label',
    'deviation_score',
    'status_text',
]
