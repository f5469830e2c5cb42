import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Sensitivity (deviation threshold, normalized frame units)
# Lower = more sensitive. Bounds are UI recommendations, the session never clamps.
DEFAULT_THRESHOLD = float(os.getenv("DEFAULT_THRESHOLD", "0.05"))
THRESHOLD_MIN = 0.005
THRESHOLD_MAX = 0.1
THRESHOLD_STEP = 0.005

# Presence gating
VISIBILITY_THRESHOLD = 0.5

# Timing (milliseconds)
BAD_POSTURE_DELAY_MS = int(os.getenv("BAD_POSTURE_DELAY_MS", "2000"))
ALERT_COOLDOWN_MS = int(os.getenv("ALERT_COOLDOWN_MS", "5000"))
CALIBRATION_WINDOW_MS = int(os.getenv("CALIBRATION_WINDOW_MS", "3000"))

# Voice alerts
ALERT_MESSAGE = "Forward head posture detected. Please correct your posture."
VOICE = os.getenv("VOICE", "en-US-AriaNeural")
VOICE_RATE = "+0%"
VOICE_PITCH = "+0Hz"
AUDIO_CACHE_DIR = Path(os.getenv("AUDIO_CACHE_DIR", os.path.join(BASE_DIR, "static", "audio")))
AUDIO_URL_PREFIX = "/static/audio"

# CORS - Restrict in production
if ENVIRONMENT == "production":
    _origins = os.getenv("ALLOWED_ORIGINS", "")
    ALLOWED_ORIGINS = [o.strip() for o in _origins.split(",") if o.strip()]
else:
    # Development: allow all for testing
    ALLOWED_ORIGINS = ["*"]

# Rate limiting
RATE_LIMIT_REQUESTS_PER_MINUTE = int(os.getenv("RATE_LIMIT_RPM", "120"))
RATE_LIMIT_BURST = int(os.getenv("RATE_LIMIT_BURST", "30"))

# WebSocket limits
WS_MAX_FRAMES_PER_SECOND = int(os.getenv("WS_MAX_FRAMES_PER_SECOND", "60"))
WS_MAX_CONNECTIONS_PER_IP = int(os.getenv("WS_MAX_CONNECTIONS_PER_IP", "5"))
