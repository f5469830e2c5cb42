from fastapi import APIRouter
from services.display import sensitivity_label
import config as cfg

router = APIRouter()


@router.get("/api/settings")
async def api_settings():
    """Values the dashboard needs to build its sensitivity slider and timers."""
    return {
        "threshold": {
            "default": cfg.DEFAULT_THRESHOLD,
            "min": cfg.THRESHOLD_MIN,
            "max": cfg.THRESHOLD_MAX,
            "step": cfg.THRESHOLD_STEP,
        },
        "bad_posture_delay_ms": cfg.BAD_POSTURE_DELAY_MS,
        "alert_cooldown_ms": cfg.ALERT_COOLDOWN_MS,
        "calibration_window_ms": cfg.CALIBRATION_WINDOW_MS,
        "visibility_threshold": cfg.VISIBILITY_THRESHOLD,
    }


@router.get("/api/sensitivity")
async def api_sensitivity(threshold: float):
    return {"threshold": threshold, "label": sensitivity_label(threshold)}
