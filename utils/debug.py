"""Console tracing for the posture server, silent outside development."""

import config as cfg


def debug_log(message: str):
    """Trace calibration, session and socket events, e.g. ``[CALIBRATION] ...``."""
    if cfg.ENVIRONMENT != "development":
        return
    print(message, flush=True)
