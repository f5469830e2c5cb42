from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
import asyncio
import json
import math
import time
from typing import Dict
from core.posture_analyzer import PostureSession
from models.schemas import CalibrationResult, Landmark, PostureEvaluation, SessionState
from services.calibration_scheduler import CalibrationScheduler
from services.display import deviation_score, sensitivity_label, status_text
from services.session_manager import SessionManager
from services.voice_alert import voice_alerts
from middleware.security import get_client_ip, validate_websocket_origin
from utils.debug import debug_log
import config as cfg

router = APIRouter()

# Constants
WEBSOCKET_TIMEOUT = 60.0  # Seconds to wait for message
MAX_MESSAGE_SIZE = 65536  # 64KB max message size
MAX_LANDMARKS_SIZE = 33  # MediaPipe has 33 pose landmarks


# === RATE LIMITER ===

class RateLimiter:
    """Simple rate limiter to prevent message spam."""
    def __init__(self, max_messages: int = 10, window_seconds: float = 1.0):
        self.max_messages = max_messages
        self.window_seconds = window_seconds
        self.messages: list = []

    def is_allowed(self) -> bool:
        """Returns True if message is allowed, False if rate limited."""
        now = time.time()
        self.messages = [t for t in self.messages if now - t < self.window_seconds]

        if len(self.messages) >= self.max_messages:
            return False

        self.messages.append(now)
        return True


# === UTILITY FUNCTIONS ===

def parse_landmarks(raw_landmarks) -> Dict[int, Dict[str, float]]:
    """
    Convert client landmarks to the int-keyed dict used by the session.

    Accepts either a list in landmark-index order (MediaPipe's poseLandmarks)
    or a dict keyed by index strings. Invalid entries are dropped, so a
    partial detection simply yields a partial mapping.
    """
    if isinstance(raw_landmarks, list):
        raw_landmarks = {str(i): lm for i, lm in enumerate(raw_landmarks)}
    if not isinstance(raw_landmarks, dict) or len(raw_landmarks) > MAX_LANDMARKS_SIZE * 2:
        return {}

    landmarks = {}
    for i in range(MAX_LANDMARKS_SIZE):
        lm = raw_landmarks.get(str(i))
        if not isinstance(lm, dict):
            continue
        try:
            parsed = Landmark(**lm)
        except (ValidationError, TypeError):
            continue
        if not (math.isfinite(parsed.x) and math.isfinite(parsed.y)):
            continue
        # Coordinates should be normalized 0-1, allow off-frame points
        if -10 <= parsed.x <= 10 and -10 <= parsed.y <= 10:
            landmarks[i] = {'x': parsed.x, 'y': parsed.y, 'visibility': parsed.visibility}
    return landmarks


def parse_threshold(value) -> float:
    """Parse a threshold from the client. Raises ValueError for non-finite or non-numeric input."""
    if isinstance(value, bool):
        raise ValueError("Threshold must be a number")
    threshold = float(value)
    if not math.isfinite(threshold):
        raise ValueError("Threshold must be finite")
    return threshold


def status_payload(session: PostureSession, evaluation: PostureEvaluation) -> Dict:
    return {
        "status": evaluation.status.value,
        "deviation": evaluation.deviation,
        "score": deviation_score(evaluation.deviation),
        "text": status_text(evaluation.status, session.state),
    }


def state_payload(session: PostureSession, audio_enabled: bool) -> Dict:
    return {
        "state": session.state.value,
        "baseline": session.baseline,
        "threshold": session.threshold,
        "sensitivity": sensitivity_label(session.threshold),
        "epoch": session.epoch,
        "audio_enabled": audio_enabled,
    }


# === CONNECTION LIMITER ===

class ConnectionLimiter:
    """Limits concurrent WebSocket connections per IP to prevent resource exhaustion."""

    def __init__(self, max_per_ip: int = 5):
        self.max_per_ip = max_per_ip
        self.connections: Dict[str, int] = {}

    def can_connect(self, websocket: WebSocket) -> bool:
        ip = get_client_ip(websocket)
        return self.connections.get(ip, 0) < self.max_per_ip

    def add_connection(self, websocket: WebSocket) -> str:
        """Track a new connection. Returns the IP."""
        ip = get_client_ip(websocket)
        self.connections[ip] = self.connections.get(ip, 0) + 1
        return ip

    def remove_connection(self, ip: str):
        if ip in self.connections:
            self.connections[ip] -= 1
            if self.connections[ip] <= 0:
                del self.connections[ip]


# Global connection limiter
connection_limiter = ConnectionLimiter(max_per_ip=cfg.WS_MAX_CONNECTIONS_PER_IP)


# === WEBSOCKET ENDPOINT ===

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    if not validate_websocket_origin(websocket):
        await websocket.close(code=4000, reason="Connection rejected")
        return

    if not connection_limiter.can_connect(websocket):
        await websocket.close(code=4000, reason="Connection rejected")
        return

    await websocket.accept()
    client_ip = connection_limiter.add_connection(websocket)

    # One session per connection, calibration lives only as long as the socket
    session = PostureSession()
    session_manager = SessionManager()
    frame_limiter = RateLimiter(max_messages=cfg.WS_MAX_FRAMES_PER_SECOND, window_seconds=1.0)
    audio_enabled = True

    async def on_calibration_complete(result: CalibrationResult):
        if result.success:
            await websocket.send_json({
                "type": "calibration_complete",
                "data": {"baseline": result.baseline, "frames_used": result.frames_used, "epoch": result.epoch}
            })
        else:
            await websocket.send_json({
                "type": "calibration_failed",
                "data": {
                    "message": "Calibration failed. Please ensure you are visible to the camera and try again.",
                    "epoch": result.epoch,
                    "state": session.state.value,
                }
            })

    scheduler = CalibrationScheduler(session, window_ms=cfg.CALIBRATION_WINDOW_MS,
                                     on_complete=on_calibration_complete)

    try:
        while True:
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=WEBSOCKET_TIMEOUT
                )
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "ping"})
                continue

            if len(data) > MAX_MESSAGE_SIZE:
                continue

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                continue

            if not isinstance(message, dict):
                continue
            action = message.get('action')
            if not action or not isinstance(action, str) or len(action) > 50:
                continue

            if action == 'start_calibration':
                epoch = scheduler.start()
                await websocket.send_json({
                    "type": "calibration_started",
                    "data": {"epoch": epoch, "window_ms": scheduler.window_ms}
                })

            elif action == 'landmarks':
                # Only the frame stream is throttled, control actions always go through
                if not frame_limiter.is_allowed():
                    continue

                landmarks = parse_landmarks(message.get('landmarks', {}))
                now = session.clock()
                evaluation = session.process_frame(landmarks, now)

                if session.state == SessionState.CALIBRATING:
                    await websocket.send_json({
                        "type": "calibration_progress",
                        "data": session.calibration_progress
                    })
                    continue

                session_manager.update_stats(evaluation, now)

                if evaluation.alert_fired:
                    audio_url = await voice_alerts.generate_audio() if audio_enabled else None
                    await websocket.send_json({
                        "type": "alert",
                        "data": {"message": cfg.ALERT_MESSAGE, "audio_url": audio_url}
                    })

                await websocket.send_json({
                    "type": "status",
                    "data": status_payload(session, evaluation)
                })

            elif action == 'set_threshold':
                try:
                    threshold = parse_threshold(message.get('value'))
                except (TypeError, ValueError):
                    await websocket.send_json({
                        "type": "threshold_rejected",
                        "data": {"threshold": session.threshold}
                    })
                    continue

                session.set_threshold(threshold)
                await websocket.send_json({
                    "type": "threshold_updated",
                    "data": {"threshold": threshold, "label": sensitivity_label(threshold)}
                })

            elif action == 'start_session':
                session_id = session_manager.start()
                debug_log(f"[SESSION] Started: {session_id}")
                await websocket.send_json({"type": "session_started", "data": {"session_id": session_id}})

            elif action == 'stop_session':
                if not session_manager.is_active:
                    continue
                summary = session_manager.stop()
                debug_log(f"[SESSION] Stopped: {summary.session_id}")
                await websocket.send_json({"type": "session_stopped", "data": summary.model_dump(mode="json")})

            elif action == 'toggle_audio':
                enabled = message.get('enabled', True)
                if isinstance(enabled, bool):
                    audio_enabled = enabled

            elif action == 'get_state':
                await websocket.send_json({"type": "state", "data": state_payload(session, audio_enabled)})

            elif action == 'pong':
                pass

    except WebSocketDisconnect:
        debug_log("[WS] Client disconnected")
    except Exception as e:
        debug_log(f"[WS] Connection error: {e}")
    finally:
        scheduler.cancel()
        connection_limiter.remove_connection(client_ip)
