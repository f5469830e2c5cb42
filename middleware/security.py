"""
Security middleware for PostureGuard

Implements:
- Security headers (X-Frame-Options, X-Content-Type-Options, etc.)
- Rate limiting per IP
- WebSocket origin validation
"""

import time
from collections import defaultdict
from typing import Callable, Dict, Tuple
from urllib.parse import urlparse
from fastapi import Request, Response, WebSocket
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import HTTPConnection
import config as cfg


def get_client_ip(connection: HTTPConnection) -> str:
    """Key used for the per-IP request budget and the WebSocket connection cap.

    The dashboard is usually served behind a proxy, so the first hop of
    X-Forwarded-For wins, then X-Real-IP, then the socket peer.
    """
    forwarded = connection.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    real_ip = connection.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    return connection.client.host if connection.client else "unknown"


# === RATE LIMITER ===

class IPRateLimiter:
    """
    IP-based rate limiter with sliding window.
    Tracks requests per IP address and blocks excessive traffic.
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        burst_limit: int = 20,
        block_duration_seconds: int = 60
    ):
        self.requests_per_minute = requests_per_minute
        self.burst_limit = burst_limit
        self.block_duration = block_duration_seconds

        self.request_log: Dict[str, list] = defaultdict(list)
        self.blocked_ips: Dict[str, float] = {}
        self.burst_tracker: Dict[str, Tuple[float, int]] = {}

    def is_allowed(self, ip: str, now: float = None) -> Tuple[bool, str]:
        """
        Check if a request from this IP is allowed.
        Returns (is_allowed, reason_if_blocked)
        """
        now = time.time() if now is None else now

        if ip in self.blocked_ips:
            if now < self.blocked_ips[ip]:
                remaining = int(self.blocked_ips[ip] - now)
                return False, f"Rate limited. Try again in {remaining} seconds."
            del self.blocked_ips[ip]

        # Burst: too many requests within one second
        last_burst_time, burst_count = self.burst_tracker.get(ip, (now, 0))
        if now - last_burst_time < 1.0:
            if burst_count >= self.burst_limit:
                self.blocked_ips[ip] = now + self.block_duration
                return False, "Too many requests. Please slow down."
            self.burst_tracker[ip] = (last_burst_time, burst_count + 1)
        else:
            self.burst_tracker[ip] = (now, 1)

        cutoff = now - 60
        self.request_log[ip] = [ts for ts in self.request_log[ip] if ts > cutoff]

        if len(self.request_log[ip]) >= self.requests_per_minute:
            self.blocked_ips[ip] = now + self.block_duration
            return False, "Rate limit exceeded. Please try again later."

        self.request_log[ip].append(now)
        return True, ""


rate_limiter = IPRateLimiter(
    requests_per_minute=cfg.RATE_LIMIT_REQUESTS_PER_MINUTE,
    burst_limit=cfg.RATE_LIMIT_BURST,
    block_duration_seconds=60
)


# === SECURITY HEADERS ===

def get_security_headers() -> Dict[str, str]:
    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        # Webcam access stays with the page itself
        "Permissions-Policy": "camera=(self), microphone=(), geolocation=(), payment=()",
        "Cache-Control": "no-store",
    }

    if cfg.ENVIRONMENT == "production":
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return headers


# === MIDDLEWARE ===

class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Security middleware that adds headers and enforces rate limiting.
    """

    BYPASS_PATHS = ("/static/", "/health")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if not path.startswith(self.BYPASS_PATHS):
            allowed, reason = rate_limiter.is_allowed(get_client_ip(request))
            if not allowed:
                return JSONResponse(
                    status_code=429,
                    content={"detail": reason},
                    headers={"Retry-After": "60"}
                )

        response = await call_next(request)

        for header, value in get_security_headers().items():
            response.headers[header] = value

        return response


def validate_websocket_origin(websocket: WebSocket) -> bool:
    """
    Reject cross-site WebSocket connections.
    Browsers always send Origin; non-browser clients may omit it.
    """
    if "*" in cfg.ALLOWED_ORIGINS:
        return True

    origin = websocket.headers.get("origin")
    if not origin:
        return True

    if origin in cfg.ALLOWED_ORIGINS:
        return True

    # Same-origin page served by this app
    host = websocket.headers.get("host", "")
    return urlparse(origin).netloc == host
