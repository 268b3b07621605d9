"""
Quai Antique API — Authentication Throttling Middleware
=========================================================

What:  Per-IP sliding-window limit on the credential endpoints
       (POST /api/login and POST /api/registration).
How:   Keeps the timestamps of recent attempts per client IP in memory;
       once `max_attempts` fall inside the last `window_seconds`, further
       attempts get 429 with a Retry-After header until the oldest expires.

Limits come from AUTH_RATE_LIMIT_REQUESTS / AUTH_RATE_LIMIT_WINDOW.
State is per process: with several workers each enforces its own window.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

THROTTLED_PATHS = {"/api/login", "/api/registration"}

# Idle clients are swept only once this many IPs are tracked
IDLE_SWEEP_THRESHOLD = 1024


class AuthThrottleMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app,
        max_attempts: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_attempts = max_attempts or settings.auth_rate_limit_requests
        self.window_seconds = window_seconds or settings.auth_rate_limit_window
        self._attempts: Dict[str, Deque[float]] = defaultdict(deque)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path not in THROTTLED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        attempts = self._attempts[client_ip]
        while attempts and attempts[0] <= now - self.window_seconds:
            attempts.popleft()

        if len(attempts) >= self.max_attempts:
            retry_after = int(attempts[0] + self.window_seconds - now) + 1
            logger.warning(
                "Authentication throttled for %s: %d attempts in %ds",
                client_ip,
                len(attempts),
                self.window_seconds,
            )
            error = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": error.message,
                    "details": error.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        attempts.append(now)
        if len(self._attempts) > IDLE_SWEEP_THRESHOLD:
            self._forget_idle_clients(now)
        return await call_next(request)

    def _forget_idle_clients(self, now: float) -> None:
        idle = [
            ip for ip, stamps in self._attempts.items()
            if not stamps or stamps[-1] <= now - self.window_seconds
        ]
        for ip in idle:
            del self._attempts[ip]
