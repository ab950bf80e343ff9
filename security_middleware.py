"""
Request guard for the public schedule API.

Features:
- Sliding-window rate limiting per client IP
- Scanner path detection (404, counted as a failure)
- Temporary IP blocking after repeated failures or rate abuse
- Whitelist for private networks and localhost
"""

import ipaddress
import logging
import os
import time
from collections import deque
from typing import Deque, Dict, Iterable, Optional, Tuple

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))  # seconds
BLOCK_DURATION = int(os.getenv("BLOCK_DURATION", "900"))  # seconds
MAX_FAILED_REQUESTS = int(os.getenv("MAX_FAILED_REQUESTS", "10"))

EXEMPT_PATHS = frozenset({"/health"})

SUSPICIOUS_PATTERNS = (
    '/admin', '/login', '/manage', '/cgi-bin',
    '/wp-', '/phpmyadmin', '/mysql', '/.env', '/.git',
    '.php', '.asp', '.aspx', '.jsp',
    '/console', '/user/login',
    '/%2b', '%20', '%2f',
)

WHITELISTED_NETWORKS = (
    ipaddress.ip_network('127.0.0.0/8'),
    ipaddress.ip_network('10.0.0.0/8'),
    ipaddress.ip_network('172.16.0.0/12'),
    ipaddress.ip_network('192.168.0.0/16'),
)


def is_whitelisted(ip: Optional[str], networks: Iterable = WHITELISTED_NETWORKS) -> bool:
    if not ip:
        return False
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(addr in net for net in networks)


def is_suspicious_path(path: str) -> bool:
    lowered = path.lower()
    return any(pattern in lowered for pattern in SUSPICIOUS_PATTERNS)


class SecurityMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app,
        rate_limit: int = RATE_LIMIT_REQUESTS,
        window: int = RATE_LIMIT_WINDOW,
        block_duration: int = BLOCK_DURATION,
        max_failed: int = MAX_FAILED_REQUESTS,
    ):
        super().__init__(app)
        self.rate_limit = rate_limit
        self.window = window
        self.block_duration = block_duration
        self.max_failed = max_failed
        self.request_times: Dict[str, Deque[float]] = {}
        self.blocked_until: Dict[str, float] = {}
        # IP -> (failure count, time of last failure)
        self.failures: Dict[str, Tuple[int, float]] = {}
        self._last_prune = 0.0

    def _is_blocked(self, ip: str, now: float) -> bool:
        until = self.blocked_until.get(ip)
        if until is None:
            return False
        if now < until:
            return True
        del self.blocked_until[ip]
        self.failures.pop(ip, None)
        return False

    def _block(self, ip: str, now: float, reason: str) -> None:
        self.blocked_until[ip] = now + self.block_duration
        logger.warning(f"Blocked IP {ip} for {self.block_duration}s. Reason: {reason}")

    def _register_failure(self, ip: str, now: float) -> None:
        count, last = self.failures.get(ip, (0, now))
        if now - last >= self.window:
            count = 0
        count += 1
        self.failures[ip] = (count, now)
        if count >= self.max_failed:
            self._block(ip, now, f"Too many failed requests ({count})")

    def _over_rate_limit(self, ip: str, now: float) -> bool:
        times = self.request_times.setdefault(ip, deque())
        while times and now - times[0] >= self.window:
            times.popleft()
        if len(times) >= self.rate_limit:
            return True
        times.append(now)
        return False

    def _prune(self, now: float) -> None:
        """Drops state of IPs that went quiet. Runs at most once per window."""
        if now - self._last_prune < self.window:
            return
        self._last_prune = now

        for ip in [ip for ip, times in self.request_times.items() if not times or now - times[-1] >= self.window]:
            del self.request_times[ip]
        for ip in [ip for ip, (_, last) in self.failures.items() if now - last >= self.window and ip not in self.blocked_until]:
            del self.failures[ip]
        for ip in [ip for ip, until in self.blocked_until.items() if now >= until]:
            del self.blocked_until[ip]
            self.failures.pop(ip, None)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        client_ip = request.client.host if request.client else None

        if path in EXEMPT_PATHS or is_whitelisted(client_ip):
            return await call_next(request)

        ip = client_ip or "unknown"
        now = time.time()
        self._prune(now)

        if self._is_blocked(ip, now):
            logger.warning(f"Rejected request from blocked IP {ip} to {path}")
            return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": "Access forbidden"})

        if is_suspicious_path(path):
            logger.warning(f"Suspicious path detected: {ip} -> {path}")
            self._register_failure(ip, now)
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"})

        if self._over_rate_limit(ip, now):
            logger.warning(f"Rate limit exceeded for {ip}")
            self._block(ip, now, "Rate limit exceeded")
            return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content={"detail": "Too many requests"})

        response = await call_next(request)
        if response.status_code == status.HTTP_404_NOT_FOUND:
            self._register_failure(ip, now)
        return response
