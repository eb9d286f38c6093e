"""
Rate admission control.

Per-IP fixed windows, configured per endpoint class:

    general   15 min  100  every API route
    auth      15 min    5  register / login, failed attempts only
    report     1 hour  10  report submission
    program   24 hours  5  program creation

Admission runs before authentication. Limited responses always carry
RateLimit-Limit / RateLimit-Remaining / RateLimit-Reset, counted after
any refund; a rejected request gets a 429 with {error, retryAfter}.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from bugbounty.core.errors import RateLimited, error_response
from bugbounty.ratelimit.store import WindowState, WindowStore

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (307, 308)


# =============================================================================
# Limiter configuration
# =============================================================================


@dataclass(frozen=True)
class LimitRule:
    """One independently counted window."""

    name: str
    window_seconds: int
    max_requests: int
    message: str
    retry_after: str
    skip_successful: bool = False


GENERAL_LIMIT = LimitRule(
    name="general",
    window_seconds=15 * 60,
    max_requests=100,
    message="Too many requests from this IP, please try again later.",
    retry_after="15 minutes",
)

AUTH_LIMIT = LimitRule(
    name="auth",
    window_seconds=15 * 60,
    max_requests=5,
    message="Too many authentication attempts from this IP, please try again later.",
    retry_after="15 minutes",
    skip_successful=True,
)

REPORT_LIMIT = LimitRule(
    name="report",
    window_seconds=60 * 60,
    max_requests=10,
    message="Too many reports submitted from this IP, please try again later.",
    retry_after="1 hour",
)

PROGRAM_LIMIT = LimitRule(
    name="program",
    window_seconds=24 * 60 * 60,
    max_requests=5,
    message="Too many programs created from this IP, please try again tomorrow.",
    retry_after="24 hours",
)

# (method, path below the API prefix) -> rule
ROUTE_LIMITS: dict[tuple[str, str], LimitRule] = {
    ("POST", "/auth/register"): AUTH_LIMIT,
    ("POST", "/auth/login"): AUTH_LIMIT,
    ("POST", "/reports"): REPORT_LIMIT,
    ("POST", "/programs"): PROGRAM_LIMIT,
}


class RateLimitPolicy:
    """Decides which windows a request counts against."""

    def __init__(
        self,
        store: WindowStore,
        prefix: str = "/api",
        general: LimitRule | None = GENERAL_LIMIT,
        routes: dict[tuple[str, str], LimitRule] | None = None,
    ):
        self.store = store
        self.prefix = prefix.rstrip("/")
        self.general = general
        self.routes = ROUTE_LIMITS if routes is None else routes

    def rules_for(self, method: str, path: str) -> list[LimitRule]:
        """Applicable rules, broadest first."""
        path = path.rstrip("/") or "/"
        if path != self.prefix and not path.startswith(self.prefix + "/"):
            return []

        rules = [self.general] if self.general else []
        specific = self.routes.get((method.upper(), path[len(self.prefix):]))
        if specific:
            rules.append(specific)
        return rules


def rate_limit_headers(rule: LimitRule, state: WindowState) -> dict[str, str]:
    reset_in = max(0, math.ceil(state.reset_at - time.time()))
    return {
        "RateLimit-Limit": str(rule.max_requests),
        "RateLimit-Remaining": str(max(0, rule.max_requests - state.count)),
        "RateLimit-Reset": str(reset_in),
    }


def get_client_ip(request: Request, trust_proxy_headers: bool = False) -> str:
    """Client address, honouring X-Forwarded-For only behind a trusted proxy."""
    if trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


# =============================================================================
# Middleware
# =============================================================================


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Counts every limited request before it reaches authentication."""

    def __init__(self, app, policy: RateLimitPolicy, trust_proxy_headers: bool = False):
        super().__init__(app)
        self.policy = policy
        self.trust_proxy_headers = trust_proxy_headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rules = self.policy.rules_for(request.method, request.url.path)
        if not rules:
            return await call_next(request)

        client_ip = get_client_ip(request, self.trust_proxy_headers)
        counted: list[tuple[LimitRule, str, WindowState]] = []

        for rule in rules:
            key = f"{rule.name}:{client_ip}"
            state = await self.policy.store.increment(key, rule.window_seconds)
            counted.append((rule, key, state))

            if state.count > rule.max_requests:
                logger.warning(
                    "Rate limit '%s' exceeded by %s on %s %s",
                    rule.name,
                    client_ip,
                    request.method,
                    request.url.path,
                )
                headers = rate_limit_headers(rule, state)
                headers["Retry-After"] = headers["RateLimit-Reset"]
                return error_response(RateLimited(rule.message, rule.retry_after), headers=headers)

        response = await call_next(request)

        # A slash redirect is answered again at its target and counted there.
        redirected = response.status_code in REDIRECT_STATUSES
        for i, (rule, key, state) in enumerate(counted):
            if redirected or (rule.skip_successful and response.status_code < 400):
                counted[i] = (rule, key, await self.policy.store.refund(key))

        rule, _, state = counted[-1]
        response.headers.update(rate_limit_headers(rule, state))
        return response
