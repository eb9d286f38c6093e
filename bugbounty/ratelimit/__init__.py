"""
Rate admission control: per-IP windows per endpoint class.
"""

from bugbounty.ratelimit.store import LimitsWindowStore, WindowState, WindowStore
from bugbounty.ratelimit.limiter import (
    AUTH_LIMIT,
    GENERAL_LIMIT,
    PROGRAM_LIMIT,
    REPORT_LIMIT,
    ROUTE_LIMITS,
    LimitRule,
    RateLimitMiddleware,
    RateLimitPolicy,
    get_client_ip,
)

__all__ = [
    "WindowStore",
    "WindowState",
    "LimitsWindowStore",
    "LimitRule",
    "RateLimitPolicy",
    "RateLimitMiddleware",
    "get_client_ip",
    "GENERAL_LIMIT",
    "AUTH_LIMIT",
    "REPORT_LIMIT",
    "PROGRAM_LIMIT",
    "ROUTE_LIMITS",
]
