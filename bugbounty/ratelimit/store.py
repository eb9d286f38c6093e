"""
Window counter storage for rate limiting.

The policy code only needs two operations: count a hit inside a window
(atomically, returning the new count) and give a hit back. The default
implementation delegates to an asyncio `limits` storage backend, whose
increment is atomic and never blocks the event loop.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from limits.aio.storage import Storage
from limits.storage import storage_from_string

ASYNC_SCHEME_PREFIX = "async+"


@dataclass(frozen=True)
class WindowState:
    """Counter value right after an increment or refund."""

    count: int
    reset_at: float  # epoch seconds at which the window expires


class WindowStore(ABC):
    """Counted, time-windowed state keyed by client identity."""

    @abstractmethod
    async def increment(self, key: str, window_seconds: int) -> WindowState:
        """Count one hit; the window starts with the first hit."""

    @abstractmethod
    async def refund(self, key: str) -> WindowState:
        """Give one hit back (never below zero)."""


def async_storage_uri(uri: str) -> str:
    """memory://, redis://... map to their asyncio variants."""
    return uri if uri.startswith(ASYNC_SCHEME_PREFIX) else ASYNC_SCHEME_PREFIX + uri


class LimitsWindowStore(WindowStore):
    """WindowStore over an asyncio `limits` storage backend (memory by default)."""

    def __init__(self, storage: Storage | None = None, uri: str = "memory://"):
        self.storage = storage if storage is not None else storage_from_string(async_storage_uri(uri))

    async def increment(self, key: str, window_seconds: int) -> WindowState:
        count = await self.storage.incr(key, window_seconds)
        return WindowState(count=count, reset_at=await self.storage.get_expiry(key))

    async def refund(self, key: str) -> WindowState:
        count = await self.storage.decr(key)
        return WindowState(count=count, reset_at=await self.storage.get_expiry(key))
