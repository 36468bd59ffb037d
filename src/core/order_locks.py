"""Per-order asyncio locks serializing status updates within one process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class _LockEntry:
    """A lock plus the number of tasks holding or waiting on it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class OrderLockRegistry:
    """Registry of locks keyed by order id.

    Entries are created on first use and dropped as soon as no task holds or
    waits for them, so the registry only grows with in-flight updates.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _LockEntry] = {}

    @asynccontextmanager
    async def hold(self, order_id: str) -> AsyncIterator[None]:
        """Hold the lock for an order for the duration of the block."""
        key = str(order_id)
        entry = self._entries.get(key)
        if entry is None:
            entry = _LockEntry()
            self._entries[key] = entry
        entry.users += 1

        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


# Global registry instance
_order_locks: OrderLockRegistry | None = None


def get_order_locks() -> OrderLockRegistry:
    """Get or create the global order lock registry."""
    global _order_locks
    if _order_locks is None:
        _order_locks = OrderLockRegistry()
    return _order_locks
