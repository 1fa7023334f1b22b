"""
Per-key single-flight gate.

Concurrent callers asking for the same key share one in-flight call and all
observe its result. Once the call finishes the key is released, so a later
call starts a fresh one.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict


class SingleFlight:
    """Collapse concurrent identical calls into one."""

    def __init__(self):
        self._inflight: Dict[str, asyncio.Future] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._inflight

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> tuple[Any, bool]:
        """
        Run ``fn`` for ``key`` unless a call for it is already running.

        Returns:
            Tuple of (result, shared) where shared is True when this caller
            joined a call started by someone else.
        """
        future = self._inflight.get(key)
        if future is not None:
            return await asyncio.shield(future), True

        task = asyncio.ensure_future(fn())
        self._inflight[key] = task
        task.add_done_callback(lambda _: self._release(key, task))
        # A cancelled caller must not cancel the call other waiters share
        return await asyncio.shield(task), False

    def _release(self, key: str, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
