from __future__ import annotations

import asyncio
from typing import Protocol

FRAME_INTERVAL_SECONDS = 1 / 60


class Scheduler(Protocol):
    """Deferral primitives: one paint cycle, or a fixed duration."""

    async def next_frame(self) -> None: ...

    async def sleep(self, seconds: float) -> None: ...


class AsyncioScheduler:
    """Frame and timer deferral on the running asyncio loop."""

    def __init__(self, frame_interval: float = FRAME_INTERVAL_SECONDS) -> None:
        self.frame_interval = frame_interval

    async def next_frame(self) -> None:
        await asyncio.sleep(self.frame_interval)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(seconds, 0))


class ImmediateScheduler:
    """Resolves every deferral at once; counts what would have been waited for."""

    def __init__(self) -> None:
        self.frames = 0
        self.sleeps: list[float] = []

    async def next_frame(self) -> None:
        self.frames += 1

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


async def defer_frames(scheduler: Scheduler, count: int = 2) -> None:
    for _ in range(count):
        await scheduler.next_frame()


__all__ = ["AsyncioScheduler", "FRAME_INTERVAL_SECONDS", "ImmediateScheduler", "Scheduler", "defer_frames"]
