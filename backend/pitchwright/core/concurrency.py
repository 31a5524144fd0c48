"""
Bounded fan-out for the two I/O stages of a run (research fetches and asset
resolution).

Each unit of work writes an ``Outcome`` into its own slot of a pre-sized list,
so nothing is shared between tasks.  A unit that fails or exceeds its own
timeout only affects its own slot; when the run deadline passes, units that
have not started are skipped and running ones are cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class Deadline:
    """Monotonic end-to-end deadline for one generation run."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0


@dataclass
class Outcome(Generic[R]):
    """Result of one unit of work: a value, or the error that replaced it."""

    value: R | None = None
    error: BaseException | None = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.timed_out


async def gather_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    limit: int,
    item_timeout: float,
    deadline: Deadline | None = None,
) -> list[Outcome[R]]:
    """Run *worker* over *items* with at most *limit* in flight.

    Returns one ``Outcome`` per item, in input order.
    """
    slots: list[Outcome[R]] = [Outcome(timed_out=True) for _ in items]
    if not items:
        return slots

    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(index: int, item: T) -> None:
        async with semaphore:
            if deadline is not None and deadline.expired:
                return  # slot stays timed out
            timeout = item_timeout
            if deadline is not None:
                timeout = min(timeout, deadline.remaining())
            try:
                value = await asyncio.wait_for(worker(item), timeout=timeout)
            except asyncio.TimeoutError:
                slots[index] = Outcome(timed_out=True)
            except Exception as exc:
                slots[index] = Outcome(error=exc)
            else:
                slots[index] = Outcome(value=value)

    tasks = [asyncio.create_task(_run(i, item)) for i, item in enumerate(items)]
    overall = deadline.remaining() if deadline is not None else None
    _done, pending = await asyncio.wait(tasks, timeout=overall)

    if pending:
        logger.warning("Run deadline reached; cancelling %d unfinished task(s)", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    return slots
