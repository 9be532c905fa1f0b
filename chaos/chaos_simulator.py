"""
Chaos Simulator — artificial latency and probabilistic failure injection.

Two modes:
  • normal — order processing: 120 ms base delay, 10 % ProcessingError (500)
  • chaos  — fault-injection endpoint: 600 ms base delay, 30 % InjectedFailure (503)

Both add a uniform jitter in [50, 950) ms.  The delay is an ``await``,
so other requests keep running while one is suspended.
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable

from app.errors import InjectedFailure, ProcessingError

# ── Fixed model parameters ────────────────────────────────────────────────────

NORMAL_BASE_DELAY_MS = 120
CHAOS_BASE_DELAY_MS  = 600
JITTER_MIN_MS        = 50
JITTER_SPAN_MS       = 900

PROCESSING_FAILURE_RATE = 0.1
CHAOS_FAILURE_RATE      = 0.3


class ChaosSimulator:
    """
    Models a dependency with realistic latency and partial failure.

    ``rng`` and ``sleep`` are injectable so tests can pin the random draws
    and skip the wall-clock wait.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._rng   = rng or random.Random()
        self._sleep = sleep

    def delay_ms(self, chaos: bool = False) -> float:
        base = CHAOS_BASE_DELAY_MS if chaos else NORMAL_BASE_DELAY_MS
        return base + JITTER_MIN_MS + self._rng.random() * JITTER_SPAN_MS

    async def simulate_work(self, chaos: bool = False) -> None:
        """Wait out the simulated delay, then maybe raise an injected failure."""
        await self._sleep(self.delay_ms(chaos) / 1000.0)

        roll = self._rng.random()
        if chaos and roll < CHAOS_FAILURE_RATE:
            raise InjectedFailure("Injected chaos failure")
        if not chaos and roll < PROCESSING_FAILURE_RATE:
            raise ProcessingError("Random order processing error")
