"""Minimum-gap throttling of outbound provider calls."""

import asyncio
import time

from manuscript_ai.utils.logger import logger


class RateGate:
    """Serializes callers so consecutive releases are at least ``min_interval_seconds`` apart.

    Callers wait on a lock, so two racing calls each keep the gap relative to
    the last release rather than to the time they started waiting.
    """

    def __init__(self, min_interval_seconds: float = 3.5):
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be non-negative")
        self.min_interval_seconds = min_interval_seconds
        self._last_release: float | None = None
        self._lock = asyncio.Lock()

    @property
    def last_release(self) -> float | None:
        """Monotonic timestamp of the most recent release, if any."""
        return self._last_release

    async def throttle(self) -> None:
        """Wait until the minimum gap since the previous release has passed."""
        async with self._lock:
            if self._last_release is not None:
                elapsed = time.monotonic() - self._last_release
                remaining = self.min_interval_seconds - elapsed
                if remaining > 0:
                    logger.debug("[RATE_GATE] Waiting", wait_seconds=round(remaining, 3))
                    await asyncio.sleep(remaining)
            self._last_release = time.monotonic()
