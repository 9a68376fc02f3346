"""
Request Pacing

Sequential rate limiter shared by the scrapers and the geocoder. Every
external call in a stage goes through one limiter, so no two calls overlap
and consecutive calls are at least `interval` seconds apart.
"""
import time
from typing import Callable, Optional

from src.subastas.utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Minimum-interval limiter for strictly sequential callers.

    Nominatim and the BOE portal both expect a single client to keep a
    steady, low request rate.
    """

    def __init__(
        self,
        interval: float,
        name: str = "default",
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the limiter.

        Args:
            interval: Minimum seconds between two consecutive calls
            name: Label used in log entries
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
        """
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self.name = name
        self._sleep = sleep or time.sleep
        self._clock = clock or time.monotonic
        self._last_call: Optional[float] = None

    def wait(self) -> float:
        """
        Block until the next call is allowed.

        Returns:
            Seconds actually slept
        """
        now = self._clock()
        slept = 0.0
        if self._last_call is not None:
            remaining = self.interval - (now - self._last_call)
            if remaining > 0:
                self._sleep(remaining)
                slept = remaining
        self._last_call = self._clock()
        return slept

    def cooldown(self, seconds: float) -> None:
        """
        Back off after a provider error.

        The pause is taken in full, independent of the normal interval.
        """
        logger.debug("rate_limiter_cooldown", limiter=self.name, seconds=seconds)
        if seconds > 0:
            self._sleep(seconds)
        self._last_call = self._clock()
