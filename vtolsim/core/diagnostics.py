"""
Console diagnostics with rate limiting.

Repeating warnings (airspeed clamp, time jumps, calibration progress)
fire every physics step while the condition holds, so they are printed
at most once per period of wall time.
"""

import time


class Throttle:
    """Print helper that drops messages arriving faster than ``period``."""

    def __init__(self, period: float = 1.0, clock=time.monotonic):
        self.period = period
        self._clock = clock
        self._next_time = None

    def ready(self) -> bool:
        """Return True (and start a new period) if a message may be printed now."""
        now = self._clock()
        if self._next_time is not None and now < self._next_time:
            return False
        self._next_time = now + self.period
        return True

    def print(self, message: str) -> bool:
        if not self.ready():
            return False
        print(message)
        return True
