"""
Refresh Loop / Display Driver

Recomputes the current code of every account once per tick and hands the
result to a renderer. Codes are recomputed from scratch on every tick, so a
period boundary is always reflected on the first tick after it.

States: IDLE -> RUNNING -> STOPPED (terminal)

Time comes from an injectable clock and waiting goes through a
threading.Event, so tests can drive the loop with a fake clock and stop()
interrupts a wait immediately instead of after the next second.
"""

import math
import time
import threading
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .. import config
from ..exceptions import TotpCliError
from ..totp.engine import code_for_account

logger = logging.getLogger(__name__)


class LoopState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class CodeRow:
    """One account's line in a frame; `error` is set instead of `code` on failure."""

    name: str
    code: Optional[str]
    seconds_remaining: int
    period: int
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @property
    def progress(self):
        """Elapsed fraction of the current period, 0.0 to <1.0."""
        if not self.period:
            return 0.0
        return (self.period - self.seconds_remaining) / self.period


@dataclass(frozen=True)
class Frame:
    timestamp: int
    rows: Tuple[CodeRow, ...]


def build_row(account, timestamp):
    """
    Compute one row, degrading to an inline error for a bad record.
    """
    try:
        result = code_for_account(account, timestamp)
    except TotpCliError as e:
        logger.info(f"Could not compute code for '{account.name}': {e}")
        period = getattr(account.params, 'period', 0)
        return CodeRow(account.name, None, 0, period if isinstance(period, int) else 0, error=str(e))
    return CodeRow(result.name, result.code, result.seconds_remaining, account.params.period)


class RefreshLoop:
    """
    Drives periodic recomputation of all accounts' codes.

    Args:
        accounts: Accounts to display; copied into a read-only snapshot
        clock: Callable returning seconds since the epoch (time.time)
        interval (float): Seconds between frames, at most 1.0
    """

    def __init__(self, accounts, clock=time.time, interval=config.REFRESH_INTERVAL):
        if not 0 < interval <= 1.0:
            raise ValueError("interval must be in (0, 1] seconds")
        self.accounts = tuple(accounts)
        self.clock = clock
        self.interval = interval
        self.state = LoopState.IDLE
        self._stop_event = threading.Event()

    def frame_at(self, timestamp):
        """Compute the frame for a given time. Pure apart from logging."""
        timestamp = int(timestamp)
        return Frame(timestamp, tuple(build_row(account, timestamp) for account in self.accounts))

    def _next_deadline(self, now):
        # Align to the interval grid of the clock so frames never drift
        return (math.floor(now / self.interval) + 1) * self.interval

    def wait(self, seconds):
        """
        Sleep until the next tick or until stop() is called.

        Returns:
            bool: True if the loop was asked to stop
        """
        return self._stop_event.wait(max(seconds, 0))

    def stop(self):
        """Request cancellation from another thread."""
        self._stop_event.set()

    @property
    def stop_requested(self):
        return self._stop_event.is_set()

    def ticks(self):
        """
        Yield one Frame per tick until stop() is called.

        The first frame is produced immediately; each following frame is
        computed right after the next interval boundary of the clock.
        """
        while not self._stop_event.is_set():
            now = self.clock()
            yield self.frame_at(now)
            if self.wait(self._next_deadline(now) - self.clock()):
                break

    def run(self, renderer):
        """
        Run the display session until stop() or KeyboardInterrupt.

        The renderer gets start(), draw(frame) per tick and close(); close()
        always runs so the terminal is restored.

        Returns:
            int: Number of frames drawn
        """
        if self.state is not LoopState.IDLE:
            raise RuntimeError(f"refresh loop cannot start from state {self.state.value}")

        self.state = LoopState.RUNNING
        logger.debug(f"Refresh loop running for {len(self.accounts)} account(s)")
        frames = 0
        try:
            renderer.start()
            for frame in self.ticks():
                renderer.draw(frame)
                frames += 1
        except KeyboardInterrupt:
            logger.debug("Refresh loop interrupted by user")
            self.stop()
        finally:
            self.state = LoopState.STOPPED
            renderer.close()
            logger.debug(f"Refresh loop stopped after {frames} frame(s)")
        return frames
