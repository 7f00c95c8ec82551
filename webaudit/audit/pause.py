"""Cooperative pause primitive for the module scheduler.

Pausing never interrupts a running module. The executor calls ``wait()``
between modules, which blocks for as long as the gate is paused.
"""

import logging
import threading


logger = logging.getLogger(__name__)


class PauseGate:
    """Pause flag that blocks waiters until resumed."""

    def __init__(self, poll_interval: float = 1.0):
        self.poll_interval = poll_interval
        self._resumed = threading.Event()
        self._resumed.set()

    @property
    def paused(self) -> bool:
        """Whether the gate is currently paused."""
        return not self._resumed.is_set()

    def pause(self) -> None:
        """Block subsequent ``wait()`` calls until ``resume()``."""
        self._resumed.clear()
        logger.info("Scan paused")

    def resume(self) -> None:
        """Release every waiter."""
        self._resumed.set()
        logger.info("Scan resumed")

    def wait(self) -> None:
        """Block while paused, re-checking every ``poll_interval`` seconds."""
        while self.paused:
            self._resumed.wait(self.poll_interval)
