"""Simulator run-state tracking.

Notifications are pushed from the transport's delivery context into a queue.
Only ``drain_and_read`` applies them, so the cached state has a single writer;
the lock makes the cached value safe to read from any thread.
"""

import logging
import queue
import threading
from typing import Any, Dict, Optional

from simlink.types import SimulationState

logger = logging.getLogger(__name__)


class StateMonitor:
    """Owns the last-observed SimulationState."""

    def __init__(self) -> None:
        self._pending: "queue.Queue[int]" = queue.Queue()
        self._lock = threading.Lock()
        self._state = SimulationState.STOPPED
        self._last_status_code: Optional[int] = None

    def on_notification(self, message: Dict[str, Any]) -> None:
        """Transport callback for the simulator state topic.

        Accepts ``{"simulatorState": {"data": code}}`` as published by the
        engine, or a flat ``{"simulatorState": code}``.
        """
        raw = message.get("simulatorState")
        if isinstance(raw, dict):
            raw = raw.get("data")
        if isinstance(raw, bool) or not isinstance(raw, int):
            logger.warning("Ignoring state notification without an integer status code: %r", message)
            return
        self.push_status(raw)

    def push_status(self, code: int) -> None:
        """Enqueue a raw status code."""
        self._pending.put(code)

    def drain_and_read(self) -> SimulationState:
        """Apply the newest pending notification and return the cached state.

        Never blocks. With nothing pending the previous state is returned.
        Draining happens under the lock so concurrent readers cannot apply
        notifications out of order.
        """
        with self._lock:
            latest: Optional[int] = None
            drained = 0
            while True:
                try:
                    latest = self._pending.get_nowait()
                except queue.Empty:
                    break
                drained += 1

            if latest is not None:
                previous = self._state
                self._state = SimulationState.from_status_code(latest)
                self._last_status_code = latest
                if self._state is not previous:
                    logger.info(
                        "Simulation state %s -> %s (code %d, %d notifications drained)",
                        previous.value,
                        self._state.value,
                        latest,
                        drained,
                    )
            return self._state

    def snapshot(self) -> SimulationState:
        """Cached state without draining."""
        with self._lock:
            return self._state

    @property
    def last_status_code(self) -> Optional[int]:
        with self._lock:
            return self._last_status_code

    def is_running(self) -> bool:
        return self.drain_and_read() is SimulationState.RUNNING
