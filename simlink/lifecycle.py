"""Start/stop control of the remote simulation."""

import logging
import time
from typing import Callable

from simlink.connection import Connection
from simlink.sentinels import read_int, status_from_result
from simlink.state_monitor import StateMonitor
from simlink.transport import START_SIMULATION, STOP_SIMULATION, ServiceEndpoint
from simlink.types import CallStatus, SimulationState

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT = 5.0
DEFAULT_WAIT_POLL = 0.05


class SimulationController:
    """Issues start/stop requests and reports the observed run state.

    ``start()`` and ``stop()`` never touch the run state themselves. A caller
    can see ``start() is True`` while ``is_running()`` is still False until the
    engine's state notification arrives and is drained.
    """

    def __init__(self, connection: Connection, monitor: StateMonitor):
        self._connection = connection
        self._monitor = monitor

    def start(self) -> bool:
        """Start or unpause the simulation. False iff the engine replied -1.

        There is no separate unpause request; a paused simulation is resumed
        with ``start()`` as well.
        """
        return bool(self._call(START_SIMULATION, self._connection.start_simulation))

    def stop(self) -> bool:
        """Stop the simulation. False iff the engine replied -1."""
        return bool(self._call(STOP_SIMULATION, self._connection.stop_simulation))

    def _call(self, operation: str, endpoint: ServiceEndpoint) -> CallStatus:
        response = endpoint({})
        status = status_from_result(read_int(response, "result", operation))
        if status is CallStatus.FAILED:
            logger.warning("%s rejected by engine", operation)
        else:
            logger.info("%s accepted", operation)
        return status

    def state(self) -> SimulationState:
        return self._monitor.drain_and_read()

    def is_running(self) -> bool:
        """Drain pending notifications and report whether the engine is running."""
        return self._monitor.is_running()

    def wait_until_running(
        self, timeout: float = DEFAULT_WAIT_TIMEOUT, poll_interval: float = DEFAULT_WAIT_POLL
    ) -> bool:
        return self._wait_for(lambda s: s is SimulationState.RUNNING, timeout, poll_interval)

    def wait_until_stopped(
        self, timeout: float = DEFAULT_WAIT_TIMEOUT, poll_interval: float = DEFAULT_WAIT_POLL
    ) -> bool:
        return self._wait_for(lambda s: s is SimulationState.STOPPED, timeout, poll_interval)

    def _wait_for(
        self, predicate: Callable[[SimulationState], bool], timeout: float, poll_interval: float
    ) -> bool:
        """Drain repeatedly until ``predicate`` holds or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        while True:
            if predicate(self._monitor.drain_and_read()):
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Timed out after %.2fs waiting for simulation state", timeout)
                return False
            time.sleep(min(poll_interval, remaining))
