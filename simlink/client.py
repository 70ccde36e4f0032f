"""SimulatorClient: one object exposing every engine operation.

Typical use::

    with SimulatorClient.from_config(SimLinkConfig.from_env()) as sim:
        sim.start()
        sim.wait_until_running()
        robot = sim.resolve("Robot")
        sim.move_object(robot, 1.0, 2.0, 0.5)
"""

import logging
from typing import Optional, Union

from simlink.config import SimLinkConfig
from simlink.connection import Connection, ConnectionManager, EndpointSpec
from simlink.handles import ObjectHandleResolver
from simlink.lifecycle import DEFAULT_WAIT_POLL, DEFAULT_WAIT_TIMEOUT, SimulationController
from simlink.scenes import (
    ChainedPackageResolver,
    ImportlibPackageResolver,
    PackagePathResolver,
    SceneLoader,
    StaticPackageResolver,
)
from simlink.spatial import HandlePolicy, SpatialManipulator
from simlink.state_monitor import StateMonitor
from simlink.transport import SimulatorTransport
from simlink.types import ObjectHandle, Pose, SceneReference, SimulationState

logger = logging.getLogger(__name__)


class SimulatorClient:
    """Facade wiring the connection, state monitor and operation components.

    Binding happens in the constructor and raises SimConnectionError if any
    endpoint cannot be bound.

    Args:
        transport: Engine transport
        config: Endpoint names and handle policy
        path_resolver: Package lookup for problem scenes; defaults to the
            configured package roots, then installed Python packages
        endpoint_spec: Explicit endpoint names overriding the config
    """

    def __init__(
        self,
        transport: SimulatorTransport,
        config: Optional[SimLinkConfig] = None,
        path_resolver: Optional[PackagePathResolver] = None,
        endpoint_spec: Optional[EndpointSpec] = None,
    ):
        self.config = config or SimLinkConfig()
        self.config.validate()
        self._transport = transport

        self.monitor = StateMonitor()
        self._manager = ConnectionManager(transport, self.monitor.on_notification, self.config)
        self.connection: Connection = self._manager.bind(endpoint_spec)

        if path_resolver is None:
            path_resolver = ChainedPackageResolver(
                StaticPackageResolver(self.config.package_roots),
                ImportlibPackageResolver(),
            )

        self.controller = SimulationController(self.connection, self.monitor)
        self.resolver = ObjectHandleResolver(self.connection)
        self.spatial = SpatialManipulator(
            self.connection, self.resolver, HandlePolicy(self.config.handle_policy)
        )
        self.scenes = SceneLoader(self.connection, path_resolver)

    @classmethod
    def from_config(cls, config: Optional[SimLinkConfig] = None, **kwargs) -> "SimulatorClient":
        """Build a client over HttpTransport."""
        from simlink.http_transport import HttpTransport

        config = config or SimLinkConfig()
        transport = HttpTransport(config)
        try:
            return cls(transport, config, **kwargs)
        except Exception:
            transport.close()
            raise

    def __enter__(self) -> "SimulatorClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._manager.close()
        self._transport.close()

    # Lifecycle

    def start(self) -> bool:
        return self.controller.start()

    def stop(self) -> bool:
        return self.controller.stop()

    def is_running(self) -> bool:
        return self.controller.is_running()

    def state(self) -> SimulationState:
        return self.controller.state()

    def wait_until_running(
        self, timeout: float = DEFAULT_WAIT_TIMEOUT, poll_interval: float = DEFAULT_WAIT_POLL
    ) -> bool:
        return self.controller.wait_until_running(timeout, poll_interval)

    def wait_until_stopped(
        self, timeout: float = DEFAULT_WAIT_TIMEOUT, poll_interval: float = DEFAULT_WAIT_POLL
    ) -> bool:
        return self.controller.wait_until_stopped(timeout, poll_interval)

    # Objects

    def resolve(self, name: str) -> ObjectHandle:
        return self.resolver.resolve(name)

    def move_object(self, target: Union[ObjectHandle, str], x: float, y: float, z: float) -> bool:
        return self.spatial.move_object(target, x, y, z)

    def copy_object(self, handle: ObjectHandle) -> ObjectHandle:
        return self.spatial.copy_object(handle)

    def get_pose(self, handle: ObjectHandle) -> Optional[Pose]:
        return self.spatial.get_pose(handle)

    # Scenes

    def load_scene(self, full_path: str) -> bool:
        return self.scenes.load(full_path)

    def load_problem_scene(self, problem_name: str, relative_path: str, package_name: str) -> bool:
        return self.scenes.load_problem_scene(problem_name, relative_path, package_name)

    def load_reference(self, reference: SceneReference) -> bool:
        return self.scenes.load_reference(reference)
