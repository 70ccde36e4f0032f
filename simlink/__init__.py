"""simlink: control client for a remote physics/robotics simulation engine.

This package provides:
- SimulatorClient: facade over every engine operation
- SimulationController, ObjectHandleResolver, SpatialManipulator, SceneLoader:
  the individual operation components
- StateMonitor: thread-safe tracking of the engine's run state
- HttpTransport: JSON-over-HTTP transport (imported lazily by SimulatorClient.from_config)
"""

from simlink.client import SimulatorClient
from simlink.config import SimLinkConfig
from simlink.connection import Connection, ConnectionManager, EndpointSpec
from simlink.errors import PackageNotFoundError, SimConnectionError, SimLinkError, TransportError
from simlink.handles import ObjectHandleResolver
from simlink.lifecycle import SimulationController
from simlink.scenes import SceneLoader, StaticPackageResolver
from simlink.spatial import HandlePolicy, SpatialManipulator
from simlink.state_monitor import StateMonitor
from simlink.types import (
    INVALID_HANDLE,
    WORLD_FRAME,
    ObjectHandle,
    Orientation,
    Pose,
    Position,
    SceneReference,
    SimulationState,
)

__all__ = [
    "INVALID_HANDLE",
    "WORLD_FRAME",
    "Connection",
    "ConnectionManager",
    "EndpointSpec",
    "HandlePolicy",
    "ObjectHandle",
    "ObjectHandleResolver",
    "Orientation",
    "PackageNotFoundError",
    "Pose",
    "Position",
    "SceneLoader",
    "SceneReference",
    "SimConnectionError",
    "SimLinkConfig",
    "SimLinkError",
    "SimulationController",
    "SimulationState",
    "SimulatorClient",
    "SpatialManipulator",
    "StateMonitor",
    "StaticPackageResolver",
    "TransportError",
]
