"""Fake simulation engine for testing.

This module provides a deterministic in-memory engine implementing the
SimulatorTransport protocol, so the client can be exercised end to end without
a running simulator. It follows the engine's reply conventions: -1 for failed
start/stop/move, an unknown name resolves to -1, and scene loading replies 1
only for known scenes.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from simlink.errors import SimConnectionError, TransportError
from simlink.types import Orientation, Pose, Position

logger = logging.getLogger(__name__)

RUNNING_CODE = 1
STOPPED_CODE = 0
PAUSED_CODE = 3


@dataclass
class FakeObject:
    name: str
    position: Position
    orientation: Orientation = field(default_factory=Orientation)


class FakeEndpoint:
    """Bound service of the fake engine."""

    def __init__(self, engine: "FakeSimulator", name: str, handler: Callable[[Dict[str, Any]], Dict[str, Any]]):
        self.name = name
        self._engine = engine
        self._handler = handler

    def __call__(self, request: Dict[str, Any]) -> Dict[str, Any]:
        self._engine.calls.append((self.name, dict(request)))
        if self.name in self._engine.unreachable:
            raise TransportError(self.name, "fake engine unreachable")
        return self._handler(request)


class FakeSubscription:
    def __init__(self, engine: "FakeSimulator", topic: str, callback):
        self.topic = topic
        self.callback = callback
        self.cancelled = False
        self._engine = engine

    def cancel(self) -> None:
        self.cancelled = True


class FakeSimulator:
    """In-memory engine and transport in one object.

    Args:
        namespace: Service name prefix
        auto_notify: Publish a state notification right after start/stop
        start_result: Reply for StartSimulation (-1 simulates a rejection)
        stop_result: Reply for StopSimulation
    """

    def __init__(
        self,
        namespace: str = "vrep",
        auto_notify: bool = True,
        start_result: int = 1,
        stop_result: int = 1,
    ):
        self.namespace = namespace
        self.auto_notify = auto_notify
        self.start_result = start_result
        self.stop_result = stop_result
        self.copy_returns_empty = False

        self.objects: Dict[int, FakeObject] = {}
        self.scenes: Set[str] = set()
        self.loaded_scenes: List[str] = []
        self.status_code = STOPPED_CODE
        self.next_handle = 100

        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.unbindable: Set[str] = set()
        self.unreachable: Set[str] = set()
        self.subscriptions: List[FakeSubscription] = []
        self.closed = False

        self._handlers = {
            "simRosStartSimulation": self._start,
            "simRosStopSimulation": self._stop,
            "simRosCopyPasteObjects": self._copy,
            "simRosGetObjectHandle": self._get_handle,
            "simRosSetObjectPosition": self._set_position,
            "simRosGetObjectPose": self._get_pose,
            "simRosLoadScene": self._load_scene,
        }

    # --- SimulatorTransport ---

    def bind_service(self, name: str) -> FakeEndpoint:
        if name in self.unbindable:
            raise SimConnectionError(name, "fake engine refused binding")
        prefix = f"{self.namespace}/"
        short = name[len(prefix):] if name.startswith(prefix) else name
        handler = self._handlers.get(short)
        if handler is None:
            raise SimConnectionError(name, "unknown service")
        return FakeEndpoint(self, short, handler)

    def subscribe(self, topic: str, callback) -> FakeSubscription:
        if topic in self.unbindable:
            raise SimConnectionError(topic, "fake engine refused subscription")
        subscription = FakeSubscription(self, topic, callback)
        self.subscriptions.append(subscription)
        return subscription

    def close(self) -> None:
        self.closed = True

    # --- Test helpers ---

    def add_object(self, name: str, handle: Optional[int] = None, position=(0.0, 0.0, 0.0)) -> int:
        if handle is None:
            handle = self.next_handle
            self.next_handle += 1
        self.objects[handle] = FakeObject(name, Position(*position))
        return handle

    def add_scene(self, path: str) -> None:
        self.scenes.add(path)

    def publish_state(self, code: int) -> None:
        """Deliver a simulator state notification to every live subscriber."""
        self.status_code = code
        for subscription in self.subscriptions:
            if not subscription.cancelled:
                subscription.callback({"simulatorState": {"data": code}})

    def publish_state_async(self, code: int) -> threading.Thread:
        """Deliver a notification from another thread, like a transport dispatcher."""
        thread = threading.Thread(target=self.publish_state, args=(code,))
        thread.start()
        return thread

    def calls_to(self, service: str) -> List[Dict[str, Any]]:
        return [request for name, request in self.calls if name == service]

    def pose_of(self, handle: int) -> Pose:
        obj = self.objects[handle]
        return Pose(position=obj.position, orientation=obj.orientation)

    # --- Service handlers ---

    def _start(self, request):
        if self.start_result != -1 and self.auto_notify:
            self.publish_state(RUNNING_CODE)
        return {"result": self.start_result}

    def _stop(self, request):
        if self.stop_result != -1 and self.auto_notify:
            self.publish_state(STOPPED_CODE)
        return {"result": self.stop_result}

    def _copy(self, request):
        if self.copy_returns_empty:
            return {"newObjectHandles": []}
        new_handles = []
        for handle in request["objectHandles"]:
            source = self.objects.get(handle)
            if source is None:
                continue
            new_handle = self.next_handle
            self.next_handle += 1
            self.objects[new_handle] = FakeObject(
                f"{source.name}#{len(new_handles)}", source.position, source.orientation
            )
            new_handles.append(new_handle)
        return {"newObjectHandles": new_handles}

    def _get_handle(self, request):
        for handle, obj in self.objects.items():
            if obj.name == request["objectName"]:
                return {"handle": handle}
        return {"handle": -1}

    def _set_position(self, request):
        obj = self.objects.get(request["handle"])
        if obj is None:
            return {"result": -1}
        obj.position = Position.from_dict(request["position"])
        return {"result": 1}

    def _get_pose(self, request):
        obj = self.objects.get(request["handle"])
        if obj is None:
            return {"pose": Pose(position=Position(0.0, 0.0, 0.0)).to_dict()}
        return {"pose": {"header": {"frameId": "world"}, "pose": Pose(obj.position, obj.orientation).to_dict()}}

    def _load_scene(self, request):
        path = request["fileName"]
        if path not in self.scenes:
            return {"result": 0}
        self.loaded_scenes.append(path)
        return {"result": 1}
