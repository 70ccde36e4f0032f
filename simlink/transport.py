"""Transport capability interface.

The core components talk to the engine only through this protocol, which lets
tests inject an in-memory engine and production code use ``HttpTransport``.
"""

from typing import Any, Callable, Dict, Protocol

Request = Dict[str, Any]
Response = Dict[str, Any]
NotificationCallback = Callable[[Dict[str, Any]], None]

# Engine operation names, one service per operation
START_SIMULATION = "StartSimulation"
STOP_SIMULATION = "StopSimulation"
COPY_PASTE_OBJECTS = "CopyPasteObjects"
GET_OBJECT_HANDLE = "GetObjectHandle"
SET_OBJECT_POSITION = "SetObjectPosition"
GET_OBJECT_POSE = "GetObjectPose"
LOAD_SCENE = "LoadScene"

OPERATIONS = (
    START_SIMULATION,
    STOP_SIMULATION,
    COPY_PASTE_OBJECTS,
    GET_OBJECT_HANDLE,
    SET_OBJECT_POSITION,
    GET_OBJECT_POSE,
    LOAD_SCENE,
)


class ServiceEndpoint(Protocol):
    """A bound request channel for one remote operation.

    Calling it blocks until the engine replies. Transport failures raise
    ``TransportError``.
    """

    name: str

    def __call__(self, request: Request) -> Response:
        ...


class Subscription(Protocol):
    """Handle for an inbound notification subscription."""

    topic: str

    def cancel(self) -> None:
        """Stop delivering notifications."""
        ...


class SimulatorTransport(Protocol):
    """Protocol for engine transports (allows fake engines for testing)."""

    def bind_service(self, name: str) -> ServiceEndpoint:
        """Bind a request channel. Raises SimConnectionError if it cannot."""
        ...

    def subscribe(self, topic: str, callback: NotificationCallback) -> Subscription:
        """Subscribe to a topic. ``callback`` may run on another thread."""
        ...

    def close(self) -> None:
        """Release transport resources."""
        ...
