"""Binding of engine operation endpoints.

ConnectionManager binds every remote operation once and hands out an
immutable Connection. Components only ever call through the Connection.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from simlink.config import SimLinkConfig
from simlink.errors import SimConnectionError
from simlink.transport import (
    COPY_PASTE_OBJECTS,
    GET_OBJECT_HANDLE,
    GET_OBJECT_POSE,
    LOAD_SCENE,
    NotificationCallback,
    OPERATIONS,
    SET_OBJECT_POSITION,
    START_SIMULATION,
    STOP_SIMULATION,
    ServiceEndpoint,
    SimulatorTransport,
    Subscription,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointSpec:
    """Service names for each operation plus the state topic."""

    services: Dict[str, str]
    state_topic: str

    @classmethod
    def from_config(cls, config: SimLinkConfig) -> "EndpointSpec":
        return cls(
            services={op: config.service_name(op) for op in OPERATIONS},
            state_topic=config.state_topic,
        )

    def service(self, operation: str) -> str:
        try:
            return self.services[operation]
        except KeyError:
            raise SimConnectionError(operation, "no service name configured") from None


@dataclass(frozen=True)
class Connection:
    """The bound endpoints, one per remote operation."""

    start_simulation: ServiceEndpoint
    stop_simulation: ServiceEndpoint
    copy_paste_objects: ServiceEndpoint
    get_object_handle: ServiceEndpoint
    set_object_position: ServiceEndpoint
    get_object_pose: ServiceEndpoint
    load_scene: ServiceEndpoint
    state_subscription: Subscription


class ConnectionManager:
    """Owns the Connection to the engine.

    Args:
        transport: Transport used to bind endpoints
        on_state: Callback receiving simulator state notifications
        config: Source of default endpoint names
    """

    def __init__(
        self,
        transport: SimulatorTransport,
        on_state: NotificationCallback,
        config: Optional[SimLinkConfig] = None,
    ):
        self._transport = transport
        self._on_state = on_state
        self._config = config or SimLinkConfig()
        self._connection: Optional[Connection] = None
        self._lock = threading.Lock()

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    def bind(self, endpoint_spec: Optional[EndpointSpec] = None) -> Connection:
        """Bind every endpoint and the state subscription.

        Binding happens once; later calls return the existing Connection.

        Raises:
            SimConnectionError: If the transport cannot bind an endpoint
        """
        with self._lock:
            if self._connection is not None:
                return self._connection

            spec = endpoint_spec or EndpointSpec.from_config(self._config)
            endpoints = {op: self._bind_service(spec.service(op)) for op in OPERATIONS}
            subscription = self._transport.subscribe(spec.state_topic, self._on_state)

            self._connection = Connection(
                start_simulation=endpoints[START_SIMULATION],
                stop_simulation=endpoints[STOP_SIMULATION],
                copy_paste_objects=endpoints[COPY_PASTE_OBJECTS],
                get_object_handle=endpoints[GET_OBJECT_HANDLE],
                set_object_position=endpoints[SET_OBJECT_POSITION],
                get_object_pose=endpoints[GET_OBJECT_POSE],
                load_scene=endpoints[LOAD_SCENE],
                state_subscription=subscription,
            )
            logger.info(
                "Bound %d engine services and subscribed to %s", len(endpoints), spec.state_topic
            )
            return self._connection

    def _bind_service(self, name: str) -> ServiceEndpoint:
        endpoint = self._transport.bind_service(name)
        if endpoint is None:
            raise SimConnectionError(name, "transport returned no endpoint")
        return endpoint

    def close(self) -> None:
        """Cancel the state subscription. Endpoints stay owned by the transport."""
        with self._lock:
            if self._connection is None:
                return
            self._connection.state_subscription.cancel()
            self._connection = None
        logger.info("Connection closed")
