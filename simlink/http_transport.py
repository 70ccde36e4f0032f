"""JSON-over-HTTP transport for a simulation engine bridge.

Each service is a ``POST {base_url}/services/{name}`` carrying the request as a
JSON body. Notifications are read by long-polling
``GET {base_url}/topics/{topic}?after=<seq>`` which returns
``{"messages": [{"seq": int, "data": {...}}, ...]}``.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from simlink.config import SimLinkConfig
from simlink.errors import SimConnectionError, TransportError
from simlink.transport import NotificationCallback, Request, Response

logger = logging.getLogger(__name__)


class TopicMessage(BaseModel):
    """A single message read from a topic."""

    seq: int
    data: Dict[str, Any]


class TopicBatch(BaseModel):
    """Reply of a topic poll."""

    messages: List[TopicMessage] = []


class HttpServiceEndpoint:
    """Request channel for one service over a shared httpx client."""

    def __init__(self, client: httpx.Client, name: str):
        self.name = name
        self._client = client
        self._path = f"/services/{name}"

    def __call__(self, request: Request) -> Response:
        try:
            response = self._client.post(self._path, json=request)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportError(self.name, f"timed out ({type(e).__name__})") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(self.name, str(e) or type(e).__name__) from e

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(self.name, "reply is not JSON") from e
        if not isinstance(body, dict):
            raise TransportError(self.name, f"reply must be an object, got {type(body).__name__}")
        logger.debug("%s -> %s", self.name, body)
        return body


class TopicPoller:
    """Background thread delivering topic messages to a callback."""

    def __init__(
        self,
        client: httpx.Client,
        topic: str,
        callback: NotificationCallback,
        poll_interval: float,
        after: int = 0,
    ):
        self.topic = topic
        self._client = client
        self._callback = callback
        self._poll_interval = poll_interval
        self._after = after
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll_once(self) -> int:
        """Fetch and deliver pending messages. Returns how many were delivered."""
        try:
            response = self._client.get(
                f"/topics/{self.topic.lstrip('/')}", params={"after": self._after}
            )
            response.raise_for_status()
            batch = TopicBatch.model_validate(response.json())
        except httpx.HTTPError as e:
            raise TransportError(f"topic {self.topic}", str(e) or type(e).__name__) from e
        except (ValueError, ValidationError) as e:
            raise TransportError(f"topic {self.topic}", f"malformed batch: {e}") from e

        for message in batch.messages:
            if message.seq <= self._after:
                continue
            self._after = message.seq
            try:
                self._callback(message.data)
            except Exception:
                logger.exception("Notification callback failed on %s", self.topic)
        return len(batch.messages)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run_loop, name=f"simlink-topic{self.topic}", daemon=True
        )
        self._thread.start()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except TransportError as e:
                logger.warning("Notification poll failed: %s", e)
            self._stop_event.wait(self._poll_interval)

    def cancel(self) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=max(1.0, self._poll_interval * 4))
        self._thread = None


class HttpTransport:
    """SimulatorTransport implementation backed by ``httpx.Client``.

    Args:
        config: Supplies base URL, timeout and poll interval
        client: Pre-built client (tests pass one using ``httpx.MockTransport``)
    """

    def __init__(self, config: Optional[SimLinkConfig] = None, client: Optional[httpx.Client] = None):
        self.config = config or SimLinkConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout),
        )
        self._pollers: List[TopicPoller] = []
        self._lock = threading.Lock()

    def bind_service(self, name: str) -> HttpServiceEndpoint:
        if not name or not name.strip("/"):
            raise SimConnectionError(name, "service name is empty")
        return HttpServiceEndpoint(self._client, name.strip("/"))

    def subscribe(self, topic: str, callback: NotificationCallback) -> TopicPoller:
        """Subscribe to ``topic``.

        The first poll runs synchronously so an unreachable topic fails the
        subscription instead of the background thread.
        """
        poller = TopicPoller(self._client, topic, callback, self.config.poll_interval)
        try:
            poller.poll_once()
        except TransportError as e:
            raise SimConnectionError(topic, e.reason) from e
        poller.start()
        with self._lock:
            self._pollers.append(poller)
        logger.debug("Subscribed to %s", topic)
        return poller

    def close(self) -> None:
        with self._lock:
            pollers, self._pollers = self._pollers, []
        for poller in pollers:
            poller.cancel()
        if self._owns_client:
            self._client.close()
        logger.debug("HttpTransport closed")
