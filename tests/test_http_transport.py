"""Tests for HttpTransport using httpx.MockTransport."""

import json
import threading

import httpx
import pytest

from simlink.client import SimulatorClient
from simlink.config import SimLinkConfig
from simlink.errors import SimConnectionError, TransportError
from simlink.http_transport import HttpTransport, TopicPoller

BASE_URL = "http://engine.test"


class FakeBridge:
    """Minimal HTTP engine bridge serving services and one state topic."""

    def __init__(self):
        self.requests = []
        self.messages = []
        self.topic_status = 200
        self.replies = {
            "vrep/simRosStartSimulation": {"result": 1},
            "vrep/simRosGetObjectHandle": {"handle": 12},
        }
        self.lock = threading.Lock()

    def publish(self, code):
        with self.lock:
            self.messages.append({"seq": len(self.messages) + 1, "data": {"simulatorState": {"data": code}}})

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/services/"):
            name = path[len("/services/"):]
            self.requests.append((name, json.loads(request.content or b"{}")))
            if name not in self.replies:
                return httpx.Response(404)
            return httpx.Response(200, json=self.replies[name])
        if path == "/topics/vrep/info":
            if self.topic_status != 200:
                return httpx.Response(self.topic_status)
            after = int(request.url.params.get("after", "0"))
            with self.lock:
                pending = [m for m in self.messages if m["seq"] > after]
            return httpx.Response(200, json={"messages": pending})
        return httpx.Response(404)


@pytest.fixture
def bridge():
    return FakeBridge()


@pytest.fixture
def transport(bridge):
    config = SimLinkConfig(base_url=BASE_URL, poll_interval=0.01)
    http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(bridge.handler))
    transport = HttpTransport(config, client=http_client)
    yield transport
    transport.close()
    http_client.close()


class TestServiceEndpoint:
    def test_posts_request_as_json(self, transport, bridge):
        endpoint = transport.bind_service("vrep/simRosGetObjectHandle")
        assert endpoint({"objectName": "Robot"}) == {"handle": 12}
        assert bridge.requests == [("vrep/simRosGetObjectHandle", {"objectName": "Robot"})]

    def test_http_error_raises_transport_error(self, transport):
        endpoint = transport.bind_service("vrep/simRosLoadScene")
        with pytest.raises(TransportError) as excinfo:
            endpoint({"fileName": "/a.ttt"})
        assert "404" in str(excinfo.value)

    def test_non_object_reply_raises_transport_error(self, transport, bridge):
        bridge.replies["vrep/simRosStopSimulation"] = [1, 2]
        with pytest.raises(TransportError):
            transport.bind_service("vrep/simRosStopSimulation")({})

    def test_timeout_raises_transport_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        transport = HttpTransport(SimLinkConfig(base_url=BASE_URL), client=http_client)
        with pytest.raises(TransportError) as excinfo:
            transport.bind_service("vrep/simRosStartSimulation")({})
        assert "timed out" in str(excinfo.value)

    def test_empty_service_name_cannot_bind(self, transport):
        with pytest.raises(SimConnectionError):
            transport.bind_service("/")


class TestTopicPoller:
    def test_delivers_only_new_messages(self, transport, bridge):
        received = []
        bridge.publish(0)
        poller = TopicPoller(transport._client, "/vrep/info", received.append, poll_interval=0.01)

        assert poller.poll_once() == 1
        bridge.publish(1)
        poller.poll_once()
        poller.poll_once()

        assert received == [{"simulatorState": {"data": 0}}, {"simulatorState": {"data": 1}}]

    def test_callback_error_does_not_stop_delivery(self, transport, bridge):
        received = []

        def callback(message):
            received.append(message)
            if len(received) == 1:
                raise RuntimeError("subscriber bug")

        bridge.publish(0)
        bridge.publish(1)
        poller = TopicPoller(transport._client, "/vrep/info", callback, poll_interval=0.01)

        assert poller.poll_once() == 2
        assert len(received) == 2

        bridge.publish(0)
        poller.poll_once()
        assert len(received) == 3

    def test_unreachable_topic_fails_subscription(self, transport, bridge):
        bridge.topic_status = 503
        with pytest.raises(SimConnectionError):
            transport.subscribe("/vrep/info", lambda message: None)

    def test_background_delivery(self, transport, bridge):
        delivered = threading.Event()
        subscription = transport.subscribe("/vrep/info", lambda message: delivered.set())
        bridge.publish(1)

        assert delivered.wait(timeout=2.0)
        subscription.cancel()


def test_client_over_http(bridge):
    config = SimLinkConfig(base_url=BASE_URL, poll_interval=0.01)
    http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(bridge.handler))

    with SimulatorClient(HttpTransport(config, client=http_client), config) as sim:
        assert sim.start() is True
        bridge.publish(1)
        assert sim.wait_until_running(timeout=2.0, poll_interval=0.01)
        assert sim.resolve("Robot") == 12

    http_client.close()
