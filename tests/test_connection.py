"""Tests for ConnectionManager endpoint binding."""

import pytest

from simlink.config import SimLinkConfig
from simlink.connection import ConnectionManager, EndpointSpec
from simlink.errors import SimConnectionError
from simlink.state_monitor import StateMonitor
from simlink.transport import OPERATIONS
from tests.fakes.fake_simulator import FakeSimulator


def make_manager(engine, config=None):
    return ConnectionManager(engine, StateMonitor().on_notification, config)


class TestConnectionManager:
    def test_binds_every_operation_and_state_topic(self):
        engine = FakeSimulator()
        connection = make_manager(engine).bind()

        assert connection.start_simulation.name == "simRosStartSimulation"
        assert connection.load_scene.name == "simRosLoadScene"
        assert [s.topic for s in engine.subscriptions] == ["/vrep/info"]

    def test_default_spec_names(self):
        spec = EndpointSpec.from_config(SimLinkConfig())
        assert set(spec.services) == set(OPERATIONS)
        assert spec.service("GetObjectPose") == "vrep/simRosGetObjectPose"
        assert spec.state_topic == "/vrep/info"

    def test_bind_is_done_once(self):
        engine = FakeSimulator()
        manager = make_manager(engine)
        first = manager.bind()
        second = manager.bind()

        assert first is second
        assert len(engine.subscriptions) == 1

    def test_unbindable_service_raises_connection_error(self):
        engine = FakeSimulator()
        engine.unbindable.add("vrep/simRosCopyPasteObjects")

        with pytest.raises(SimConnectionError) as excinfo:
            make_manager(engine).bind()

        assert isinstance(excinfo.value, ConnectionError)
        assert excinfo.value.endpoint == "vrep/simRosCopyPasteObjects"

    def test_unbindable_topic_raises_connection_error(self):
        engine = FakeSimulator()
        engine.unbindable.add("/vrep/info")

        with pytest.raises(SimConnectionError):
            make_manager(engine).bind()

    def test_spec_missing_operation_raises(self):
        spec = EndpointSpec(services={"StartSimulation": "vrep/simRosStartSimulation"}, state_topic="/vrep/info")
        with pytest.raises(SimConnectionError):
            make_manager(FakeSimulator()).bind(spec)

    def test_connection_is_immutable(self):
        connection = make_manager(FakeSimulator()).bind()
        with pytest.raises(AttributeError):
            connection.start_simulation = None

    def test_close_cancels_subscription(self):
        engine = FakeSimulator()
        manager = make_manager(engine)
        manager.bind()
        manager.close()

        assert engine.subscriptions[0].cancelled
        assert manager.connection is None
