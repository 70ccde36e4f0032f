"""Pytest configuration and fixtures for simlink tests."""

import pytest

from simlink.client import SimulatorClient
from simlink.config import SimLinkConfig
from simlink.scenes import StaticPackageResolver
from tests.fakes.fake_simulator import FakeSimulator

ROBOT_HANDLE = 12


@pytest.fixture
def fake_engine():
    """Fake engine with a robot at handle 12 and one known scene."""
    engine = FakeSimulator()
    engine.add_object("Robot", handle=ROBOT_HANDLE, position=(0.0, 0.0, 0.0))
    engine.add_object("Table", position=(2.0, -1.0, 0.0))
    engine.add_scene("/scenes/valid.scene")
    return engine


@pytest.fixture
def package_resolver(tmp_path):
    return StaticPackageResolver({"tapir": str(tmp_path / "tapir")})


@pytest.fixture
def client(fake_engine, package_resolver):
    """SimulatorClient bound to the fake engine."""
    sim = SimulatorClient(fake_engine, SimLinkConfig(), path_resolver=package_resolver)
    yield sim
    sim.close()


@pytest.fixture
def connection(client):
    return client.connection
