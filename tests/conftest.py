"""Test configuration and shared fixtures."""

import pytest

from helpers import FakeModuleClient, StepClock


@pytest.fixture
def fake_client():
    return FakeModuleClient(
        stats=[{"CompressedNetBytes": 10, "RawNetBytes": 5}],
        config={"DestinationHost": "10.0.0.1", "DestinationPort": 514, "Verbose": False},
    )


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def dispatcher_config():
    return {"DestinationHost": "10.0.0.1", "DestinationPort": 514, "Verbose": False}
