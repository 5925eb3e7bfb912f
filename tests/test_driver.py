"""Tests for client construction against the emulator."""

import os

import pytest

from spemu import driver
from spemu.config import Config
from spemu.executor import Executor

CFG = Config("test-project", "test-instance", "test-database", "localhost:9010")


class StubClient:
    instances = []

    def __init__(self, project=None):
        self.project = project
        self.emulator_host = os.environ.get("SPANNER_EMULATOR_HOST")
        self.closed = False
        self.opened = []
        StubClient.instances.append(self)

    def instance(self, instance_id):
        return StubInstance(self, instance_id)

    def close(self):
        self.closed = True


class StubInstance:
    def __init__(self, client, instance_id):
        self.client = client
        self.instance_id = instance_id

    def database(self, database_id):
        self.client.opened.append((self.instance_id, database_id))
        return object()


@pytest.fixture
def stub_client(emulator_env):
    StubClient.instances = []
    emulator_env.setattr(driver.spanner, "Client", StubClient)
    return StubClient


def test_client_exports_emulator_host(stub_client):
    with driver.client(CFG) as spanner_client:
        assert spanner_client.project == "test-project"
        assert spanner_client.emulator_host == "localhost:9010"
    assert spanner_client.closed


def test_client_closed_on_error(stub_client):
    with pytest.raises(RuntimeError):
        with driver.client(CFG):
            raise RuntimeError("boom")
    assert stub_client.instances[0].closed


def test_empty_host_keeps_environment(stub_client, emulator_env):
    emulator_env.setenv("SPANNER_EMULATOR_HOST", "spanner:9999")
    with driver.client(Config("p", "i", "d")) as spanner_client:
        assert spanner_client.emulator_host == "spanner:9999"


def test_open_executor_binds_database(stub_client):
    with driver.open_executor(CFG, timeout=12) as executor:
        assert isinstance(executor, Executor)
        assert executor.timeout == 12
    spanner_client = stub_client.instances[0]
    assert spanner_client.opened == [("test-instance", "test-database")]
    assert spanner_client.closed
