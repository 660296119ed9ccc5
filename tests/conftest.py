# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import pytest
import pytest_asyncio

from jvc_dla import JvcDlaClient, JvcDlaClientConfig
from jvc_dla.emulator import JvcDlaEmulator


class SleepRecorder:
    """Stands in for asyncio.sleep between connection attempts."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("JVC_DLA_HOST", "JVC_DLA_PORT", "JVC_DLA_PASSWORD", "JVC_DLA_TIMEOUT", "JVC_DLA_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest_asyncio.fixture
async def emulator():
    async with JvcDlaEmulator() as emu:
        yield emu


def make_config(emulator, **kwargs):
    kwargs.setdefault("timeout_secs", 0.5)
    return JvcDlaClientConfig(default_host=emulator.host, **kwargs)


@pytest.fixture
def client_factory(emulator, sleeper):
    clients = []

    def factory(password=None, **kwargs):
        client = JvcDlaClient(
            password=password,
            config=make_config(emulator, **kwargs),
            sleep=sleeper,
          )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.disconnect()
