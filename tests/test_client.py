"""
End-to-end client tests against the in-process projector emulator.
"""

import logging

import pytest

from jvc_dla import (
    ConnectionState,
    DidNotConnectError,
    HandshakeError,
    InvalidArgumentError,
    NotConnectedError,
    ReadTimeoutError,
    AckMismatchError,
    ResponseFramingError,
    Power,
  )
from jvc_dla.protocol import Reference, Operation


class TestQueries:

    @pytest.mark.asyncio
    async def test_get_power(self, emulator, client_factory):
        emulator.power = Power.ON
        client = client_factory()
        assert await client.get_power() is Power.ON
        assert emulator.requests[-1] == b"?\x89\x01PW\n"

    @pytest.mark.asyncio
    async def test_handshake_sends_null_command_first(self, emulator, client_factory):
        client = client_factory()
        await client.connect()
        assert client.is_connected
        assert client.state is ConnectionState.READY
        assert emulator.requests == [b"!\x89\x01\x00\x00\n"]

    @pytest.mark.asyncio
    async def test_model_mac_and_version(self, emulator, client_factory):
        client = client_factory()
        assert await client.get_model_code() == "XH4"
        assert await client.get_mac_address() == "E0DADC0A1B2C"
        assert await client.get_software_version() == "03.52"
        # One session serves all three queries
        assert emulator.connection_count == 1

    @pytest.mark.asyncio
    async def test_lens_memory(self, emulator, client_factory):
        emulator.lens_memory = 7
        client = client_factory()
        assert await client.get_lens_memory() == 7


class TestOperations:

    @pytest.mark.asyncio
    async def test_set_power(self, emulator, client_factory):
        client = client_factory()
        await client.set_power(True)
        assert emulator.requests[-1] == b"!\x89\x01PW1\n"
        assert emulator.power is Power.ON
        assert await client.get_power() is Power.ON

    @pytest.mark.asyncio
    async def test_set_lens_memory(self, emulator, client_factory):
        client = client_factory()
        await client.set_lens_memory(3)
        assert emulator.requests[-1] == b"!\x89\x01INML2\n"
        assert emulator.lens_memory == 3

    @pytest.mark.asyncio
    async def test_invalid_lens_memory_sends_nothing(self, emulator, client_factory):
        client = client_factory()
        with pytest.raises(InvalidArgumentError):
            await client.set_lens_memory(11)
        with pytest.raises(InvalidArgumentError):
            await client.set_lens_memory(0)
        assert emulator.connection_count == 0
        assert emulator.requests == []


class TestConnect:

    @pytest.mark.asyncio
    async def test_retries_with_linear_backoff(self, emulator, client_factory, sleeper):
        emulator.greeting = b"PJ_NO"
        client = client_factory()
        with pytest.raises(DidNotConnectError) as excinfo:
            await client.connect()
        assert isinstance(excinfo.value.__cause__, HandshakeError)
        assert emulator.connection_count == 10
        assert sleeper.delays == pytest.approx([1.1 * n for n in range(1, 10)])
        assert not client.is_connected

    @pytest.mark.asyncio
    async def test_busy_projector_eventually_connects(self, emulator, client_factory, sleeper):
        emulator.refuse_connections = 3
        client = client_factory()
        await client.connect()
        assert client.is_connected
        assert emulator.connection_count == 4
        assert sleeper.delays == pytest.approx([1.1, 2.2, 3.3])

    @pytest.mark.asyncio
    async def test_single_attempt(self, emulator, client_factory, sleeper):
        emulator.greeting = b"PJ_NO"
        client = client_factory(connect_attempts=1)
        with pytest.raises(DidNotConnectError):
            await client.connect()
        assert emulator.connection_count == 1
        assert sleeper.delays == []

    @pytest.mark.asyncio
    async def test_unreachable_port(self, sleeper):
        from jvc_dla import JvcDlaClient, JvcDlaClientConfig
        from jvc_dla.emulator import JvcDlaEmulator
        # Find a port that is free by starting and stopping an emulator
        async with JvcDlaEmulator() as emu:
            host = emu.host
        config = JvcDlaClientConfig(default_host=host, timeout_secs=0.5, connect_attempts=2)
        client = JvcDlaClient(config=config, sleep=sleeper)
        with pytest.raises(DidNotConnectError):
            await client.connect()
        assert sleeper.delays == pytest.approx([1.1])

    @pytest.mark.asyncio
    async def test_password(self, emulator, client_factory):
        emulator.password = "secret"
        client = client_factory(password="secret")
        assert await client.get_power() is Power.OFF

    @pytest.mark.asyncio
    async def test_wrong_password(self, emulator, client_factory):
        emulator.password = "secret"
        client = client_factory(password="public", connect_attempts=2)
        with pytest.raises(DidNotConnectError) as excinfo:
            await client.connect()
        assert "Authentication failed" in str(excinfo.value.__cause__)

    @pytest.mark.asyncio
    async def test_disconnect_is_idempotent(self, emulator, client_factory):
        client = client_factory()
        client.disconnect()
        await client.connect()
        client.disconnect()
        client.disconnect()
        assert client.state is ConnectionState.DISCONNECTED
        assert not client.is_connected

    @pytest.mark.asyncio
    async def test_reconnect_replaces_session(self, emulator, client_factory):
        client = client_factory()
        await client.connect()
        await client.connect()
        assert client.is_connected
        assert emulator.connection_count == 2

    @pytest.mark.asyncio
    async def test_context_manager_disconnects(self, emulator, client_factory):
        client = client_factory()
        async with client:
            await client.connect()
            assert client.is_connected
        assert not client.is_connected


class TestFailures:

    @pytest.mark.asyncio
    async def test_execute_requires_connection(self, emulator, client_factory):
        client = client_factory()
        with pytest.raises(NotConnectedError):
            await client.execute(Reference.POWER)

    @pytest.mark.asyncio
    async def test_read_timeout_fails_connection(self, emulator, client_factory):
        emulator.silent_codes.add(b"PW")
        client = client_factory(timeout_secs=0.2)
        await client.connect()
        with pytest.raises(ReadTimeoutError):
            await client.execute(Reference.POWER)
        assert client.state is ConnectionState.FAILED
        assert not client.is_connected
        with pytest.raises(NotConnectedError):
            await client.execute(Reference.POWER)

    @pytest.mark.asyncio
    async def test_bad_ack_propagates_from_execute(self, emulator, client_factory):
        emulator.bad_ack_codes.add(b"PW")
        client = client_factory()
        await client.connect()
        with pytest.raises(AckMismatchError):
            await client.execute(Reference.POWER)
        assert client.state is ConnectionState.FAILED

    @pytest.mark.asyncio
    async def test_bad_response_propagates_from_execute(self, emulator, client_factory):
        emulator.bad_response_codes.add(b"MD")
        client = client_factory()
        await client.connect()
        with pytest.raises(ResponseFramingError):
            await client.execute(Reference.MODEL)

    @pytest.mark.asyncio
    async def test_send_returns_none_on_bad_ack(self, emulator, client_factory):
        emulator.bad_ack_codes.add(b"PW")
        client = client_factory()
        assert await client.get_power() is None
        assert client.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_send_reconnects_after_failure(self, emulator, client_factory):
        emulator.bad_ack_codes.add(b"PW")
        client = client_factory()
        assert await client.get_power() is None
        emulator.bad_ack_codes.clear()
        assert await client.get_power() is Power.OFF
        assert emulator.connection_count == 2

    @pytest.mark.asyncio
    async def test_send_returns_none_when_not_reachable(self, emulator, client_factory, sleeper):
        emulator.greeting = b"PJ_NO"
        client = client_factory(connect_attempts=2)
        assert await client.get_model_code() is None

    @pytest.mark.asyncio
    async def test_slow_operation_with_raised_timeout(self, emulator, client_factory):
        client = client_factory(timeout_secs=0.2)
        await client.connect()
        client.set_timeout(5.0)
        await client.execute(Operation.POWER_ON)
        assert emulator.power is Power.ON


class TestTrace:

    @pytest.mark.asyncio
    async def test_trace_lines(self, emulator, sleeper):
        from jvc_dla import JvcDlaClient, JvcDlaClientConfig
        lines = []
        config = JvcDlaClientConfig(default_host=emulator.host, timeout_secs=0.5)
        client = JvcDlaClient(config=config, trace=lines.append, sleep=sleeper)
        try:
            await client.get_power()
        finally:
            client.disconnect()
        assert lines[:3] == ["<<< PJ_OK", ">>> PJREQ", "<<< PJACK"]
        assert "CMD Command(power.query: 'PW')" in lines
        assert ">>> 3f 89 01 50 57 0a" in lines
        assert "ACK 06 89 01 50 57 0a" in lines
        assert "<<< 40 89 01 50 57 30 0a" in lines


class TestConnectLogging:

    @pytest.mark.asyncio
    async def test_late_attempts_log_warnings(self, emulator, client_factory, caplog):
        caplog.set_level(logging.DEBUG, logger="jvc_dla")
        emulator.greeting = b"PJ_NO"
        client = client_factory()
        with pytest.raises(DidNotConnectError):
            await client.connect()
        attempts = [r for r in caplog.records if r.name == "jvc_dla" and "Connection attempt" in r.getMessage()]
        assert len(attempts) == 10
        assert all(r.levelno == logging.DEBUG for r in attempts[:3])
        warnings = [r for r in caplog.records if r.name == "jvc_dla" and r.levelno == logging.WARNING]
        assert len(warnings) == 7
        assert "attempt 4/10" in warnings[0].getMessage()
        assert "attempt 10/10" in warnings[-1].getMessage()


async def failing_resolver(host=None, default_port=None):
    raise OSError("multicast socket bind failed")


async def garbled_resolver(host=None, default_port=None):
    raise ValueError("invalid literal for int() with base 10: 'abc'")


class TestResolutionFailure:

    @pytest.mark.asyncio
    async def test_connect_raises_did_not_connect(self, emulator, client_factory, monkeypatch):
        monkeypatch.setattr("jvc_dla.client.connection.resolve_dla_tcp_host", failing_resolver)
        client = client_factory()
        with pytest.raises(DidNotConnectError) as excinfo:
            await client.connect()
        assert isinstance(excinfo.value.__cause__, OSError)
        assert emulator.connection_count == 0

    @pytest.mark.asyncio
    async def test_send_returns_none(self, emulator, client_factory, monkeypatch):
        monkeypatch.setattr("jvc_dla.client.connection.resolve_dla_tcp_host", garbled_resolver)
        client = client_factory()
        assert await client.get_power() is None
        assert client.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_send_returns_none_on_unexpected_error(self, emulator, client_factory, monkeypatch):
        client = client_factory()

        async def broken_execute(command):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(client.connection, "execute", broken_execute)
        assert await client.get_power() is None
        assert not client.is_connected
