"""
Status monitor tests: polling cadence, command gating and lens tracking.
"""

import asyncio

import pytest

from jvc_dla import JvcDlaClient, JvcDlaMonitor, LensPositionState, Power


@pytest.fixture
def monitor(client_factory):
    return JvcDlaMonitor(client_factory(poll_interval_secs=5.0, idle_poll_interval_secs=60.0))


class TestPoll:

    @pytest.mark.asyncio
    async def test_poll_while_off(self, emulator, monitor):
        await monitor.poll_once()
        assert monitor.power is Power.OFF
        assert monitor.model_code == "XH4"
        assert monitor.mac_address == "E0DADC0A1B2C"
        assert monitor.software_version is None
        assert not monitor.client.is_connected
        assert b"?\x89\x01IFSV\n" not in emulator.requests
        assert b"?\x89\x01INML\n" not in emulator.requests

    @pytest.mark.asyncio
    async def test_poll_while_on(self, emulator, monitor):
        emulator.power = Power.ON
        emulator.lens_memory = 4
        await monitor.poll_once()
        assert monitor.power is Power.ON
        assert monitor.software_version == "03.52"
        assert monitor.lens_current == 40

    @pytest.mark.asyncio
    async def test_poll_cadence(self, emulator, monitor):
        assert monitor.next_poll_delay() == 5.0
        await monitor.poll_once()
        assert monitor.next_poll_delay() == 60.0
        emulator.power = Power.WARMING
        await monitor.poll_once()
        assert monitor.next_poll_delay() == 5.0

    @pytest.mark.asyncio
    async def test_poll_error_is_not_raised(self, emulator, client_factory):
        emulator.greeting = b"PJ_NO"
        monitor = JvcDlaMonitor(client_factory(connect_attempts=1))
        await monitor.poll_once()
        assert monitor.power is None


class TestPower:

    @pytest.mark.asyncio
    async def test_power_on_from_off(self, emulator, monitor):
        await monitor.poll_once()
        assert await monitor.set_power(True)
        assert emulator.requests[-1] == b"!\x89\x01PW1\n"
        assert emulator.power is Power.ON
        assert not monitor.client.is_connected

    @pytest.mark.asyncio
    async def test_power_on_refused_unless_off(self, emulator, monitor):
        emulator.power = Power.COOLING
        await monitor.poll_once()
        count = len(emulator.requests)
        assert not await monitor.set_power(True)
        assert not await monitor.set_power(False)
        assert len(emulator.requests) == count

    @pytest.mark.asyncio
    async def test_power_off_from_on(self, emulator, monitor):
        emulator.power = Power.ON
        await monitor.poll_once()
        assert await monitor.set_power(False)
        assert emulator.requests[-1] == b"!\x89\x01PW0\n"

    @pytest.mark.asyncio
    async def test_unknown_state_refuses_everything(self, emulator, monitor):
        assert not await monitor.set_power(True)
        assert not await monitor.set_lens_position(50)
        assert emulator.connection_count == 0


class TestLens:

    @pytest.mark.asyncio
    async def test_move_and_settle(self, emulator, monitor):
        emulator.power = Power.ON
        emulator.lens_memory = 2
        await monitor.poll_once()
        assert await monitor.set_lens_position(57)
        assert emulator.requests[-1] == b"!\x89\x01INML4\n"
        assert monitor.lens_target == 50
        assert monitor.lens_state is LensPositionState.INCREASING
        # Refused while moving
        assert not await monitor.set_lens_position(10)
        await monitor.poll_once()
        assert monitor.lens_current == 50
        assert monitor.lens_state is LensPositionState.STOPPED

    @pytest.mark.asyncio
    async def test_move_down_clamps_to_minimum(self, emulator, monitor):
        emulator.power = Power.ON
        emulator.lens_memory = 6
        await monitor.poll_once()
        assert await monitor.set_lens_position(5)
        assert monitor.lens_target == 10
        assert monitor.lens_state is LensPositionState.DECREASING
        assert emulator.lens_memory == 1

    @pytest.mark.asyncio
    async def test_already_in_position(self, emulator, monitor):
        emulator.power = Power.ON
        emulator.lens_memory = 3
        await monitor.poll_once()
        assert not await monitor.set_lens_position(30)

    @pytest.mark.asyncio
    async def test_requires_power_on(self, emulator, monitor):
        await monitor.poll_once()
        assert not await monitor.set_lens_position(50)


class TestStatus:

    @pytest.mark.asyncio
    async def test_status_dict(self, emulator, monitor):
        emulator.power = Power.ON
        await monitor.poll_once()
        status = monitor.status()
        assert status["power"] == "On"
        assert status["is_warming_or_on"] is True
        assert status["model_code"] == "XH4"
        assert status["lens_current"] == 10
        assert status["lens_state"] == "STOPPED"

    @pytest.mark.asyncio
    async def test_start_and_stop(self, emulator, monitor):
        monitor.start()
        await monitor.stop()
        await monitor.stop()


async def failing_resolver(host=None, default_port=None):
    raise OSError("multicast socket bind failed")


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_poll_loop_survives_resolution_failure(self, emulator, monitor, monkeypatch):
        monkeypatch.setattr("jvc_dla.client.connection.resolve_dla_tcp_host", failing_resolver)
        monitor.start()
        try:
            await asyncio.sleep(0.2)
            assert not monitor._poll_task.done()
        finally:
            await monitor.stop()
        assert monitor.power is None

    @pytest.mark.asyncio
    async def test_poll_survives_non_protocol_error(self, emulator, monitor, monkeypatch):
        async def broken_model_code():
            raise RuntimeError("unexpected")

        monkeypatch.setattr(monitor.client, "get_model_code", broken_model_code)
        await monitor.poll_once()
        assert monitor.power is Power.OFF
        assert not monitor.client.is_connected

    @pytest.mark.asyncio
    async def test_command_survives_non_protocol_error(self, emulator, monitor, monkeypatch):
        await monitor.poll_once()

        async def broken_send(command):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(monitor.client, "send", broken_send)
        assert await monitor.set_power(True)
        assert not monitor.client.is_connected
