# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector status monitor.

A long-running consumer of JvcDlaClient that polls projector state on an
adaptive cadence and exposes power and lens position controls. All access to
the client is serialized with an asyncio.Lock, since the projector accepts one
connection and one outstanding request at a time.

Lens position is expressed as a percentage-like value 10..100 in steps of 10,
where position = lens memory slot * 10.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..exceptions import JvcDlaError
from ..pkg_logging import logger
from ..protocol import Command, Power, Operation, lens_memory_command, MIN_LENS_MEMORY, MAX_LENS_MEMORY

from .client_config import JvcDlaClientConfig
from .client_impl import JvcDlaClient

LENS_POSITION_STEP = 10
MIN_LENS_POSITION = MIN_LENS_MEMORY * LENS_POSITION_STEP
MAX_LENS_POSITION = MAX_LENS_MEMORY * LENS_POSITION_STEP

class LensPositionState(Enum):
    DECREASING = 0
    INCREASING = 1
    STOPPED = 2

class JvcDlaMonitor:
    """Polls a projector and serializes commands sent to it."""

    client: JvcDlaClient
    lock: asyncio.Lock

    power: Optional[Power] = None
    model_code: Optional[str] = None
    mac_address: Optional[str] = None
    software_version: Optional[str] = None

    lens_current: int = MIN_LENS_POSITION
    lens_target: int = MIN_LENS_POSITION
    lens_state: LensPositionState = LensPositionState.STOPPED

    _poll_task: Optional[asyncio.Task[None]] = None

    def __init__(self, client: JvcDlaClient) -> None:
        self.client = client
        self.lock = asyncio.Lock()

    @property
    def config(self) -> JvcDlaClientConfig:
        return self.client.config

    @property
    def lens_is_stopped(self) -> bool:
        return self.lens_state is LensPositionState.STOPPED

    def _update(self, attr: str, label: str, value: Any) -> None:
        if value is not None and value != getattr(self, attr):
            logger.info(f"{label}: {value}")
            setattr(self, attr, value)

    def _update_power(self, power: Optional[Power]) -> None:
        if power != self.power:
            logger.info(f"Power: {power}")
            self.power = power

    def _set_lens_state(self, state: LensPositionState) -> None:
        if state is not self.lens_state:
            logger.info(f"Lens state: {state.name}")
            self.lens_state = state

    def _update_lens_current(self, position: Optional[int]) -> None:
        if position is not None and position != self.lens_current:
            logger.info(f"Lens current: {position}")
            self.lens_current = position
        if self.lens_current == self.lens_target:
            self._set_lens_state(LensPositionState.STOPPED)

    def _update_lens_target(self, position: int) -> None:
        target = max(position // LENS_POSITION_STEP, MIN_LENS_MEMORY)
        target = min(target, MAX_LENS_MEMORY) * LENS_POSITION_STEP
        if target != self.lens_target:
            logger.info(f"Lens target: {target}")
            self.lens_target = target
        if target > self.lens_current:
            self._set_lens_state(LensPositionState.INCREASING)
        elif target < self.lens_current:
            self._set_lens_state(LensPositionState.DECREASING)
        else:
            self._set_lens_state(LensPositionState.STOPPED)

    async def poll_once(self) -> None:
        """Connects, refreshes all state, and disconnects. Errors are logged, not raised."""
        client = self.client
        async with self.lock:
            try:
                logger.debug("Polling projector status")
                await client.connect()
                self._update_power(await client.get_power())
                self._update('model_code', "Model", await client.get_model_code())
                self._update('mac_address', "MAC address", await client.get_mac_address())
                if self.power is Power.ON:
                    self._update('software_version', "Software version", await client.get_software_version())
                    lens_memory = await client.get_lens_memory()
                    self._update_lens_current(None if lens_memory is None else lens_memory * LENS_POSITION_STEP)
            except JvcDlaError as e:
                logger.info(f"[ERROR] {e}")
            except Exception:
                logger.exception("Unexpected error while polling projector")
            finally:
                client.disconnect()

    def next_poll_delay(self) -> float:
        """Seconds until the next poll: long while the projector is off, short otherwise."""
        if self.power is Power.OFF:
            return self.config.idle_poll_interval_secs
        return self.config.poll_interval_secs

    async def run(self) -> None:
        """Polls until cancelled."""
        while True:
            await self.poll_once()
            await asyncio.sleep(self.next_poll_delay())

    def start(self) -> None:
        """Starts polling in a background task."""
        if self._poll_task is None:
            self._poll_task = asyncio.get_event_loop().create_task(self.run())

    async def stop(self) -> None:
        """Stops background polling and waits for it to finish."""
        task = self._poll_task
        self._poll_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def command(self, command: Command) -> None:
        """Sends a single operation with the slow command timeout, then disconnects.

        The projector does not acknowledge power and lens operations until they
        complete, which can take many seconds.
        """
        client = self.client
        async with self.lock:
            try:
                logger.debug(f"Sending command {command}")
                await client.connect()
                client.set_timeout(self.config.command_timeout_secs)
                await client.send(command)
            except JvcDlaError as e:
                logger.info(f"[ERROR] {e}")
            except Exception:
                logger.exception(f"Unexpected error while sending {command}")
            finally:
                client.disconnect()

    async def set_power(self, on: bool) -> bool:
        """Turns the projector on or off. Returns False, without sending anything, if the
           projector is not in a state that accepts the request."""
        logger.info(f"Set power: {'on' if on else 'off'}")
        if on:
            if self.power is not Power.OFF:
                logger.info("Can't power-on (projector not off)")
                return False
            await self.command(Operation.POWER_ON)
        else:
            if self.power is not Power.ON:
                logger.info("Can't power-off (projector not on)")
                return False
            await self.command(Operation.POWER_OFF)
        return True

    async def set_lens_position(self, position: int) -> bool:
        """Moves the lens to the memory slot for a position (10..100). Returns False,
           without sending anything, if the request cannot be honored now."""
        logger.info(f"Set lens position: {position}")
        if self.power is not Power.ON:
            logger.info("Can't set lens (projector not on)")
            return False
        if not self.lens_is_stopped:
            logger.info("Can't set lens (lens not stopped)")
            return False
        if position == self.lens_current:
            logger.info("Can't set lens (lens already in position)")
            return False
        self._update_lens_target(position)
        await self.command(lens_memory_command(self.lens_target // LENS_POSITION_STEP))
        return True

    def status(self) -> JsonableDict:
        return {
            "power": None if self.power is None else str(self.power),
            "is_warming_or_on": self.power is not None and self.power.is_warming_or_on,
            "model_code": self.model_code,
            "mac_address": self.mac_address,
            "software_version": self.software_version,
            "lens_current": self.lens_current,
            "lens_target": self.lens_target,
            "lens_state": self.lens_state.name,
          }

    def __str__(self) -> str:
        return f"JvcDlaMonitor({self.client})"

    def __repr__(self) -> str:
        return str(self)
