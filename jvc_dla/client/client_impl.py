# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector client.

Typed property accessors over a JvcDlaConnection.

The client is safe for use by at most one caller at a time. Consumers that
issue commands concurrently (e.g., a polling loop racing a user command) must
serialize access themselves; see monitor.py.
"""

from __future__ import annotations

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    Command,
    Power,
    Reference,
    lens_memory_command,
    power_command,
    parse_model_code,
    parse_software_version,
  )

from .client_config import JvcDlaClientConfig
from .connection import JvcDlaConnection, Sleeper
from .transport import ConnectionState, Tracer

class JvcDlaClient:
    """JVC D-ILA projector TCP/IP client."""

    config: JvcDlaClientConfig
    connection: JvcDlaConnection

    def __init__(
            self,
            host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            port: Optional[int]=None,
            config: Optional[JvcDlaClientConfig]=None,
            trace: Optional[Tracer]=None,
            sleep: Optional[Sleeper]=None,
          ) -> None:
        """Creates a client. Does not connect.

        Args:
            host: The hostname or IPV4 address of the projector, as accepted by
                  resolve_dla_tcp_host(). If None, taken from config.
            password: The projector password, if it requires one.
            port: The default TCP/IP port number. If None, taken from config.
            config: Base configuration. If None, a default config is created
                    from the environment.
            trace: Optional diagnostic sink receiving a line per exchange.
            sleep: Optional replacement for asyncio.sleep between connection attempts.
        """
        self.config = JvcDlaClientConfig(
            default_host=host,
            password=password,
            default_port=port,
            base_config=config,
          )
        self.connection = JvcDlaConnection(self.config, trace=trace, sleep=sleep)

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def is_connected(self) -> bool:
        return self.connection.is_connected

    async def connect(self) -> None:
        """Connects and handshakes, retrying per config. Raises DidNotConnectError on failure."""
        await self.connection.connect()

    def disconnect(self) -> None:
        """Closes the connection immediately. Safe to call at any time, any number of times."""
        self.connection.disconnect()

    def set_timeout(self, timeout_secs: float) -> None:
        """Sets the per-read timeout of the current connection, e.g. SLOW_COMMAND_TIMEOUT
           before a power or lens operation."""
        self.connection.set_timeout(timeout_secs)

    async def execute(self, command: Command) -> Any:
        """Executes a command on the current connection. Errors propagate to the caller."""
        return await self.connection.execute(command)

    async def send(self, command: Command) -> Any:
        """Sends a command, connecting first if necessary.

        This is a best-effort call: on any failure the error is logged, the
        connection is closed and None is returned.
        """
        try:
            if not self.connection.is_connected:
                await self.connection.connect()
            return await self.connection.execute(command)
        except Exception as e:
            logger.error(f"{self}: {command} failed: {e}")
            self.disconnect()
            return None

    async def get_power(self) -> Optional[Power]:
        return await self.send(Reference.POWER)

    async def set_power(self, on: bool) -> None:
        await self.send(power_command(on))

    async def get_lens_memory(self) -> Optional[int]:
        """Returns the currently selected lens memory slot (1-10)."""
        return await self.send(Reference.LENS_MEMORY)

    async def set_lens_memory(self, slot: int) -> None:
        """Recalls a lens memory slot (1-10).

        Raises InvalidArgumentError, without sending anything, for any other slot.
        """
        command = lens_memory_command(slot)
        await self.send(command)

    async def get_model_code(self) -> Optional[str]:
        """Returns the model code, e.g. "XH4", or None if unavailable or unrecognized."""
        return parse_model_code(await self.send(Reference.MODEL))

    async def get_mac_address(self) -> Optional[str]:
        """Returns the MAC address as 12 hex digits without separators."""
        return await self.send(Reference.MAC_ADDRESS)

    async def get_software_version(self) -> Optional[str]:
        """Returns the software version, e.g. "03.52"."""
        return parse_software_version(await self.send(Reference.SOFTWARE_VERSION))

    async def __aenter__(self) -> JvcDlaClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        self.disconnect()

    def __str__(self) -> str:
        return f"JvcDlaClient(host='{self.config.default_host}', port={self.config.default_port})"

    def __repr__(self) -> str:
       return str(self)
