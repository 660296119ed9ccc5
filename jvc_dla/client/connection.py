# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector connection manager.

Establishes a handshaked TcpJvcDlaTransport with bounded retries and linear
backoff, and tears it down on request.

The projector accepts a single control connection at a time and keeps the slot
busy for a while after a previous session ends, so the first few attempts of a
connect routinely fail.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..exceptions import JvcDlaError, DidNotConnectError, NotConnectedError
from ..pkg_logging import logger
from ..protocol import Command

from .client_config import JvcDlaClientConfig
from .resolve_host import resolve_dla_tcp_host
from .transport import TcpJvcDlaTransport, ConnectionState, Tracer, null_tracer

Sleeper = Callable[[float], Awaitable[None]]

class JvcDlaConnection:
    """Manages the lifecycle of the one TCP session a client may hold."""

    config: JvcDlaClientConfig
    transport: Optional[TcpJvcDlaTransport] = None
    trace: Tracer
    sleep: Sleeper

    def __init__(
            self,
            config: Optional[JvcDlaClientConfig]=None,
            trace: Optional[Tracer]=None,
            sleep: Optional[Sleeper]=None,
          ) -> None:
        """Creates a connection manager.

        Args:
            config: Host, port, password, timeout and retry settings. If None,
                    a default config is created from the environment.
            trace:  Optional diagnostic sink for byte-level exchange traces.
            sleep:  Coroutine function used for the backoff between attempts;
                    asyncio.sleep if None.
        """
        self.config = JvcDlaClientConfig(base_config=config)
        self.trace = null_tracer if trace is None else trace
        self.sleep = asyncio.sleep if sleep is None else sleep

    @property
    def state(self) -> ConnectionState:
        if self.transport is None:
            return ConnectionState.DISCONNECTED
        return self.transport.state

    @property
    def is_connected(self) -> bool:
        return self.transport is not None and self.transport.is_ready

    async def _connect_once(self, host: str, port: int) -> TcpJvcDlaTransport:
        transport = TcpJvcDlaTransport(
            host,
            password=self.config.password,
            port=port,
            timeout_secs=self.config.timeout_secs,
            trace=self.trace,
          )
        # Keep a reference so that disconnect() can abort a pending attempt
        self.transport = transport
        await transport.connect()
        return transport

    async def connect(self) -> None:
        """Connects and handshakes, retrying with linear backoff.

        Any existing connection is torn down first. After failed attempt n,
        sleeps n * connect_backoff_secs before trying again. Raises
        DidNotConnectError once config.connect_attempts attempts have failed.
        """
        self.disconnect()
        try:
            host, port, _ = await resolve_dla_tcp_host(self.config.default_host, self.config.default_port)
        except Exception as e:
            raise DidNotConnectError(f"Unable to resolve projector host {self.config.default_host!r}: {e}") from e
        attempts = self.config.connect_attempts
        last_error: Optional[BaseException] = None
        for attempt in range(1, attempts + 1):
            try:
                await self._connect_once(host, port)
                return
            except (JvcDlaError, OSError) as e:
                last_error = e
                self.disconnect()
                if attempt > self.config.connect_warn_after:
                    logger.warning(f"Connection attempt {attempt}/{attempts} to {host}:{port} failed: {e}")
                else:
                    logger.debug(f"Connection attempt {attempt}/{attempts} to {host}:{port} failed: {e}")
            if attempt < attempts:
                await self.sleep(attempt * self.config.connect_backoff_secs)
        raise DidNotConnectError(f"Did not connect to {host}:{port} after {attempts} attempts") from last_error

    def disconnect(self) -> None:
        """Closes the connection immediately. Has no effect if not connected."""
        transport = self.transport
        self.transport = None
        if transport is not None:
            transport.close()

    def set_timeout(self, timeout_secs: float) -> None:
        """Sets the read timeout of the current connection. Has no effect if not
           connected; each new connection starts with config.timeout_secs."""
        if self.transport is not None:
            self.transport.set_timeout(timeout_secs)

    async def execute(self, command: Command) -> Any:
        """Executes a command on the current connection; errors propagate."""
        if self.transport is None:
            raise NotConnectedError(f"Cannot execute {command}; not connected")
        return await self.transport.execute(command)

    def __str__(self) -> str:
        return f"JvcDlaConnection(host='{self.config.default_host}', port={self.config.default_port})"

    def __repr__(self) -> str:
        return str(self)
