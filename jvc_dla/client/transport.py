# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector TCP/IP transport.

Owns a single TCP connection to a projector, performs the PJ_OK/PJREQ/PJACK
handshake, and executes one command at a time over it. Does not retry; see
connection.py for connection establishment with retries.

Not safe for concurrent use: callers must not have more than one command in
flight. The projector cannot disambiguate interleaved traffic.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from ..internal_types import *
from ..exceptions import (
    JvcDlaError,
    HandshakeError,
    TransportError,
    ReadTimeoutError,
    ConnectionClosedError,
    NotConnectedError,
  )
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT
from ..pkg_logging import logger
from ..protocol import (
    Command,
    Operation,
    PJ_OK,
    PJACK,
    PJNAK,
    pjreq_bytes,
    request_bytes,
    ack_bytes,
    response_length,
    check_ack,
    decode_response,
  )

Tracer = Callable[[str], None]
"""Receives human-readable lines describing each exchange with the projector."""

def null_tracer(line: str) -> None:
    """A tracer that discards everything."""
    pass

class ConnectionState(Enum):
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    HANDSHAKING = 'handshaking'
    READY = 'ready'
    FAILED = 'failed'

class TcpJvcDlaTransport:
    """A single TCP/IP session with a JVC D-ILA projector."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    host: str
    port: int
    password: Optional[str] = None
    timeout_secs: float
    state: ConnectionState
    trace: Tracer
    _in_flight: bool = False

    def __init__(
            self,
            host: str,
            password: Optional[str]=None,
            port: int=DEFAULT_PORT,
            timeout_secs: float=DEFAULT_TIMEOUT,
            trace: Optional[Tracer]=None,
          ) -> None:
        self.host = host
        self.port = port
        self.password = password
        self.timeout_secs = timeout_secs
        self.state = ConnectionState.DISCONNECTED
        self.trace = null_tracer if trace is None else trace

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    def set_timeout(self, timeout_secs: float) -> None:
        """Sets the timeout applied to each subsequent read."""
        if timeout_secs <= 0:
            raise JvcDlaError(f"Timeout must be positive: {timeout_secs}")
        logger.debug(f"{self}: Setting timeout to {timeout_secs} seconds")
        self.timeout_secs = timeout_secs

    async def _read_exactly(self, length: int) -> bytes:
        """Reads exactly the specified number of bytes from the projector, with timeout.

        On error, the transport is closed, and no further interaction is possible.
        """
        if self.reader is None:
            raise NotConnectedError(f"{self}: Not connected")
        try:
            data = await asyncio.wait_for(self.reader.readexactly(length), self.timeout_secs)
        except asyncio.TimeoutError as e:
            self.close(failed=True)
            raise ReadTimeoutError(
                f"{self}: Timed out after {self.timeout_secs} seconds waiting for {length} bytes") from e
        except asyncio.IncompleteReadError as e:
            self.close(failed=True)
            raise ConnectionClosedError(
                f"{self}: Connection closed by projector after {len(e.partial)} of {length} bytes: {e.partial.hex(' ')}") from e
        except OSError as e:
            self.close(failed=True)
            raise TransportError(f"{self}: Read failed: {e}") from e
        logger.debug(f"{self}: Read exactly {len(data)} bytes: {data.hex(' ')}")
        return data

    async def _write_exactly(self, data: bytes) -> None:
        """Writes all of data to the projector, with timeout.

        On error, the transport is closed, and no further interaction is possible.
        """
        if self.writer is None:
            raise NotConnectedError(f"{self}: Not connected")
        try:
            logger.debug(f"{self}: Writing exactly {len(data)} bytes: {data.hex(' ')}")
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), self.timeout_secs)
        except asyncio.TimeoutError as e:
            self.close(failed=True)
            raise ReadTimeoutError(f"{self}: Timed out after {self.timeout_secs} seconds writing {len(data)} bytes") from e
        except OSError as e:
            self.close(failed=True)
            raise TransportError(f"{self}: Write failed: {e}") from e

    async def _execute(self, command: Command) -> Any:
        """Sends a command and reads its ack and, for references, its response."""
        self.trace(f"CMD {command}")
        request = request_bytes(command)
        self.trace(f">>> {request.hex(' ')}")
        await self._write_exactly(request)

        ack = await self._read_exactly(len(ack_bytes(command)))
        self.trace(f"ACK {ack.hex(' ')}")
        check_ack(command, ack)

        if command.is_operation:
            return None

        response = await self._read_exactly(response_length(command))
        self.trace(f"<<< {response.hex(' ')}")
        return decode_response(command, response)

    async def execute(self, command: Command) -> Any:
        """Executes a single command on a ready connection.

        Returns the decoded value for reference commands, or None for operations.

        Any failure is raised to the caller, and leaves the transport closed; after
        a timeout or a framing error the stream can no longer be trusted to be
        in sync with the projector.
        """
        if not self.is_ready:
            raise NotConnectedError(f"{self}: Cannot execute {command}; connection is {self.state.value}")
        return await self._execute_guarded(command)

    async def _execute_guarded(self, command: Command) -> Any:
        if self._in_flight:
            raise JvcDlaError(f"{self}: Cannot execute {command}; another command is in flight")
        self._in_flight = True
        try:
            return await self._execute(command)
        except BaseException:
            self.close(failed=True)
            raise
        finally:
            self._in_flight = False

    async def connect(self) -> None:
        """Connects to the projector and performs the handshake, with timeout.

        Raises TransportError if the TCP connection cannot be opened, and
        HandshakeError if the projector does not complete the handshake.
        On failure the transport is closed.
        """
        if self.state in (ConnectionState.CONNECTING, ConnectionState.HANDSHAKING, ConnectionState.READY):
            raise JvcDlaError(f"{self}: Already {self.state.value}")
        self.state = ConnectionState.CONNECTING
        logger.debug(f"{self}: Connecting to projector")
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), self.timeout_secs)
        except asyncio.TimeoutError as e:
            self.close(failed=True)
            raise TransportError(f"{self}: Timed out connecting") from e
        except OSError as e:
            self.close(failed=True)
            raise TransportError(f"{self}: Unable to connect: {e}") from e

        self.state = ConnectionState.HANDSHAKING
        try:
            await self._handshake()
        except HandshakeError:
            self.close(failed=True)
            raise
        except JvcDlaError as e:
            self.close(failed=True)
            raise HandshakeError(f"{self}: Handshake failed: {e}") from e
        self.state = ConnectionState.READY
        logger.info(f"{self}: Connected")

    async def _handshake(self) -> None:
        # None of the handshake blobs include a terminating newline
        greeting = await self._read_exactly(len(PJ_OK))
        if greeting != PJ_OK:
            raise HandshakeError(f"{self}: Did not receive PJ_OK (expected {PJ_OK.hex(' ')}): {greeting.hex(' ')}")
        self.trace("<<< PJ_OK")

        # newer projectors (e.g., DLA-NX8) require a password to be appended to the PJREQ blob
        # (with an underscore separator). Older projectors do not accept a password.
        self.trace(">>> PJREQ")
        await self._write_exactly(pjreq_bytes(self.password))

        pjack = await self._read_exactly(len(PJACK))
        if pjack == PJNAK:
            raise HandshakeError(f"{self}: Authentication failed (bad password?)")
        if pjack != PJACK:
            raise HandshakeError(f"{self}: Did not receive PJACK (expected {PJACK.hex(' ')}): {pjack.hex(' ')}")
        self.trace("<<< PJACK")

        # Issue a null command to make sure the projector is really listening
        await self._execute_guarded(Operation.NULL)

    def close(self, failed: bool=False) -> None:
        """Closes the socket immediately. Has no effect if already closed or never opened."""
        writer = self.writer
        self.reader = None
        self.writer = None
        if failed and self.state is not ConnectionState.DISCONNECTED:
            self.state = ConnectionState.FAILED
        elif self.state is not ConnectionState.FAILED:
            self.state = ConnectionState.DISCONNECTED
        if writer is not None:
            logger.debug(f"{self}: Closing connection")
            try:
                writer.close()
            except Exception:
                logger.debug(f"{self}: Exception while closing writer", exc_info=True)

    def __str__(self) -> str:
        return f"TcpJvcDlaTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
