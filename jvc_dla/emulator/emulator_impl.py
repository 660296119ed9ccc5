# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector emulator.

Provides a simple emulation of a JVC D-ILA projector on TCP/IP, with hooks for
injecting the misbehavior seen on real projectors (refused connections, silence,
garbled frames).
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    Command,
    Power,
    Operation,
    Reference,
    PJ_OK,
    PJREQ,
    PJACK,
    PJNAK,
    END_OF_PACKET_BYTES,
    find_command,
    ack_bytes,
    response_bytes,
  )

class JvcDlaEmulator(AsyncContextManager['JvcDlaEmulator']):
    """An in-process projector that speaks the JVC D-ILA protocol.

    State attributes may be changed freely by tests between (or during) sessions.
    """
    bind_addr: str
    port: int
    password: Optional[str]

    power: Power = Power.OFF
    lens_memory: int = 1
    model: str = "ILAFPJ -- -XH4"
    software_version: str = "0352PJ"
    mac_address: str = "E0DADC0A1B2C"

    greeting: bytes = PJ_OK
    """Sent on connect; set to something else to make handshakes fail."""

    refuse_connections: int = 0
    """Number of upcoming connections to close immediately without a greeting."""

    silent_codes: Set[bytes]
    """Command codes the emulator reads but never answers."""

    bad_ack_codes: Set[bytes]
    """Command codes answered with a corrupted acknowledgement."""

    bad_response_codes: Set[bytes]
    """Reference command codes answered with a corrupted response prefix."""

    requests: List[bytes]
    """Every command frame received, in order."""

    connection_count: int = 0
    server: Optional[asyncio.Server] = None
    _writers: Set[asyncio.StreamWriter]

    def __init__(
            self,
            password: Optional[str]=None,
            bind_addr: Optional[str]=None,
            port: int=0,
          ):
        self.password = password
        self.bind_addr = '127.0.0.1' if bind_addr is None else bind_addr
        self.port = port
        self.silent_codes = set()
        self.bad_ack_codes = set()
        self.bad_response_codes = set()
        self.requests = []
        self._writers = set()

    def reference_payload(self, command: Command) -> str:
        """Returns the text payload answering a reference command."""
        if command == Reference.POWER:
            return self.power.value
        if command == Reference.LENS_MEMORY:
            return str(self.lens_memory - 1)
        if command == Reference.MODEL:
            return self.model
        if command == Reference.SOFTWARE_VERSION:
            return self.software_version
        if command == Reference.MAC_ADDRESS:
            return self.mac_address
        raise ValueError(f"No payload for {command}")

    def apply_operation(self, command: Command) -> None:
        """Updates emulated state for an operation command."""
        if command == Operation.POWER_ON:
            self.power = Power.ON
        elif command == Operation.POWER_OFF:
            self.power = Power.OFF
        else:
            for slot, lens_command in Operation.LENS_MEMORY.items():
                if command == lens_command:
                    self.lens_memory = slot
                    break

    async def _handshake(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> bool:
        writer.write(self.greeting)
        await writer.drain()
        req = await reader.readexactly(len(PJREQ))
        if req != PJREQ:
            logger.debug(f"Emulator: Unexpected handshake request: {req.hex(' ')}")
            return False
        if self.password is not None and self.password != '':
            suffix = await reader.readexactly(1 + len(self.password))
            if suffix != b'_' + self.password.encode('latin-1'):
                writer.write(PJNAK)
                await writer.drain()
                return False
        writer.write(PJACK)
        await writer.drain()
        return True

    async def _handle_frame(self, frame: bytes, writer: asyncio.StreamWriter) -> bool:
        self.requests.append(frame)
        command = find_command(frame[:1], frame[3:-1])
        if command is None:
            logger.debug(f"Emulator: Unrecognized command frame: {frame.hex(' ')}")
            return False
        logger.debug(f"Emulator: Received {command}")
        if command.code in self.silent_codes:
            return True
        ack = ack_bytes(command)
        if command.code in self.bad_ack_codes:
            ack = ack[:-2] + b'?' + END_OF_PACKET_BYTES
        writer.write(ack)
        if command.is_operation:
            self.apply_operation(command)
        else:
            response = response_bytes(command, self.reference_payload(command))
            if command.code in self.bad_response_codes:
                response = b'#' + response[1:]
            writer.write(response)
        await writer.drain()
        return True

    async def handle_session(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Serves one client connection until it closes."""
        self.connection_count += 1
        self._writers.add(writer)
        try:
            if self.refuse_connections > 0:
                self.refuse_connections -= 1
                logger.debug("Emulator: Refusing connection")
                return
            if not await self._handshake(reader, writer):
                return
            while True:
                frame = await reader.readuntil(END_OF_PACKET_BYTES)
                if not await self._handle_frame(frame, writer):
                    break
        except (asyncio.IncompleteReadError, ConnectionError):
            logger.debug("Emulator: Session closed by client")
        finally:
            self._writers.discard(writer)
            writer.close()

    async def start(self) -> None:
        self.server = await asyncio.start_server(self.handle_session, host=self.bind_addr, port=self.port)
        self.port = self.server.sockets[0].getsockname()[1]
        logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")

    async def close(self) -> None:
        """Stops the emulator."""
        server = self.server
        self.server = None
        if server is not None:
            server.close()
            for writer in list(self._writers):
                writer.close()
            await server.wait_closed()

    @property
    def host(self) -> str:
        return f"{self.bind_addr}:{self.port}"

    async def __aenter__(self) -> JvcDlaEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        await self.close()
