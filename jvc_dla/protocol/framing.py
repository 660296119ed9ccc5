# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Frame encoding and validation for the JVC D-ILA protocol.

For a command with code <c0> <c1> <rest...>, the exchanged frames are:

    request:  <21 or 3f> 89 01 <c0> <c1> <rest...> 0A
    ack:      06 89 01 <c0> <c1> 0A
    response: 40 89 01 <c0> <c1> <payload> 0A          (reference commands only)

The payload of a response is always exactly command.response_length bytes.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import AckMismatchError, ResponseFramingError
from .command import Command
from .constants import (
    ACK_MARKER,
    RESPONSE_MARKER,
    UNIT_ID,
    END_OF_PACKET,
    END_OF_PACKET_BYTES,
    ACK_CODE_LENGTH,
    RESPONSE_PREFIX_LENGTH,
    TEXT_ENCODING,
  )

def request_bytes(command: Command) -> bytes:
    """The bytes sent to the projector for a command."""
    return command.direction.marker + UNIT_ID + command.code + END_OF_PACKET_BYTES

def ack_bytes(command: Command) -> bytes:
    """The exact acknowledgement the projector must send for a command."""
    return ACK_MARKER + UNIT_ID + command.code[:ACK_CODE_LENGTH] + END_OF_PACKET_BYTES

def response_prefix(command: Command) -> bytes:
    """The exact prefix of the response frame for a reference command."""
    return RESPONSE_MARKER + UNIT_ID + command.code[:ACK_CODE_LENGTH]

def response_length(command: Command) -> int:
    """Total length of the response frame for a reference command, including the terminator."""
    if command.response_length is None:
        raise ValueError(f"Operation command has no response: {command}")
    return RESPONSE_PREFIX_LENGTH + command.response_length + 1

def response_bytes(command: Command, payload: str) -> bytes:
    """Builds a complete response frame carrying a text payload."""
    data = payload.encode(TEXT_ENCODING)
    if len(data) != command.response_length:
        raise ValueError(
            f"Response payload length {len(data)} does not match {command.response_length} for {command}: {data.hex(' ')}")
    return response_prefix(command) + data + END_OF_PACKET_BYTES

def check_ack(command: Command, data: bytes) -> None:
    """Raises AckMismatchError unless data is exactly the acknowledgement for command."""
    expected = ack_bytes(command)
    if data != expected:
        raise AckMismatchError(
            f"Did not receive ACK for {command} (expected {expected.hex(' ')}): {data.hex(' ')}")

def extract_payload(command: Command, data: bytes) -> str:
    """Validates a complete response frame and returns its text payload.

    Raises ResponseFramingError if the length, prefix or terminator is wrong.
    """
    expected_length = response_length(command)
    if len(data) != expected_length:
        raise ResponseFramingError(
            f"Response length {len(data)} for {command} is not {expected_length}: {data.hex(' ')}")
    prefix = response_prefix(command)
    if data[:len(prefix)] != prefix:
        raise ResponseFramingError(
            f"Did not receive response prefix for {command} (expected {prefix.hex(' ')}): {data.hex(' ')}")
    if data[-1] != END_OF_PACKET:
        raise ResponseFramingError(f"Did not receive response end for {command}: {data.hex(' ')}")
    return data[len(prefix):-1].decode(TEXT_ENCODING)

def decode_response(command: Command, data: bytes) -> Any:
    """Validates a complete response frame and decodes its payload with the command's decoder."""
    payload = extract_payload(command, data)
    if command.decode is None:
        raise ValueError(f"Command has no decoder: {command}")
    return command.decode(payload)
