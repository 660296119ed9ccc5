# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Byte-level constants of the JVC D-ILA remote control protocol.

All frames exchanged after the handshake have the form

    <marker> 89 01 <code...> 0A

where the marker identifies the frame type.
"""

OPERATION_MARKER = b'!'
"""First byte of an operation (write-only) command frame."""

REFERENCE_MARKER = b'?'
"""First byte of a reference (query) command frame."""

ACK_MARKER = b'\x06'
"""First byte of the acknowledgement frame sent for every command."""

RESPONSE_MARKER = b'@'
"""First byte of the payload-bearing response frame that follows the ack for reference commands."""

UNIT_ID = b'\x89\x01'
"""Two-byte unit ID present in every frame. Constant for all known projector families."""

END_OF_PACKET = 0x0a
"""Terminating byte of every frame."""

END_OF_PACKET_BYTES = bytes([END_OF_PACKET])

ACK_CODE_LENGTH = 2
"""Number of leading command code bytes echoed in ack and response frames."""

RESPONSE_PREFIX_LENGTH = len(RESPONSE_MARKER) + len(UNIT_ID) + ACK_CODE_LENGTH
"""Length of the response prefix preceding the payload of a response frame."""

TEXT_ENCODING = 'latin-1'
"""Payloads are single-byte text."""
