# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for JVC D-ILA projectors.

Refer to https://support.jvc.com/consumer/support/documents/DILAremoteControlGuide.pdf
for the official protocol documentation.
"""

from .constants import (
    OPERATION_MARKER,
    REFERENCE_MARKER,
    ACK_MARKER,
    RESPONSE_MARKER,
    UNIT_ID,
    END_OF_PACKET,
    END_OF_PACKET_BYTES,
    TEXT_ENCODING,
  )

from .handshake import (
    PJ_OK,
    PJREQ,
    PJACK,
    PJNAK,
    pjreq_bytes,
)

from .power import Power

from .command import (
    Command,
    Direction,
  )

from .command_meta import (
    Operation,
    Reference,
    MIN_LENS_MEMORY,
    MAX_LENS_MEMORY,
    model_names_map,
    model_names,
    parse_model_code,
    parse_software_version,
    lens_memory_command,
    power_command,
    get_all_commands,
    name_to_command,
    find_command,
  )

from .framing import (
    request_bytes,
    ack_bytes,
    response_prefix,
    response_length,
    response_bytes,
    check_ack,
    extract_payload,
    decode_response,
  )
