#!/usr/bin/env python3

"""
JVC D-ILA projector known commands and decode rules.

The information in this module is derived from JVC's documentation:

JVC D-ILA Projector RS-232C, LAN and Infrared Remote Control Guide (2011)
https://support.jvc.com/consumer/support/documents/DILAremoteControlGuide.pdf

D-ILA Projector External Command Communication Specification (2018)
https://www.us.jvc.com/projectors/pdf/2018_ILA-FPJ_Ext_Command_List_v1.2.pdf

There is no I/O here; only the command tables and the pure functions that turn
response payloads into values.
"""
from __future__ import annotations

import re
from types import MappingProxyType

from ..internal_types import *
from ..exceptions import DecodeError, InvalidArgumentError
from .command import Command, operation, reference
from .power import Power

MIN_LENS_MEMORY = 1
MAX_LENS_MEMORY = 10

MODEL_PAYLOAD_LENGTH = 14
SOFTWARE_VERSION_PAYLOAD_LENGTH = 6
MAC_ADDRESS_PAYLOAD_LENGTH = 12

_model_re = re.compile(r'^ILAFPJ -- (.{4}|-.{4})$')
_software_version_re = re.compile(r'^(\d{2})(\d{2})PJ$')

model_names_map: Dict[str, List[str]] = {
    "XH4": [ "DLA-HD350" ],
    "XH7": [ "DLA-RS10" ],
    "XH5": [ "DLA-HD750", "DLA-RS20" ],
    "XH8": [ "DLA-HD550" ],
    "XHA": [ "DLA-RS15" ],
    "XH9": [ "DLA-HD950", "DLA-HD990", "DLA-RS25", "DLA-RS35" ],
    "XHB": [ "DLA-X3", "DLA-RS40" ],
    "XHC": [ "DLA-X7", "DLA-X9", "DLA-RS50", "DLA-RS60" ],
    "XHE": [ "DLA-X30", "DLA-RS45" ],
    "XHF": [ "DLA-X70R", "DLA-X90R", "DLA-RS55", "DLA-RS65" ],
    "B2A1": [ "DLA-RS3000", "DLA-NX9", "DLA-NX11", "DLA-V9R" ],
    "B2A2": [ "DLA-RS2000", "DLA-NX7", "DLA-N8", "DLA-V7" ],
    "B2A3": [ "DLA-RS1000", "DLA-NX5", "DLA-N5", "DLA-N6", "DLA-V5" ],
    "B5A1": [ "DLA-NZ9", "DLA-RS4100" ],   # Undocumented; discovered empirically
    "B5A2": [ "DLA-NZ8", "DLA-RS3100" ],   # Undocumented; discovered empirically
    "B5A3": [ "DLA-NZ7", "DLA-RS2100" ],   # Undocumented; discovered empirically
  }
"""Model codes, as returned by parse_model_code(), and the projector models they correspond to."""

def decode_power(payload: str) -> Power:
    """Decodes the payload of a power reference response."""
    try:
        return Power(payload)
    except ValueError as e:
        raise DecodeError(f"Unrecognized power state payload: {payload!r}") from e

def decode_lens_memory(payload: str) -> int:
    """Decodes the zero-based wire value of a lens memory reference response
       into a one-based memory slot."""
    if len(payload) != 1 or not payload.isdigit():
        raise DecodeError(f"Unrecognized lens memory payload: {payload!r}")
    return int(payload) + 1

def decode_text(payload: str) -> str:
    return payload

def parse_model_code(model: Optional[str]) -> Optional[str]:
    """Extracts the model code (e.g., "XH4" or "B5A2") from a model reference payload
       such as "ILAFPJ -- -XH4". Returns None if the payload is not in the expected form."""
    if model is None:
        return None
    m = _model_re.match(model)
    if m is None:
        return None
    code = m.group(1)
    if code.startswith('-'):
        code = code[1:]
    return code.strip()

def parse_software_version(version: Optional[str]) -> Optional[str]:
    """Converts a software version payload such as "0352PJ" into "03.52".
       Payloads in any other form are returned unchanged."""
    if version is None:
        return None
    m = _software_version_re.match(version)
    if m is None:
        return version
    return f"{m.group(1)}.{m.group(2)}"

def model_names(model_code: Optional[str]) -> List[str]:
    """Returns the projector model names known to report a model code; empty if unknown."""
    if model_code is None:
        return []
    return list(model_names_map.get(model_code, []))

def _lens_memory_operations() -> Mapping[int, Command]:
    return MappingProxyType(dict(
        (slot, operation(f"INML{slot - MIN_LENS_MEMORY}".encode('ascii'), name=f"lens_memory.{slot}"))
        for slot in range(MIN_LENS_MEMORY, MAX_LENS_MEMORY + 1)
      ))

class Operation:
    """Operation (write-only) commands"""
    NULL = operation(b'\x00\x00', name="null")
    POWER_OFF = operation(b'PW0', name="power.off")
    POWER_ON = operation(b'PW1', name="power.on")
    LENS_MEMORY: Mapping[int, Command] = _lens_memory_operations()
    """Lens memory recall commands, keyed by one-based memory slot"""

class Reference:
    """Reference (query) commands"""
    POWER = reference(b'PW', 1, decode_power, name="power.query")
    LENS_MEMORY = reference(b'INML', 1, decode_lens_memory, name="lens_memory.query")
    MODEL = reference(b'MD', MODEL_PAYLOAD_LENGTH, decode_text, name="model.query")
    SOFTWARE_VERSION = reference(b'IFSV', SOFTWARE_VERSION_PAYLOAD_LENGTH, decode_text, name="software_version.query")
    MAC_ADDRESS = reference(b'LSMA', MAC_ADDRESS_PAYLOAD_LENGTH, decode_text, name="mac_address.query")

def lens_memory_command(slot: int) -> Command:
    """Returns the operation that recalls a lens memory slot (1-10).

    Raises InvalidArgumentError for any other slot.
    """
    if isinstance(slot, bool) or not isinstance(slot, int):
        raise InvalidArgumentError(f"Invalid lens memory: {slot!r}")
    command = Operation.LENS_MEMORY.get(slot)
    if command is None:
        raise InvalidArgumentError(f"Invalid lens memory: {slot}")
    return command

def power_command(on: bool) -> Command:
    return Operation.POWER_ON if on else Operation.POWER_OFF

def _all_commands() -> List[Command]:
    result: List[Command] = [Operation.NULL, Operation.POWER_OFF, Operation.POWER_ON]
    result.extend(Operation.LENS_MEMORY.values())
    result.extend([
        Reference.POWER,
        Reference.LENS_MEMORY,
        Reference.MODEL,
        Reference.SOFTWARE_VERSION,
        Reference.MAC_ADDRESS,
      ])
    return result

command_metas: Mapping[str, Command] = MappingProxyType(dict((c.name, c) for c in _all_commands()))
"""All known commands, indexed by name"""

def get_all_commands() -> List[Command]:
    return list(command_metas.values())

def name_to_command(name: str) -> Command:
    command = command_metas.get(name)
    if command is None:
        raise InvalidArgumentError(f"Unknown command name: {name}")
    return command

def find_command(direction_marker: bytes, code: bytes) -> Optional[Command]:
    """Finds the known command with a given request marker and code, if any."""
    for command in command_metas.values():
        if command.direction.marker == direction_marker and command.code == code:
            return command
    return None
