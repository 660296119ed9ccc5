# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Descriptors for commands that can be exchanged with a JVC D-ILA projector.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..internal_types import *
from .constants import OPERATION_MARKER, REFERENCE_MARKER, TEXT_ENCODING

Decoder = Callable[[str], Any]
"""Converts the text payload of a reference response into a semantic value."""

class Direction(Enum):
    """Whether a command changes projector state or queries it. The value is the
       marker byte that begins the request frame."""
    OPERATION = OPERATION_MARKER
    REFERENCE = REFERENCE_MARKER

    @property
    def marker(self) -> bytes:
        return self.value

@dataclass(frozen=True)
class Command:
    """A single operation or reference command.

    Operation commands are acknowledged only. Reference commands are acknowledged and
    then answered with a response frame carrying exactly response_length payload bytes,
    which are handed to decode.
    """
    direction: Direction
    code: bytes
    name: str = ''
    response_length: Optional[int] = None
    decode: Optional[Decoder] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if len(self.code) < 2:
            raise ValueError(f"Command code must be at least 2 bytes: {self.code!r}")
        if self.is_reference:
            if self.response_length is None or self.response_length <= 0:
                raise ValueError(f"Reference command {self.code!r} requires a positive response_length")
            if self.decode is None:
                raise ValueError(f"Reference command {self.code!r} requires a decode function")
        else:
            if self.response_length is not None or self.decode is not None:
                raise ValueError(f"Operation command {self.code!r} cannot have a response_length or decode function")

    @property
    def is_operation(self) -> bool:
        return self.direction is Direction.OPERATION

    @property
    def is_reference(self) -> bool:
        return self.direction is Direction.REFERENCE

    def __str__(self) -> str:
        label = self.code.decode(TEXT_ENCODING)
        if self.name != '':
            return f"Command({self.name}: {label!r})"
        return f"Command({label!r})"

    def __repr__(self) -> str:
        return str(self)

def operation(code: bytes, name: str='') -> Command:
    """Creates an operation command."""
    return Command(Direction.OPERATION, code, name=name)

def reference(code: bytes, response_length: int, decode: Decoder, name: str='') -> Command:
    """Creates a reference command."""
    return Command(Direction.REFERENCE, code, name=name, response_length=response_length, decode=decode)
