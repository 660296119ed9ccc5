# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Projector power states."""

from __future__ import annotations

from enum import Enum

class Power(Enum):
    """The lamp/power state reported by the projector.

    The value is the single-character payload of the power reference response.
    """
    OFF = '0'         # Standby
    ON = '1'          # Lamp on
    COOLING = '2'
    WARMING = '3'     # Not documented; determined empirically
    EMERGENCY = '4'

    @property
    def is_off(self) -> bool:
        return self is Power.OFF

    @property
    def is_on(self) -> bool:
        return self is Power.ON

    @property
    def is_cooling(self) -> bool:
        return self is Power.COOLING

    @property
    def is_warming(self) -> bool:
        return self is Power.WARMING

    @property
    def is_emergency(self) -> bool:
        return self is Power.EMERGENCY

    @property
    def is_warming_or_on(self) -> bool:
        """True if the projector is on or about to be."""
        return self in (Power.WARMING, Power.ON)

    def __str__(self) -> str:
        return self.name.capitalize()
