# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
JVC D-ILA projector emulator.

Provides a simple emulation of a JVC D-ILA projector on TCP/IP.
"""

from .emulator_impl import JvcDlaEmulator
