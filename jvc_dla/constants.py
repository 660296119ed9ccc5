# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by jvc_dla"""

DEFAULT_PORT = 20554
"""The listen port number used by the projector for TCP/IP control."""

DEFAULT_TIMEOUT = 2.0
"""The default per-read timeout for TCP/IP control operations, in seconds. Every new
   connection starts with this timeout, including the handshake."""

SLOW_COMMAND_TIMEOUT = 60.0
"""Timeout to use for operations the projector does not acknowledge until they
   complete (power transitions, lens memory recall), in seconds."""

CONNECT_ATTEMPTS = 10
"""Number of handshake attempts before connecting is abandoned."""

CONNECT_BACKOFF = 1.1
"""Linear backoff unit between connection attempts, in seconds. After failed
   attempt n the client sleeps n * CONNECT_BACKOFF seconds."""

CONNECT_WARN_AFTER = 3
"""Connection failures on attempts up to and including this number are logged at
   DEBUG level; the projector routinely refuses a few connections while its
   connection slot is still held by a previous session."""

POLL_INTERVAL = 5.0
"""Monitor polling interval while the projector is not off, in seconds."""

IDLE_POLL_INTERVAL = 60.0
"""Monitor polling interval while the projector is off, in seconds."""
